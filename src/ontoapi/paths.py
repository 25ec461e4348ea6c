"""
Per-class operation policy and path shapes.

``resolve_operations`` merges the global enable flags of ``path_config`` with
the class's allow/deny override:

  - a non-empty allow-set enables exactly those operations,
  - a non-empty deny-set removes operations that would otherwise be enabled,
  - with neither, the global flags apply unchanged.

``disable_all_paths`` turns everything off, allow-sets included.
"""

import logging
from dataclasses import dataclass, field

from .config import PathConfig
from .inflection import pluralize, to_kebab_case
from .operations import HttpMethod, OperationType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathOperation:
    operation: OperationType
    path: str
    http_method: str
    key_name: str | None = None


@dataclass
class ClassPathPolicy:
    class_iri: str
    schema_name: str
    base_path: str
    operations: list[PathOperation] = field(default_factory=list)

    @property
    def operation_types(self) -> set[OperationType]:
        return {o.operation for o in self.operations}

    def paths(self) -> dict[str, dict[str, PathOperation]]:
        """path -> http method -> operation, in declaration order."""
        out: dict[str, dict[str, PathOperation]] = {}
        for o in self.operations:
            out.setdefault(o.path, {})[o.http_method] = o
        return out


def resolve_operations(class_iri, path_config: PathConfig) -> set[OperationType]:
    """The set of operations exposed for ``class_iri``."""
    if path_config.disable_all_paths:
        return set()
    override = path_config.paths_for_class(class_iri)
    if override.allow_operations:
        enabled = set(override.allow_operations)
    else:
        enabled = {op for op in OperationType if path_config.is_globally_enabled(op)}
    enabled -= set(override.deny_operations)
    return enabled


def base_path_for(schema_local_name: str, path_config: PathConfig) -> str:
    name = to_kebab_case(schema_local_name) if path_config.use_kebab_case_paths else schema_local_name
    return "/" + pluralize(name).lower()


def _path_for(op: OperationType, base: str, path_config: PathConfig) -> tuple[str, str | None]:
    cfg = path_config.operation(op)
    if op.is_keyed:
        key = cfg.key_name or "id"
        return f"{base}/{{{key}}}", key
    if op in (OperationType.POST_BULK, OperationType.PUT_BULK, OperationType.SEARCH_BY_POST):
        suffix = (cfg.path_suffix or "").strip("/")
        return (f"{base}/{suffix}" if suffix else base), None
    return base, None


def build_class_policy(class_iri, schema_name: str, schema_local_name: str, path_config: PathConfig) -> ClassPathPolicy:
    base = base_path_for(schema_local_name, path_config)
    policy = ClassPathPolicy(class_iri=str(class_iri), schema_name=schema_name, base_path=base)
    enabled = resolve_operations(class_iri, path_config)
    # stable order: registry declaration order
    for op in OperationType:
        if op not in enabled:
            continue
        path, key = _path_for(op, base, path_config)
        method = HttpMethod.POST.value if op.method is HttpMethod.SEARCH else op.method.value
        policy.operations.append(PathOperation(operation=op, path=path, http_method=method, key_name=key))
    logger.debug("Operations for %s: %s", class_iri, ", ".join(o.operation.label for o in policy.operations) or "none")
    return policy
