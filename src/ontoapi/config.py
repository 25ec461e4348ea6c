"""
Configuration for a compile run.

The YAML file is read once with ``yaml.safe_load`` and bound into frozen
dataclasses, so the flags seen by every compiler stage are an immutable
snapshot for the whole run. Structural problems raise ConfigValidationError.

Example::

    name: people-api
    output_dir: outputs
    ontologies:
      - ontologies/people.ttl
    use_inheritance_references: true
    path_config:
      paths_for_classes:
        - class_iri: https://example.org/people#Person
          allow_operations: [get_all, get_by_key]
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigValidationError
from .operations import OperationType, PathKeyType, operation_for_label

logger = logging.getLogger(__name__)


def _as_bool(data: dict, key: str, default: bool) -> bool:
    val = data.get(key, default)
    if val is None:
        return default
    if isinstance(val, bool):
        return val
    if isinstance(val, str) and val.strip().lower() in ("true", "yes", "1"):
        return True
    if isinstance(val, str) and val.strip().lower() in ("false", "no", "0"):
        return False
    raise ConfigValidationError(f"Config key '{key}' must be a boolean, got {val!r}")


def _as_list(data: dict, key: str) -> list:
    val = data.get(key) or []
    if isinstance(val, (str, dict)):
        return [val]
    return list(val)


def _section(data: dict, key: str) -> dict:
    val = data.get(key) or {}
    if not isinstance(val, dict):
        raise ConfigValidationError(f"Config section '{key}' must be a mapping")
    return val


# --------------------
# Global flags
# --------------------
@dataclass(frozen=True)
class GlobalFlags:
    """Boolean switches consulted by every compiler stage."""

    follow_references: bool = True
    use_inheritance_references: bool = False
    default_descriptions: bool = True
    default_properties: bool = True
    always_generate_arrays: bool = True
    required_properties_from_cardinality: bool = False
    fix_singular_plural_property_names: bool = False
    generate_json_file: bool = False

    @property
    def inheritance_references(self) -> bool:
        return self.follow_references and self.use_inheritance_references

    @classmethod
    def from_dict(cls, data: dict) -> "GlobalFlags":
        return cls(
            follow_references=_as_bool(data, "follow_references", True),
            use_inheritance_references=_as_bool(data, "use_inheritance_references", False),
            default_descriptions=_as_bool(data, "default_descriptions", True),
            default_properties=_as_bool(data, "default_properties", True),
            always_generate_arrays=_as_bool(data, "always_generate_arrays", True),
            required_properties_from_cardinality=_as_bool(data, "required_properties_from_cardinality", False),
            fix_singular_plural_property_names=_as_bool(data, "fix_singular_plural_property_names", False),
            generate_json_file=_as_bool(data, "generate_json_file", False),
        )


# --------------------
# Annotations
# --------------------
@dataclass(frozen=True)
class PropertyAnnotationConfig:
    read_only_flag_name: str | None = None
    write_only_flag_name: str | None = None
    example_value_name: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "PropertyAnnotationConfig":
        return cls(
            read_only_flag_name=data.get("read_only_flag_name"),
            write_only_flag_name=data.get("write_only_flag_name"),
            example_value_name=data.get("example_value_name"),
        )


@dataclass(frozen=True)
class MarkdownAnnotationConfig:
    annotation_name: str
    markdown_heading: str | None = None
    markdown_description: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "MarkdownAnnotationConfig":
        name = data.get("annotation_name")
        if not name:
            raise ConfigValidationError("Every markdown_generation_annotations entry needs an 'annotation_name'")
        return cls(
            annotation_name=str(name),
            markdown_heading=data.get("markdown_heading"),
            markdown_description=data.get("markdown_description"),
        )


@dataclass(frozen=True)
class AnnotationConfig:
    property_annotations: PropertyAnnotationConfig = field(default_factory=PropertyAnnotationConfig)
    markdown_generation_filename: str | None = None
    markdown_generation_annotations: tuple[MarkdownAnnotationConfig, ...] = ()

    @property
    def markdown_annotation_names(self) -> set[str]:
        return {m.annotation_name for m in self.markdown_generation_annotations}

    @classmethod
    def from_dict(cls, data: dict) -> "AnnotationConfig":
        return cls(
            property_annotations=PropertyAnnotationConfig.from_dict(_section(data, "property_annotations")),
            markdown_generation_filename=data.get("markdown_generation_filename"),
            markdown_generation_annotations=tuple(
                MarkdownAnnotationConfig.from_dict(m) for m in _as_list(data, "markdown_generation_annotations")
            ),
        )


# --------------------
# Paths
# --------------------
@dataclass(frozen=True)
class OperationPathConfig:
    """Settings of one operation kind (``get_paths.get_by_key`` and friends)."""

    enable: bool = False
    path_suffix: str | None = None
    key_name: str | None = None
    key_name_in_text: str | None = None
    key_type: PathKeyType | None = None
    response_array: bool = False
    search_properties: tuple[str, ...] = ()
    search_property_types: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, op: OperationType, data: dict, enable: bool, path_suffix: str | None = None):
        key_name = key_name_in_text = None
        key_type = None
        if op.is_keyed:
            key_name = str(data.get("key_name") or "id")
            key_name_in_text = str(data.get("key_name_in_text") or key_name)
            raw_type = data.get("key_type", "string")
            key_type = PathKeyType.from_label(raw_type)
            if key_type is None:
                raise ConfigValidationError(
                    f"Unknown key_type '{raw_type}' for {op.label}; "
                    f"expected one of {', '.join(t.value for t in PathKeyType)}"
                )
        return cls(
            enable=_as_bool(data, "enable", enable),
            path_suffix=data.get("path_suffix", path_suffix),
            key_name=key_name,
            key_name_in_text=key_name_in_text,
            key_type=key_type,
            response_array=_as_bool(data, "response_array", False),
            search_properties=tuple(_as_list(data, "search_properties")),
            search_property_types=tuple(_as_list(data, "search_property_types")),
        )


# section key, operation, enabled by default, default suffix
_OPERATION_SECTIONS = (
    ("get_paths", OperationType.GET_ALL, True, None),
    ("get_paths", OperationType.GET_BY_KEY, True, None),
    ("post_paths", OperationType.POST_BULK, False, "_bulk"),
    ("post_paths", OperationType.POST_SINGLE, False, None),
    ("put_paths", OperationType.PUT_BULK, False, "_bulk"),
    ("put_paths", OperationType.PUT_BY_KEY, False, None),
    ("delete_paths", OperationType.DELETE_BY_KEY, False, None),
    ("search_paths", OperationType.SEARCH_BY_POST, False, "_search"),
)


def _operation_labels(values, what: str, class_iri: str) -> frozenset:
    ops = set()
    for label in values:
        op = operation_for_label(label)
        if op is None:
            raise ConfigValidationError(
                f"Unknown operation '{label}' in {what} for class '{class_iri}'"
            )
        ops.add(op)
    return frozenset(ops)


@dataclass(frozen=True)
class PathsForClassConfig:
    """Per-class allow/deny override of the global operation flags."""

    class_iri: str = ""
    allow_operations: frozenset = frozenset()
    deny_operations: frozenset = frozenset()

    def __post_init__(self):
        overlap = self.allow_operations & self.deny_operations
        if overlap:
            labels = ", ".join(sorted(op.label for op in overlap))
            raise ConfigValidationError(
                "Classes in `paths_for_classes` cannot contain the same entry in "
                f"`allow_operations` and `deny_operations` ({labels}). See class IRI: '{self.class_iri}'"
            )

    @classmethod
    def from_dict(cls, data: dict) -> "PathsForClassConfig":
        class_iri = data.get("class_iri")
        if not class_iri:
            raise ConfigValidationError("Every paths_for_classes entry needs a 'class_iri'")
        return cls(
            class_iri=str(class_iri),
            allow_operations=_operation_labels(_as_list(data, "allow_operations"), "allow_operations", class_iri),
            deny_operations=_operation_labels(_as_list(data, "deny_operations"), "deny_operations", class_iri),
        )


@dataclass(frozen=True)
class PathConfig:
    disable_all_paths: bool = False
    use_common_default_path_responses: bool = True
    use_kebab_case_paths: bool = False
    paths_for_classes: tuple[PathsForClassConfig, ...] = ()
    operations: dict = field(default_factory=dict)

    def operation(self, op: OperationType) -> OperationPathConfig:
        cfg = self.operations.get(op)
        if cfg is None:
            for _, section_op, enabled, suffix in _OPERATION_SECTIONS:
                if section_op is op:
                    return OperationPathConfig.from_dict(op, {}, enabled, suffix)
        return cfg

    def is_globally_enabled(self, op: OperationType) -> bool:
        return not self.disable_all_paths and self.operation(op).enable

    def paths_for_class(self, class_iri) -> PathsForClassConfig:
        """The override for ``class_iri``, or an empty one."""
        for entry in self.paths_for_classes:
            if entry.class_iri == str(class_iri):
                return entry
        return PathsForClassConfig(class_iri=str(class_iri))

    @property
    def path_classes(self) -> list[str]:
        return [entry.class_iri for entry in self.paths_for_classes]

    @classmethod
    def from_dict(cls, data: dict) -> "PathConfig":
        operations = {}
        for section, op, enabled, suffix in _OPERATION_SECTIONS:
            op_data = _section(_section(data, section), op.label)
            operations[op] = OperationPathConfig.from_dict(op, op_data, enabled, suffix)
        return cls(
            disable_all_paths=_as_bool(data, "disable_all_paths", False),
            use_common_default_path_responses=_as_bool(data, "use_common_default_path_responses", True),
            use_kebab_case_paths=_as_bool(data, "use_kebab_case_paths", False),
            paths_for_classes=tuple(PathsForClassConfig.from_dict(p) for p in _as_list(data, "paths_for_classes")),
            operations=operations,
        )


# --------------------
# Whole run
# --------------------
@dataclass(frozen=True)
class YamlConfig:
    name: str
    output_dir: str
    ontologies: tuple[str, ...]
    flags: GlobalFlags = field(default_factory=GlobalFlags)
    annotation_config: AnnotationConfig = field(default_factory=AnnotationConfig)
    path_config: PathConfig = field(default_factory=PathConfig)
    extra_class_schemas: tuple[str, ...] = ()
    openapi: dict = field(default_factory=dict)

    @property
    def output_path(self) -> Path:
        """``output_dir/<name>`` with path separators in the name replaced."""
        safe = re.sub(r"[\\/:]+", "_", self.name).strip() or "api"
        return Path(self.output_dir) / safe

    @property
    def configured_class_iris(self) -> list[str]:
        iris = list(self.path_config.path_classes)
        for iri in self.extra_class_schemas:
            if iri not in iris:
                iris.append(iri)
        return iris

    @classmethod
    def from_dict(cls, data: Any) -> "YamlConfig":
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration must be a YAML mapping")
        missing = [k for k in ("name", "output_dir", "ontologies") if not data.get(k)]
        if missing:
            raise ConfigValidationError(f"Missing required configuration key(s): {', '.join(missing)}")
        openapi = data.get("openapi") or {}
        if not isinstance(openapi, dict):
            raise ConfigValidationError("Config section 'openapi' must be a mapping")
        return cls(
            name=str(data["name"]),
            output_dir=str(data["output_dir"]),
            ontologies=tuple(str(o) for o in _as_list(data, "ontologies")),
            flags=GlobalFlags.from_dict(data),
            annotation_config=AnnotationConfig.from_dict(_section(data, "annotation_config")),
            path_config=PathConfig.from_dict(_section(data, "path_config")),
            extra_class_schemas=tuple(str(i) for i in _as_list(data, "extra_class_schemas")),
            openapi=openapi,
        )

    @classmethod
    def from_yaml(cls, path) -> "YamlConfig":
        """Load configuration from YAML file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigValidationError(f"Cannot read configuration file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigValidationError(f"Invalid YAML in {path}: {e}") from e
        logger.debug("Loaded configuration from %s", path)
        return cls.from_dict(data)
