"""
Compile every allowed class of every configured ontology.

Ontologies are loaded and reasoned over before any class is compiled; from
then on they are only read, so classes can be compiled by a thread pool
(``workers > 1``) with one ClassVisitor per class.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from rdflib import URIRef

from .config import YamlConfig
from .exceptions import InconsistentOntologyError
from .markdown import merge_markdown_maps
from .ontology import Ontology
from .paths import ClassPathPolicy, build_class_policy
from .schema import SchemaNode
from .visitor import ClassVisitor

logger = logging.getLogger(__name__)


@dataclass
class CompiledClass:
    class_iri: URIRef
    schema: SchemaNode
    referenced_classes: set
    markdown: dict


@dataclass
class MappingResult:
    schemas: dict = field(default_factory=dict)     # prefixed name -> SchemaNode
    class_names: dict = field(default_factory=dict)  # class IRI -> prefixed name
    markdown: dict = field(default_factory=dict)
    policies: list = field(default_factory=list)    # ClassPathPolicy


def compile_class(cls, ontology: Ontology, config: YamlConfig) -> CompiledClass:
    visitor = ClassVisitor(cls, ontology, config)
    schema = visitor.get_class_schema()
    ctx = visitor.context
    return CompiledClass(
        class_iri=cls,
        schema=schema,
        referenced_classes=set(ctx.referenced_classes),
        markdown=ctx.markdown_generation_map,
    )


class Mapper:
    def __init__(self, config: YamlConfig, ontologies: list[Ontology] | None = None, workers: int = 1):
        self.config = config
        self.workers = max(1, int(workers or 1))
        self.ontologies = ontologies if ontologies is not None else [Ontology.load(o) for o in config.ontologies]
        for ont in self.ontologies:
            if not ont.is_consistent():
                raise InconsistentOntologyError(
                    f"Ontology {ont.location or ''} is inconsistent. Unable to generate schemas."
                )

    def allowed_classes(self, ontology: Ontology) -> list[URIRef]:
        """Configured classes found in ``ontology``, or all of its classes when none are configured."""
        configured = self.config.configured_class_iris
        classes = ontology.classes()
        if not configured:
            return classes
        known = set(classes)
        return [URIRef(iri) for iri in configured if URIRef(iri) in known]

    def _path_classes(self, ontology: Ontology) -> list[URIRef]:
        """Classes that get paths: configured path classes, or all of them when nothing is configured."""
        if not self.config.configured_class_iris:
            return ontology.classes()
        known = set(ontology.classes())
        return [URIRef(iri) for iri in self.config.path_config.path_classes if URIRef(iri) in known]

    def _compile_batch(self, classes, ontology: Ontology) -> list[CompiledClass]:
        if self.workers == 1 or len(classes) < 2:
            return [compile_class(c, ontology, self.config) for c in classes]
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            return list(pool.map(lambda c: compile_class(c, ontology, self.config), classes))

    def run(self) -> MappingResult:
        result = MappingResult()
        for ontology in self.ontologies:
            done: set = set()
            pending = [c for c in self.allowed_classes(ontology) if c not in done]
            while pending:
                compiled = self._compile_batch(pending, ontology)
                done.update(pending)
                pending = []
                for item in compiled:
                    name = item.schema.name
                    if name in result.schemas and result.class_names.get(item.class_iri) != name:
                        logger.warning("Schema name %s is used by more than one class; keeping the last", name)
                    result.schemas[name] = item.schema
                    result.class_names[item.class_iri] = name
                    merge_markdown_maps(result.markdown, item.markdown)
                    if self.config.flags.follow_references:
                        for ref in sorted(item.referenced_classes, key=str):
                            if ref not in done and ref not in pending:
                                pending.append(ref)
                if pending:
                    logger.info("Following %d referenced class(es)", len(pending))

            for cls in self._path_classes(ontology):
                name = result.class_names.get(cls)
                if name is None:
                    continue
                policy: ClassPathPolicy = build_class_policy(
                    cls, name, ontology.short_form(cls), self.config.path_config
                )
                result.policies.append(policy)

        logger.info("Generated %d schema(s) and %d path policies", len(result.schemas), len(result.policies))
        return result
