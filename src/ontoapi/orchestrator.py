"""
Finishing pipeline for one class schema.

Stages run in a fixed order over the visitor's context:

  1. clean_up_enum_properties
  2. generate_required_properties
  3. convert_array_properties
  4. handle_inheritance_references
  5. prune_unused_referenced_classes

and then the markdown annotations are collected for the referenced classes
that survived. Each stage leaves its own output unchanged when run again.
"""

import logging

from rdflib import URIRef

from .builder import generate_required_properties_for_class_schemas
from .markdown import set_markdown_content_from_axiom_annotations
from .properties import convert_array_to_non_array_property_schemas
from .schema import SchemaNode

logger = logging.getLogger(__name__)


def _unresolved(prop: SchemaNode) -> bool:
    return (
        prop.type in (None, "array")
        and prop.ref is None
        and prop.enum is None
        and not prop.is_composed
        and prop.not_ is None
    )


class SchemaOrchestrator:
    def __init__(self, context):
        self.context = context
        self.ontology = context.ontology
        self.flags = context.flags

    @property
    def schema(self) -> SchemaNode:
        return self.context.class_schema

    def generate_schema(self) -> SchemaNode:
        self.clean_up_enum_properties()
        self.generate_required_properties()
        self.convert_array_properties()
        self.handle_inheritance_references()
        self.prune_unused_referenced_classes()
        set_markdown_content_from_axiom_annotations(self.context)
        return self.schema

    # 1
    def clean_up_enum_properties(self) -> None:
        for name, prop in self.schema.properties.items():
            if prop.items is None:
                if _unresolved(prop):
                    logger.debug("Property %s of %s has no item shape, using object", name, self.schema.name)
                    prop.type = "object"
            elif prop.items.enum is not None and len(prop.items.enum) == 1 and prop.items.default is not None:
                prop.items.enum = None

    # 2
    def generate_required_properties(self) -> None:
        if self.schema.is_enum:
            self.schema.required = []
            self.context.required_properties.clear()
            return
        if self.flags.required_properties_from_cardinality:
            generate_required_properties_for_class_schemas(self.schema, self.context.functional_properties)
            self.context.sync_required_properties()

    # 3
    def convert_array_properties(self) -> None:
        if self.flags.always_generate_arrays or self.schema.is_enum:
            return
        renames = convert_array_to_non_array_property_schemas(
            self.schema,
            self.context.enum_properties,
            self.context.functional_properties,
            self.flags.fix_singular_plural_property_names,
        )
        self.context.rename_properties(renames)
        self.context.sync_required_properties()

    # 4
    def direct_superclasses(self, ancestors) -> list:
        """Drop every ancestor that is reachable through another ancestor."""
        ancestors = sorted(ancestors, key=str)
        direct = set(ancestors)
        for a in ancestors:
            for b in ancestors:
                if a == b or b not in direct or a not in direct:
                    continue
                if self.ontology.is_subclass_of(a, b):
                    # equivalent classes: keep the first one
                    if self.ontology.is_subclass_of(b, a) and str(b) < str(a):
                        continue
                    direct.discard(b)
        return [c for c in ancestors if c in direct]

    def handle_inheritance_references(self) -> None:
        schema = self.schema
        if schema.is_enum or not self.flags.inheritance_references:
            return
        ctx = self.context
        ancestors = [c for c in ctx.processed_classes if c != ctx.base_class]
        direct = [c for c in self.direct_superclasses(ancestors) if c in ctx.referenced_classes]
        if direct:
            all_of = list(schema.all_of or [])
            if not any(e.type == "object" and e.ref is None for e in all_of):
                all_of.insert(0, SchemaNode(type="object"))
            for cls in sorted(direct, key=lambda c: self.ontology.prefixed_name(c)):
                ref = SchemaNode.reference(self.ontology.prefixed_name(cls))
                if ref not in all_of:
                    all_of.append(ref)
            schema.all_of = all_of
        if schema.properties and not schema.all_of and schema.type is None:
            schema.type = "object"

    # 5
    def is_load_bearing(self, cls) -> bool:
        ont = self.ontology
        if ont.equivalent_expressions(cls):
            return True
        if any(not isinstance(e, URIRef) for e in ont.subclass_expressions(cls)):
            return True
        if ont.is_domain_of_data_property(cls):
            return True
        for prop in ont.object_properties():
            short = ont.short_form(prop)
            # array conversion may have renamed the property on this schema
            name = self.context.property_renames.get(short, short)
            if name in self.schema.properties and cls in ont.range_classes(prop):
                return True
        return False

    def prune_unused_referenced_classes(self) -> None:
        ctx = self.context
        schema = self.schema
        for cls in sorted(ctx.referenced_classes, key=str):
            if cls == ctx.base_class or self.is_load_bearing(cls):
                continue
            ctx.referenced_classes.discard(cls)
            if schema.all_of:
                name = self.ontology.prefixed_name(cls)
                schema.all_of = [e for e in schema.all_of if e.ref_name != name]
            logger.debug("Pruned unused reference %s from %s", cls, schema.name)
        if schema.all_of is not None and not any(e.ref for e in schema.all_of):
            schema.all_of = None
