"""
Walk one base class and everything it inherits, filling a VisitorContext.

One ClassVisitor owns one VisitorContext; nothing in it is shared with other
classes being compiled, so visitors for different classes can run on
different threads over the same Ontology.
"""

import logging
from dataclasses import dataclass, field

from rdflib import BNode, Literal, URIRef
from rdflib.namespace import OWL, RDFS, XSD

from .annotations import apply_axiom_annotations, apply_entity_annotations
from .builder import get_base_class_basic_schema
from .config import YamlConfig
from .constants import DEFAULT_DESCRIPTION
from .ontology import Ontology, literal_value
from .orchestrator import SchemaOrchestrator
from .properties import (
    add_exact_cardinality,
    add_has_value,
    add_max_cardinality,
    add_min_cardinality,
    array_property,
    datatype_schema,
    set_functional,
    set_items,
)
from .restrictions import RestrictionKind, cardinality_of, classify, filler_of, rdf_list
from .schema import SchemaNode

logger = logging.getLogger(__name__)


@dataclass
class VisitorContext:
    """State for compiling one base class."""

    base_class: URIRef
    ontology: Ontology
    config: YamlConfig
    class_schema: SchemaNode | None = None
    processed_classes: set = field(default_factory=set)
    referenced_classes: set = field(default_factory=set)
    property_names: set = field(default_factory=set)
    functional_properties: set = field(default_factory=set)
    enum_properties: set = field(default_factory=set)
    required_properties: set = field(default_factory=set)
    markdown_generation_map: dict = field(default_factory=dict)
    property_renames: dict = field(default_factory=dict)

    @property
    def flags(self):
        return self.config.flags

    def add_required_property(self, name: str) -> None:
        self.required_properties.add(name)

    def sync_required_properties(self) -> None:
        """Re-derive the required accumulator from the schema's own list."""
        self.required_properties = set(self.class_schema.required) if self.class_schema else set()

    def rename_properties(self, renames: dict) -> None:
        for old, new in renames.items():
            self.property_renames[old] = new
            for names in (self.property_names, self.functional_properties, self.enum_properties):
                if old in names:
                    names.discard(old)
                    names.add(new)


class ClassVisitor:
    """
    Builds the in-progress schema of ``base_class``.

    The base class is visited first, then every named ancestor. With
    inheritance references on, ancestors are only recorded (their
    properties live in their own schemas); otherwise their properties and
    restrictions are flattened into the base schema.
    """

    def __init__(self, base_class, ontology: Ontology, config: YamlConfig):
        self.ontology = ontology
        self.g = ontology.graph
        self.context = VisitorContext(base_class=base_class, ontology=ontology, config=config)
        self.context.class_schema = get_base_class_basic_schema(base_class, ontology, config.flags)
        self.visit_class(base_class)

    @property
    def schema(self) -> SchemaNode:
        return self.context.class_schema

    def get_class_schema(self) -> SchemaNode:
        return SchemaOrchestrator(self.context).generate_schema()

    # --------------------
    # Classes
    # --------------------
    def visit_class(self, cls) -> None:
        ctx = self.context
        if cls == OWL.Thing or cls in ctx.processed_classes:
            return
        ctx.processed_classes.add(cls)
        if ctx.flags.inheritance_references:
            ctx.referenced_classes.add(cls)

        if cls == ctx.base_class or not ctx.flags.use_inheritance_references:
            self._visit_equivalent_classes(cls)
            for prop in self.ontology.properties_with_domain(cls):
                self._add_property(prop)
            for expr in self.ontology.subclass_expressions(cls):
                if isinstance(expr, URIRef):
                    continue
                self._visit_expression(cls, expr, (cls, RDFS.subClassOf, expr))

        if cls == ctx.base_class:
            for sup in self.ontology.super_classes(cls):
                self.visit_class(sup)

    def _visit_equivalent_classes(self, cls) -> None:
        for expr in self.ontology.equivalent_expressions(cls):
            if isinstance(expr, URIRef):
                continue
            kind = classify(self.g, expr)
            if kind is RestrictionKind.OBJECT_ONE_OF:
                if cls == self.context.base_class:
                    values = [literal_value(m) for m in rdf_list(self.g, self.g.value(expr, OWL.oneOf))]
                    self.schema.make_enum(values)
                    logger.debug("%s is an enumeration of %d individuals", self.schema.name, len(values))
            elif kind is RestrictionKind.OBJECT_INTERSECTION_OF:
                for member in rdf_list(self.g, self.g.value(expr, OWL.intersectionOf)):
                    if isinstance(member, BNode):
                        self._visit_expression(cls, member, (cls, OWL.equivalentClass, expr))
            else:
                self._visit_expression(cls, expr, (cls, OWL.equivalentClass, expr))

    # --------------------
    # Properties
    # --------------------
    def _add_property(self, prop) -> SchemaNode | None:
        """Property schema from the declaration of ``prop``; an existing one wins."""
        ctx = self.context
        schema = self.schema
        if schema.is_enum:
            return None
        name = self.ontology.short_form(prop)
        if name in ctx.property_names:
            return schema.properties.get(name)

        description = self.ontology.description(prop, ctx.flags.default_descriptions)
        if self.ontology.is_data_property(prop):
            items = [self._data_items(r) for r in self.ontology.range_nodes(prop)]
            prop_schema = array_property(name, description, items or [SchemaNode(type="string")])
        elif self.ontology.is_object_property(prop):
            ranges = self.ontology.range_classes(prop)
            ctx.referenced_classes.update(ranges)
            if any(self.ontology.equivalent_expressions(r) for r in ranges):
                ctx.enum_properties.add(name)
            items = [self._class_items(r) for r in ranges]
            prop_schema = array_property(name, description, items or [SchemaNode(type="object")])
        else:
            # only known through a restriction; shape comes from the restriction
            prop_schema = SchemaNode(
                name=name,
                type="array",
                description=DEFAULT_DESCRIPTION if ctx.flags.default_descriptions else None,
            )

        if self.ontology.is_functional(prop):
            set_functional(prop_schema)
            ctx.functional_properties.add(name)
            ctx.add_required_property(name)

        # replaces a default property of the same name
        schema.add_property(name, prop_schema)
        ctx.property_names.add(name)
        apply_entity_annotations(
            schema, prop, self.ontology, ctx.config.annotation_config, ctx.flags.default_descriptions
        )
        return prop_schema

    def _class_items(self, node) -> SchemaNode:
        """Items schema for a class expression used as a value."""
        g = self.g
        if isinstance(node, URIRef):
            if node == OWL.Thing:
                return SchemaNode(type="object")
            self.context.referenced_classes.add(node)
            return SchemaNode.reference(self.ontology.prefixed_name(node))
        kind = classify(g, node)
        if kind is RestrictionKind.OBJECT_ONE_OF:
            values = [literal_value(m) for m in rdf_list(g, g.value(node, OWL.oneOf))]
            return SchemaNode(type="string", enum=values)
        if kind is RestrictionKind.OBJECT_UNION_OF:
            return SchemaNode(any_of=[self._class_items(m) for m in rdf_list(g, g.value(node, OWL.unionOf))])
        if kind is RestrictionKind.OBJECT_INTERSECTION_OF:
            return SchemaNode(all_of=[self._class_items(m) for m in rdf_list(g, g.value(node, OWL.intersectionOf))])
        if kind is RestrictionKind.OBJECT_COMPLEMENT_OF:
            self.context.referenced_classes.update(self.ontology.named_classes_in(node))
            return SchemaNode(not_=self._class_items(g.value(node, OWL.complementOf)))
        return SchemaNode(type="object")

    def _data_items(self, node) -> SchemaNode:
        """Items schema for a datatype or data range."""
        g = self.g
        if isinstance(node, URIRef):
            return datatype_schema(node)
        base = g.value(node, OWL.onDatatype)
        if base is not None:
            return datatype_schema(base)
        kind = classify(g, node)
        if kind is RestrictionKind.DATA_ONE_OF:
            members = rdf_list(g, g.value(node, OWL.oneOf))
            first = members[0] if members else None
            item = datatype_schema(first.datatype or XSD.string) if isinstance(first, Literal) else SchemaNode(type="string")
            item.enum = [literal_value(m) for m in members]
            return item
        if kind is RestrictionKind.DATA_UNION_OF:
            return SchemaNode(any_of=[self._data_items(m) for m in rdf_list(g, g.value(node, OWL.unionOf))])
        if kind is RestrictionKind.DATA_INTERSECTION_OF:
            return SchemaNode(all_of=[self._data_items(m) for m in rdf_list(g, g.value(node, OWL.intersectionOf))])
        if kind is RestrictionKind.DATA_COMPLEMENT_OF:
            return SchemaNode(not_=self._data_items(g.value(node, OWL.datatypeComplementOf)))
        return SchemaNode(type="string")

    # --------------------
    # Restrictions
    # --------------------
    def _visit_expression(self, cls, expr, axiom) -> None:
        ctx = self.context
        g = self.g
        kind = classify(g, expr)

        if kind.is_property_restriction:
            if self.schema.is_enum:
                return
            prop = g.value(expr, OWL.onProperty)
            name = self.ontology.short_form(prop)
            ctx.referenced_classes.update(self.ontology.named_classes_in(expr))
            prop_schema = self._add_property(prop)
            self._apply_restriction(kind, expr, prop_schema, name)
            apply_axiom_annotations(
                self.schema, self.ontology.axiom_annotations(*axiom), name, ctx.config.annotation_config
            )
            return

        if kind is RestrictionKind.OBJECT_INTERSECTION_OF:
            for member in rdf_list(g, g.value(expr, OWL.intersectionOf)):
                if not isinstance(member, URIRef):
                    self._visit_expression(cls, member, axiom)
        elif kind is RestrictionKind.OBJECT_COMPLEMENT_OF:
            ctx.referenced_classes.update(self.ontology.named_classes_in(expr))
        elif kind is RestrictionKind.OBJECT_ONE_OF:
            if cls == ctx.base_class:
                values = [literal_value(m) for m in rdf_list(g, g.value(expr, OWL.oneOf))]
                self.schema.make_enum(values)
        elif kind is RestrictionKind.OBJECT_UNION_OF:
            ctx.referenced_classes.update(self.ontology.named_classes_in(expr))
            logger.debug("Union super class of %s only contributes references", self.ontology.short_form(cls))
        else:
            logger.warning(
                "Unsupported class expression (%s) on %s, skipped",
                kind.value, self.ontology.short_form(cls),
            )

    def _apply_restriction(self, kind: RestrictionKind, expr, prop: SchemaNode, name: str) -> None:
        g = self.g
        filler = filler_of(g, expr)

        if kind in (RestrictionKind.OBJECT_SOME_VALUES_FROM, RestrictionKind.OBJECT_ALL_VALUES_FROM):
            set_items(prop, self._class_items(filler))
            if isinstance(filler, URIRef) and self.ontology.equivalent_expressions(filler):
                self.context.enum_properties.add(name)
        elif kind in (RestrictionKind.DATA_SOME_VALUES_FROM, RestrictionKind.DATA_ALL_VALUES_FROM):
            set_items(prop, self._data_items(filler))
        elif kind.is_cardinality:
            n = cardinality_of(g, expr)
            if n is None:
                logger.warning("Cardinality restriction on %s has no integer bound", name)
                return
            if filler is not None and filler != OWL.Thing:
                set_items(prop, self._data_items(filler) if kind.is_data else self._class_items(filler))
            if kind in (RestrictionKind.OBJECT_MIN_CARDINALITY, RestrictionKind.DATA_MIN_CARDINALITY):
                add_min_cardinality(prop, n)
            elif kind in (RestrictionKind.OBJECT_MAX_CARDINALITY, RestrictionKind.DATA_MAX_CARDINALITY):
                add_max_cardinality(prop, n)
            else:
                add_exact_cardinality(prop, n)
                if n == 1:
                    self.context.functional_properties.add(name)
        elif kind is RestrictionKind.OBJECT_HAS_VALUE:
            prop.items = SchemaNode(type="string")
            add_has_value(prop, literal_value(g.value(expr, OWL.hasValue)))
        elif kind is RestrictionKind.DATA_HAS_VALUE:
            value = g.value(expr, OWL.hasValue)
            prop.items = datatype_schema(value.datatype or XSD.string) if isinstance(value, Literal) else SchemaNode(type="string")
            add_has_value(prop, literal_value(value))
