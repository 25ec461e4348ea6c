"""Base class schemas and cardinality-derived requiredness."""

import logging

from .config import GlobalFlags
from .defaults import default_properties
from .ontology import Ontology
from .properties import set_nullable
from .schema import SchemaNode

logger = logging.getLogger(__name__)


def get_prefixed_schema_name(cls, ontology: Ontology) -> str:
    """Raises InvalidOntologyFormatError when the document has no prefix format."""
    return ontology.prefixed_name(cls)


def get_base_class_basic_schema(cls, ontology: Ontology, flags: GlobalFlags) -> SchemaNode:
    """Object schema for ``cls`` with its description and, if enabled, the default properties."""
    schema = SchemaNode(
        name=get_prefixed_schema_name(cls, ontology),
        type="object",
        description=ontology.description(cls, flags.default_descriptions),
    )
    if flags.default_properties:
        merge_default_properties(schema)
    return schema


def merge_default_properties(schema: SchemaNode) -> None:
    """Add the default catalog without replacing properties already on the schema."""
    if schema.is_enum:
        return
    for name, prop in default_properties().items():
        if name not in schema.properties:
            schema.add_property(name, prop)


def generate_required_properties_for_class_schemas(schema: SchemaNode, functional_properties) -> None:
    """
    Recompute ``schema.required`` from scratch.

    Array-shaped properties: ``minItems > 0`` -> non-nullable and required;
    otherwise nullable, and required only when functional. Properties that
    were already reduced to a single value keep the nullability decided at
    conversion and stay required if they were, or if functional.
    """
    previous = set(schema.required)
    required = set()
    for name, prop in schema.properties.items():
        if prop.min_items is not None and prop.min_items > 0:
            set_nullable(prop, False)
            required.add(name)
        elif prop.is_array or prop.items is not None:
            set_nullable(prop, True)
            if name in functional_properties:
                required.add(name)
        elif name in functional_properties or name in previous:
            required.add(name)
    schema.set_required(required)
    logger.debug("Required properties of %s: %s", schema.name, schema.required)
