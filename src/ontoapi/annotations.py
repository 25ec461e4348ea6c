"""
Annotation-driven property flags.

Annotation properties named in ``annotation_config.property_annotations``
mark a property read-only, write-only or give it an example value. They can
sit on the property declaration itself or on the subclass axiom that holds
the restriction.
"""

import logging

from .config import AnnotationConfig, PropertyAnnotationConfig
from .ontology import Ontology, literal_value
from .schema import SchemaNode

logger = logging.getLogger(__name__)


def _flag(name: str | None) -> str | None:
    if name is None or not str(name).strip():
        return None
    return str(name)


def _apply_flags(prop: SchemaNode, annotations, roles: PropertyAnnotationConfig, allow_example: bool) -> None:
    read_only = _flag(roles.read_only_flag_name)
    write_only = _flag(roles.write_only_flag_name)
    example = _flag(roles.example_value_name)
    for name, value in annotations:
        if read_only and name == read_only:
            prop.read_only = True
        if write_only and name == write_only:
            prop.write_only = True
        if allow_example and example and name == example:
            prop.example = literal_value(value)


def apply_entity_annotations(
    schema: SchemaNode | None,
    entity,
    ontology: Ontology,
    config: AnnotationConfig | None,
    default_descriptions: bool = True,
) -> None:
    """
    Description and flags for the property schema of ``entity``.

    ``schema`` is either the class schema (the property is looked up by its
    local name) or the property schema itself, recognised by carrying the
    property's name and no properties of its own.
    """
    if config is None or schema is None:
        return
    is_data = ontology.is_data_property(entity)
    if not (is_data or ontology.is_object_property(entity)):
        return

    name = ontology.short_form(entity)
    if schema.name == name and not schema.properties:
        prop = schema
    else:
        prop = schema.properties.get(name)
    if prop is None:
        logger.debug("No property schema named %s on %s", name, schema.name)
        return

    if not prop.description or not prop.description.strip():
        prop.description = ontology.description(entity, default_descriptions)

    _apply_flags(prop, ontology.annotations(entity), config.property_annotations, allow_example=is_data)


def apply_axiom_annotations(
    schema: SchemaNode,
    axiom_annotations,
    property_name: str,
    config: AnnotationConfig | None,
) -> None:
    """Same flags, sourced from the annotations of a subclass axiom."""
    if config is None or not schema.properties:
        return
    prop = schema.properties.get(property_name)
    if prop is None:
        return
    _apply_flags(prop, axiom_annotations, config.property_annotations, allow_example=True)
