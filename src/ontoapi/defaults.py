"""Baseline properties added to every class schema (``default_properties``)."""

from .properties import create_data_property_schema

# name, description, xsd datatype, nullable
DEFAULT_PROPERTIES = (
    ("id", "identifier", "integer", False),
    ("label", "short description of the resource", "string", True),
    ("type", "type(s) of the resource", "string", True),
    ("description", "small description", "string", True),
    ("eventDateTime", "a date/time of the resource", "dateTime", True),
    ("isBool", "a boolean indicator of the resource", "boolean", True),
    ("quantity", "a number quantity of the resource", "float", True),
)


def default_properties() -> dict:
    """A fresh copy of the catalog, keyed by property name."""
    props = {}
    for name, description, datatype, nullable in DEFAULT_PROPERTIES:
        prop = create_data_property_schema(name, description, [datatype])
        prop.nullable = nullable
        props[name] = prop
    return props
