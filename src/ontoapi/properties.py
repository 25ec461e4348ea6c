"""
Property schemas: creation from ontology properties, the edits made by
restrictions, and the array -> singular conversion.

Every property starts out as an array whose ``items`` describe one value;
restrictions then narrow the items or bound the array. The conversion to a
singular shape happens only in the orchestrator's third stage.
"""

import logging

from rdflib import URIRef
from rdflib.namespace import RDFS, XSD

from .inflection import is_plural, pluralize, singularize
from .schema import SchemaNode

logger = logging.getLogger(__name__)

# xsd local name -> (type, format)
XSD_TYPES = {
    "string": ("string", None),
    "normalizedString": ("string", None),
    "token": ("string", None),
    "language": ("string", None),
    "Name": ("string", None),
    "NCName": ("string", None),
    "NMTOKEN": ("string", None),
    "anyURI": ("string", "uri"),
    "dateTime": ("string", "date-time"),
    "dateTimeStamp": ("string", "date-time"),
    "date": ("string", "date"),
    "time": ("string", "time"),
    "duration": ("string", None),
    "gYear": ("string", None),
    "base64Binary": ("string", "byte"),
    "hexBinary": ("string", None),
    "integer": ("integer", "int64"),
    "long": ("integer", "int64"),
    "nonNegativeInteger": ("integer", "int64"),
    "nonPositiveInteger": ("integer", "int64"),
    "positiveInteger": ("integer", "int64"),
    "negativeInteger": ("integer", "int64"),
    "unsignedLong": ("integer", "int64"),
    "int": ("integer", "int32"),
    "short": ("integer", "int32"),
    "byte": ("integer", "int32"),
    "unsignedInt": ("integer", "int32"),
    "unsignedShort": ("integer", "int32"),
    "unsignedByte": ("integer", "int32"),
    "decimal": ("number", None),
    "float": ("number", "float"),
    "double": ("number", "double"),
    "boolean": ("boolean", None),
}


def datatype_schema(datatype) -> SchemaNode:
    """Items schema for one datatype (XSD IRI or its local name)."""
    if isinstance(datatype, URIRef):
        if datatype == RDFS.Literal or not str(datatype).startswith(str(XSD)):
            return SchemaNode(type="string")
        datatype = str(datatype)[len(str(XSD)):]
    type_, fmt = XSD_TYPES.get(str(datatype), ("string", None))
    return SchemaNode(type=type_, format=fmt)


def create_data_property_schema(name: str, description: str | None, datatypes) -> SchemaNode:
    """Array property whose items carry the mapped datatype(s); several become anyOf."""
    item_schemas = [datatype_schema(dt) for dt in datatypes] or [SchemaNode(type="string")]
    return array_property(name, description, item_schemas)


def create_object_property_schema(name: str, description: str | None, range_schema_names) -> SchemaNode:
    """Array property whose items reference the range schemas; no range -> plain objects."""
    refs = [SchemaNode.reference(n) for n in range_schema_names] or [SchemaNode(type="object")]
    return array_property(name, description, refs)


# --------------------
# Restriction edits
# --------------------
def set_nullable(prop: SchemaNode, value: bool) -> None:
    """
    Set nullable on a property. A property whose $ref was moved into allOf
    keeps the flag in its own allOf entry.
    """
    if prop.all_of:
        for entry in prop.all_of:
            if entry.nullable is not None and entry.ref is None:
                entry.nullable = value
                return
        prop.all_of.append(SchemaNode(nullable=value))
        prop.nullable = None
    else:
        prop.nullable = value


def set_functional(prop: SchemaNode) -> None:
    set_nullable(prop, False)
    prop.max_items = 1


def add_min_cardinality(prop: SchemaNode, n: int) -> None:
    prop.min_items = n
    if n > 0:
        set_nullable(prop, False)


def add_max_cardinality(prop: SchemaNode, n: int) -> None:
    prop.max_items = n
    if n < 2:
        set_nullable(prop, True)


def add_exact_cardinality(prop: SchemaNode, n: int) -> None:
    prop.min_items = n
    prop.max_items = n
    set_nullable(prop, n == 0)


def add_has_value(prop: SchemaNode, value) -> None:
    if prop.items is None:
        prop.items = SchemaNode()
    prop.type = "array"
    prop.items.default = value
    prop.items.enum = [value]


def set_items(prop: SchemaNode, items: SchemaNode) -> None:
    prop.type = "array"
    prop.items = items


# --------------------
# Array -> singular conversion
# --------------------
def _bound(val: int | None) -> int:
    return -1 if val is None else val


def _move_into_all_of(prop: SchemaNode, items: SchemaNode) -> None:
    prop.type = None
    entries = [SchemaNode(ref=items.ref)]
    if prop.read_only is not None:
        entries.append(SchemaNode(read_only=prop.read_only))
        prop.read_only = None
    if prop.write_only is not None:
        entries.append(SchemaNode(write_only=prop.write_only))
        prop.write_only = None
    if prop.nullable is not None:
        entries.append(SchemaNode(nullable=prop.nullable))
        prop.nullable = None
    if prop.default is not None:
        entries.append(SchemaNode(default=prop.default))
        prop.default = None
    if prop.description is not None:
        entries.append(SchemaNode(description=prop.description))
        prop.description = None
    prop.all_of = (prop.all_of or []) + entries


def _copy_from_items(prop: SchemaNode, items: SchemaNode) -> None:
    prop.type = items.type
    prop.format = items.format
    prop.default = items.default
    prop.enum = list(items.enum) if items.enum is not None else None
    if items.any_of:
        prop.any_of = list(items.any_of)
    if items.one_of:
        prop.one_of = list(items.one_of)


def should_remain_array(prop: SchemaNode, is_functional: bool) -> bool:
    items = prop.items
    min_items, max_items = _bound(prop.min_items), _bound(prop.max_items)
    has_bounds = prop.min_items is not None or prop.max_items is not None
    has_ref = items.ref is not None
    if is_functional and not has_ref:
        return False
    array_ref = has_ref and (not has_bounds or min_items > 1 or max_items > 1)
    keep = (min_items > 0 or max_items > 1) and not (min_items == 1 and max_items == 1)
    return keep or array_ref or items.is_composed


def convert_array_to_non_array_property_schemas(
    schema: SchemaNode,
    enum_properties: set,
    functional_properties: set,
    fix_singular_plural_property_names: bool,
) -> dict[str, str]:
    """
    Convert array properties that hold at most one value into singular
    properties. Returns the applied renames (old name -> new name).
    """
    renames: dict[str, str] = {}
    required = set(schema.required)

    for name in sorted(schema.properties):
        prop = schema.properties[name]
        if not prop.is_array or prop.items is None:
            continue
        items = prop.items
        min_items, max_items = _bound(prop.min_items), _bound(prop.max_items)
        functional = name in functional_properties

        if should_remain_array(prop, functional):
            if not is_plural(name):
                renames[name] = pluralize(name)
            continue

        if items.ref is not None:
            if name in enum_properties:
                logger.debug("Enum reference property %s converted to a single value", name)
            _move_into_all_of(prop, items)
        else:
            _copy_from_items(prop, items)
        prop.items = None
        if is_plural(name):
            renames[name] = singularize(name)

        if (functional or name in required) and max_items == 1:
            if min_items == 1:
                prop.min_items = None
                prop.max_items = None
            else:
                prop.max_items = None
                set_nullable(prop, True)
        if min_items < 1 and max_items == 1:
            prop.min_items = None
            prop.max_items = None
            set_nullable(prop, True)

        if not functional and min_items < 1:
            required.discard(name)

    if not fix_singular_plural_property_names:
        schema.set_required(required)
        return {}

    applied = {}
    for old, new in renames.items():
        if old == new or new in schema.properties:
            continue
        prop = schema.properties.pop(old)
        prop.name = new
        schema.properties[new] = prop
        if old in required:
            required.discard(old)
            required.add(new)
        applied[old] = new
        logger.warning("Property '%s' renamed to '%s' to match its %s shape",
                       old, new, "array" if prop.is_array else "single-value")
    schema.set_required(required)
    return applied


def array_property(name: str, description: str | None, item_schemas) -> SchemaNode:
    """Array property over one items schema, or anyOf when there are several."""
    unique = []
    for s in item_schemas:
        if s not in unique:
            unique.append(s)
    if not unique:
        items = None
    elif len(unique) == 1:
        items = unique[0]
    else:
        items = SchemaNode(any_of=unique)
    return SchemaNode(name=name, type="array", description=description, items=items)
