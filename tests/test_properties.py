from rdflib.namespace import XSD

from ontoapi.properties import (
    add_exact_cardinality,
    add_has_value,
    add_max_cardinality,
    add_min_cardinality,
    convert_array_to_non_array_property_schemas,
    create_data_property_schema,
    create_object_property_schema,
    datatype_schema,
)
from ontoapi.schema import SchemaNode


def _schema(**props):
    schema = SchemaNode(name="ppl-Person", type="object")
    for name, prop in props.items():
        schema.add_property(name, prop)
    return schema


def test_datatype_mapping():
    assert datatype_schema(XSD.integer).to_dict() == {"type": "integer", "format": "int64"}
    assert datatype_schema(XSD.dateTime).to_dict() == {"type": "string", "format": "date-time"}
    assert datatype_schema(XSD.boolean).to_dict() == {"type": "boolean"}
    assert datatype_schema("float").to_dict() == {"type": "number", "format": "float"}
    assert datatype_schema(XSD.gMonthDay).to_dict() == {"type": "string"}


def test_property_creation():
    data = create_data_property_schema("age", "Age", [XSD.integer, XSD.string])
    assert data.type == "array"
    assert [s.type for s in data.items.any_of] == ["integer", "string"]
    obj = create_object_property_schema("knows", None, ["ppl-Person"])
    assert obj.items.ref == "#/components/schemas/ppl-Person"
    assert create_object_property_schema("knows", None, []).items.type == "object"


def test_cardinality_edits():
    prop = create_data_property_schema("age", None, [XSD.integer])
    add_min_cardinality(prop, 1)
    assert prop.min_items == 1 and prop.nullable is False
    add_max_cardinality(prop, 1)
    assert prop.max_items == 1 and prop.nullable is True
    add_exact_cardinality(prop, 2)
    assert (prop.min_items, prop.max_items, prop.nullable) == (2, 2, False)


def test_has_value():
    prop = create_data_property_schema("kind", None, [XSD.string])
    add_has_value(prop, "student")
    assert prop.items.default == "student"
    assert prop.items.enum == ["student"]


def test_unbounded_data_property_becomes_single_value():
    schema = _schema(age=create_data_property_schema("age", "Age", [XSD.integer]))
    convert_array_to_non_array_property_schemas(schema, set(), set(), False)
    age = schema.properties["age"]
    assert age.to_dict() == {"type": "integer", "format": "int64", "description": "Age"}


def test_unbounded_reference_stays_array():
    schema = _schema(hasFriends=create_object_property_schema("hasFriends", None, ["ppl-Person"]))
    convert_array_to_non_array_property_schemas(schema, set(), set(), False)
    assert schema.properties["hasFriends"].is_array


def test_exactly_one_reference_moves_into_all_of():
    prop = create_object_property_schema("homeCountry", "Home", ["ppl-Country"])
    add_exact_cardinality(prop, 1)
    prop.read_only = True
    schema = _schema(homeCountry=prop)
    schema.set_required(["homeCountry"])
    convert_array_to_non_array_property_schemas(schema, {"homeCountry"}, {"homeCountry"}, False)
    out = schema.properties["homeCountry"].to_dict()
    assert out == {
        "allOf": [
            {"$ref": "#/components/schemas/ppl-Country"},
            {"readOnly": True},
            {"nullable": False},
            {"description": "Home"},
        ]
    }
    assert schema.required == ["homeCountry"]


def test_optional_single_value_is_nullable_and_not_required():
    prop = create_data_property_schema("nickname", None, [XSD.string])
    add_max_cardinality(prop, 1)
    schema = _schema(nickname=prop)
    schema.set_required(["nickname"])
    convert_array_to_non_array_property_schemas(schema, set(), set(), False)
    nick = schema.properties["nickname"]
    assert nick.min_items is None and nick.max_items is None
    assert nick.nullable is True
    assert schema.required == []


def test_names_follow_shape_when_fixing_plurals():
    single = create_data_property_schema("emails", None, [XSD.string])
    many = create_object_property_schema("hasFriend", None, ["ppl-Person"])
    schema = _schema(emails=single, hasFriend=many)
    schema.set_required(["emails"])
    renames = convert_array_to_non_array_property_schemas(schema, set(), {"emails"}, True)
    assert renames == {"emails": "email", "hasFriend": "hasFriends"}
    assert set(schema.properties) == {"email", "hasFriends"}
    assert schema.required == ["email"]
