from rdflib import Literal

from ontoapi.annotations import apply_axiom_annotations, apply_entity_annotations
from ontoapi.config import AnnotationConfig
from ontoapi.constants import DEFAULT_DESCRIPTION
from ontoapi.mapper import compile_class
from ontoapi.schema import SchemaNode

from tests.conftest import ANNOTATION_CONFIG, PPL, make_config


def _person_schema(people):
    config = make_config(annotation_config=ANNOTATION_CONFIG)
    return compile_class(PPL.Person, people, config).schema


def test_entity_flags_and_example(people):
    schema = _person_schema(people)
    name = schema.properties["name"]
    assert name.read_only is True
    assert name.example == "Ada Lovelace"
    assert name.description == "Full name."
    assert schema.properties["hasFriends"].write_only is True
    assert schema.properties["hasFriends"].read_only is None


def test_descriptions_default_when_missing(people):
    schema = _person_schema(people)
    assert schema.properties["age"].description == DEFAULT_DESCRIPTION
    # object property without a comment, range class has none either
    assert schema.properties["nationality"].description == DEFAULT_DESCRIPTION


def test_no_annotation_config_leaves_flags_unset(people):
    schema = compile_class(PPL.Person, people, make_config()).schema
    assert schema.properties["name"].read_only is None
    assert schema.properties["name"].example is None


def test_axiom_annotations_mark_restricted_property(people):
    config = make_config(annotation_config=ANNOTATION_CONFIG)
    schema = compile_class(PPL.ExchangeStudent, people, config).schema
    assert schema.properties["homeCountry"].read_only is True


def test_example_only_on_data_properties(people):
    config = AnnotationConfig.from_dict(ANNOTATION_CONFIG)
    prop = SchemaNode(name="hasFriends", type="array")
    apply_entity_annotations(prop, PPL.hasFriends, people, config)
    assert prop.example is None
    assert prop.write_only is True


def test_axiom_annotations_unknown_property_is_ignored():
    config = AnnotationConfig.from_dict(ANNOTATION_CONFIG)
    schema = SchemaNode(name="s", type="object")
    schema.add_property("a", SchemaNode(type="string"))
    apply_axiom_annotations(schema, [("readOnly", Literal(True))], "missing", config)
    apply_axiom_annotations(schema, [("example", Literal("x"))], "a", config)
    assert schema.properties["a"].read_only is None
    assert schema.properties["a"].example == "x"


def test_class_schema_without_properties_is_not_annotated(people):
    config = AnnotationConfig.from_dict(ANNOTATION_CONFIG)
    schema = SchemaNode(name="ppl-Person", type="object")
    apply_entity_annotations(schema, PPL.name, people, config)
    assert schema.description is None
    assert schema.read_only is None
    assert schema.example is None
    assert schema.properties == {}
