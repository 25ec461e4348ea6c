import pytest

from ontoapi.exceptions import InconsistentOntologyError
from ontoapi.mapper import Mapper
from ontoapi.openapi import build_document
from ontoapi.operations import OperationType

from tests.conftest import PPL, PREFIXES, make_config, make_ontology

ALL_SCHEMAS = {"ppl-Country", "ppl-ExchangeStudent", "ppl-Person", "ppl-Student", "ppl-University"}


def _only(cls, **overrides):
    return make_config(path_config={"paths_for_classes": [{"class_iri": str(cls)}]}, **overrides)


def test_every_class_without_configured_classes(people):
    result = Mapper(make_config(), ontologies=[people]).run()
    assert set(result.schemas) == ALL_SCHEMAS
    assert result.class_names[PPL.Person] == "ppl-Person"
    assert {p.schema_name for p in result.policies} == ALL_SCHEMAS


def test_configured_class_follows_references(people):
    result = Mapper(_only(PPL.ExchangeStudent), ontologies=[people]).run()
    assert set(result.schemas) == {"ppl-ExchangeStudent", "ppl-Country", "ppl-University", "ppl-Person"}
    # only configured classes get paths
    assert [p.schema_name for p in result.policies] == ["ppl-ExchangeStudent"]


def test_references_not_followed(people):
    result = Mapper(_only(PPL.ExchangeStudent, follow_references=False), ontologies=[people]).run()
    assert set(result.schemas) == {"ppl-ExchangeStudent"}


def test_extra_class_schemas_without_paths(people):
    config = _only(PPL.Student, follow_references=False, extra_class_schemas=[str(PPL.University)])
    result = Mapper(config, ontologies=[people]).run()
    assert set(result.schemas) == {"ppl-Student", "ppl-University"}
    assert [p.schema_name for p in result.policies] == ["ppl-Student"]


def test_unknown_configured_class_is_skipped(people):
    result = Mapper(_only("https://example.org/people#Nobody"), ontologies=[people]).run()
    assert result.schemas == {}


def test_workers_give_the_same_result(people):
    config = make_config(use_inheritance_references=True)
    serial = Mapper(config, ontologies=[people]).run()
    parallel = Mapper(config, ontologies=[people], workers=4).run()
    assert build_document(config, serial) == build_document(config, parallel)


def test_inconsistent_ontology_is_rejected():
    broken = make_ontology(PREFIXES + "ppl:ghost a owl:Nothing .\n")
    with pytest.raises(InconsistentOntologyError):
        Mapper(make_config(), ontologies=[broken])


def test_openapi_document(people):
    config = make_config(
        openapi={"info": {"version": "2.0.0"}, "servers": [{"url": "https://api.example.org"}]},
        path_config={
            "post_paths": {"post_single": {"enable": True}},
            "search_paths": {"search_by_post": {
                "enable": True, "search_properties": ["name", "age"], "search_property_types": ["string"],
            }},
            "paths_for_classes": [{"class_iri": str(PPL.Person)}],
        },
        follow_references=False,
    )
    doc = build_document(config, Mapper(config, ontologies=[people]).run())
    assert doc["openapi"] == "3.0.1"
    assert doc["info"] == {"title": "people-api", "version": "2.0.0"}
    assert doc["servers"] == [{"url": "https://api.example.org"}]
    assert list(doc["components"]["schemas"]) == ["ppl-Person"]
    assert set(doc["paths"]) == {"/people", "/people/{id}", "/people/_search"}

    collection = doc["paths"]["/people"]
    assert set(collection) == {"get", "post"}
    assert collection["get"]["responses"]["200"]["content"]["application/json"]["schema"] == {
        "type": "array", "items": {"$ref": "#/components/schemas/ppl-Person"},
    }
    assert collection["post"]["requestBody"]["required"] is True
    assert "404" not in collection["get"]["responses"]

    by_key = doc["paths"]["/people/{id}"]["get"]
    assert by_key["parameters"][0]["name"] == "id"
    assert by_key["parameters"][0]["schema"] == {"type": "string"}
    assert set(by_key["responses"]) == {"200", "404", "default"}

    search = doc["paths"]["/people/_search"]["post"]
    body = search["requestBody"]["content"]["application/json"]["schema"]
    assert body["properties"] == {"name": {"type": "string"}, "age": {"type": "string"}}


def test_policy_operations(people):
    config = make_config(
        path_config={"paths_for_classes": [{"class_iri": str(PPL.Person), "deny_operations": ["get_all"]}]},
        follow_references=False,
    )
    (policy,) = Mapper(config, ontologies=[people]).run().policies
    assert policy.operation_types == {OperationType.GET_BY_KEY}


def _refs(node):
    if isinstance(node, dict):
        for key, value in node.items():
            if key == "$ref":
                yield value.rsplit("/", 1)[-1]
            else:
                yield from _refs(value)
    elif isinstance(node, list):
        for value in node:
            yield from _refs(value)


def test_renamed_property_keeps_its_range_class(people):
    config = _only(PPL.Student, always_generate_arrays=False, fix_singular_plural_property_names=True)
    result = Mapper(config, ontologies=[people]).run()
    assert "enrolledAts" in result.schemas["ppl-Student"].properties
    assert "ppl-University" in result.schemas
    doc = build_document(config, result)
    schemas = doc["components"]["schemas"]
    assert set(_refs(schemas)) <= set(schemas)
