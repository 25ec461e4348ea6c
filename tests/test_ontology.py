import pytest
from rdflib import URIRef
from rdflib.namespace import OWL, RDFS

from ontoapi.constants import DEFAULT_DESCRIPTION
from ontoapi.exceptions import InvalidOntologyFormatError

from tests.conftest import PPL, PREFIXES, make_ontology


def test_prefixed_names(people):
    assert people.prefixed_name(PPL.Person) == "ppl-Person"
    assert people.short_form(PPL.ExchangeStudent) == "ExchangeStudent"


def test_unbound_namespace_uses_local_name(people):
    assert people.prefixed_name("https://other.example.org/vocab/Thing") == "Thing"


def test_prefixless_format_is_fatal():
    nt = "<https://example.org/a#Cat> <http://www.w3.org/1999/02/22-rdf-syntax-ns#type> " \
         "<http://www.w3.org/2002/07/owl#Class> .\n"
    ont = make_ontology(nt, fmt="nt")
    with pytest.raises(InvalidOntologyFormatError):
        ont.prefixed_name("https://example.org/a#Cat")


def test_descriptions(people):
    assert people.description(PPL.Person, True) == "A human being."
    assert people.description(PPL.Student, True) == "A person enrolled at a university."
    # object property without description borrows its range's
    assert people.description(PPL.hasFriends, True) == "A human being."


def test_missing_description_default():
    ont = make_ontology(PREFIXES + "ppl:Thingy a owl:Class .\n")
    assert ont.description(PPL.Thingy, True) == DEFAULT_DESCRIPTION
    assert ont.description(PPL.Thingy, False) is None


def test_super_classes_and_subclass_reasoning(people):
    assert people.super_classes(PPL.ExchangeStudent) == [PPL.Person, PPL.Student]
    assert people.is_subclass_of(PPL.ExchangeStudent, PPL.Person)
    assert not people.is_subclass_of(PPL.Person, PPL.Student)


def test_domains_and_ranges(people):
    assert set(people.properties_with_domain(PPL.Person)) == {PPL.name, PPL.age, PPL.nationality, PPL.hasFriends}
    assert people.range_classes(PPL.enrolledAt) == [PPL.University]
    assert people.is_domain_of_data_property(PPL.Student)
    assert not people.is_domain_of_data_property(PPL.University)


def test_entity_and_axiom_annotations(people):
    names = [name for name, _ in people.annotations(PPL.name)]
    assert "readOnly" in names and "example" in names and "comment" in names
    assert "range" not in names and "type" not in names

    (restriction,) = [e for e in people.subclass_expressions(PPL.ExchangeStudent) if not isinstance(e, URIRef)]
    axiom = dict((n, str(v)) for n, v in people.axiom_annotations(PPL.ExchangeStudent, RDFS.subClassOf, restriction))
    assert axiom["note"] == "Exactly one home country"
    assert "readOnly" in axiom


def test_consistency_gate(people):
    assert people.is_consistent()
    broken = make_ontology(PREFIXES + """
ppl:Impossible a owl:Class ; rdfs:subClassOf owl:Nothing .
ppl:ghost a ppl:Impossible .
""")
    assert not broken.is_consistent()


def test_rdf_list_members(people):
    (expr,) = people.equivalent_expressions(PPL.Country)
    head = people.graph.value(expr, OWL.oneOf)
    assert people.rdf_list(head) == [PPL.France, PPL.Japan]
