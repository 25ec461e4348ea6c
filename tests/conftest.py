"""Shared ontologies and config builders for the compiler tests."""

import pytest
from rdflib import Graph, Namespace

from ontoapi.config import YamlConfig
from ontoapi.ontology import Ontology

PPL = Namespace("https://example.org/people#")

PREFIXES = """
@prefix ppl: <https://example.org/people#> .
@prefix owl: <http://www.w3.org/2002/07/owl#> .
@prefix rdf: <http://www.w3.org/1999/02/22-rdf-syntax-ns#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .
@prefix xsd: <http://www.w3.org/2001/XMLSchema#> .
@prefix skos: <http://www.w3.org/2004/02/skos/core#> .
"""

PEOPLE_TTL = PREFIXES + """
ppl:readOnly a owl:AnnotationProperty .
ppl:writeOnly a owl:AnnotationProperty .
ppl:example a owl:AnnotationProperty .
ppl:note a owl:AnnotationProperty .

ppl:Person a owl:Class ;
    rdfs:comment "A human being."@en, "Un être humain."@fr .
ppl:Student a owl:Class ;
    rdfs:subClassOf ppl:Person ;
    skos:definition "A person enrolled at a university." .
ppl:ExchangeStudent a owl:Class ;
    rdfs:subClassOf ppl:Student ;
    ppl:note "Visiting student" .
ppl:University a owl:Class .
ppl:Country a owl:Class ;
    owl:equivalentClass [ a owl:Class ; owl:oneOf ( ppl:France ppl:Japan ) ] .
ppl:France a owl:NamedIndividual , ppl:Country .
ppl:Japan a owl:NamedIndividual , ppl:Country .

ppl:name a owl:DatatypeProperty , owl:FunctionalProperty ;
    rdfs:domain ppl:Person ;
    rdfs:range xsd:string ;
    rdfs:comment "Full name." ;
    ppl:readOnly true ;
    ppl:example "Ada Lovelace" .
ppl:age a owl:DatatypeProperty ;
    rdfs:domain ppl:Person ;
    rdfs:range xsd:integer .
ppl:studentId a owl:DatatypeProperty ;
    rdfs:domain ppl:Student ;
    rdfs:range xsd:string .
ppl:enrolledAt a owl:ObjectProperty ;
    rdfs:domain ppl:Student ;
    rdfs:range ppl:University .
ppl:nationality a owl:ObjectProperty ;
    rdfs:domain ppl:Person ;
    rdfs:range ppl:Country .
ppl:hasFriends a owl:ObjectProperty ;
    rdfs:domain ppl:Person ;
    rdfs:range ppl:Person ;
    ppl:writeOnly true .
ppl:homeCountry a owl:ObjectProperty ;
    rdfs:domain ppl:ExchangeStudent ;
    rdfs:range ppl:Country .

ppl:Person rdfs:subClassOf [ a owl:Restriction ;
    owl:onProperty ppl:age ;
    owl:maxCardinality "1"^^xsd:nonNegativeInteger ] .
ppl:Student rdfs:subClassOf [ a owl:Restriction ;
    owl:onProperty ppl:enrolledAt ;
    owl:minCardinality "1"^^xsd:nonNegativeInteger ] .
ppl:ExchangeStudent rdfs:subClassOf [ a owl:Restriction ;
    owl:onProperty ppl:homeCountry ;
    owl:cardinality "1"^^xsd:nonNegativeInteger ] .

[] a owl:Axiom ;
    owl:annotatedSource ppl:ExchangeStudent ;
    owl:annotatedProperty rdfs:subClassOf ;
    owl:annotatedTarget [ a owl:Restriction ;
        owl:onProperty ppl:homeCountry ;
        owl:cardinality "1"^^xsd:nonNegativeInteger ] ;
    ppl:note "Exactly one home country" ;
    ppl:readOnly true .
"""


def make_ontology(ttl: str, fmt: str = "turtle") -> Ontology:
    g = Graph()
    g.parse(data=ttl, format=fmt)
    return Ontology(g, fmt=fmt, location="test")


def make_config(**overrides) -> YamlConfig:
    data = {"name": "people-api", "output_dir": "out", "ontologies": ["people.ttl"]}
    data.update(overrides)
    return YamlConfig.from_dict(data)


@pytest.fixture(scope="session")
def people() -> Ontology:
    return make_ontology(PEOPLE_TTL)


@pytest.fixture
def config_factory():
    return make_config


ANNOTATION_CONFIG = {
    "property_annotations": {
        "read_only_flag_name": "readOnly",
        "write_only_flag_name": "writeOnly",
        "example_value_name": "example",
    },
    "markdown_generation_filename": "notes",
    "markdown_generation_annotations": [
        {"annotation_name": "note", "markdown_heading": "Notes", "markdown_description": "Editorial notes."},
    ],
}
