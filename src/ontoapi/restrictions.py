"""
Classification of OWL class expressions / data ranges as stored in an rdflib
graph.

Every node maps to exactly one RestrictionKind. Shapes that are not one of
the twenty recognized restriction or boolean forms (named classes, hasSelf,
datatype restrictions, malformed blank nodes) map to UNKNOWN.
"""

from enum import Enum

from rdflib import Graph, Literal, URIRef
from rdflib.namespace import OWL, RDF, RDFS, XSD


class RestrictionKind(Enum):
    OBJECT_SOME_VALUES_FROM = "object_some_values_from"
    OBJECT_ALL_VALUES_FROM = "object_all_values_from"
    OBJECT_MIN_CARDINALITY = "object_min_cardinality"
    OBJECT_MAX_CARDINALITY = "object_max_cardinality"
    OBJECT_EXACT_CARDINALITY = "object_exact_cardinality"
    OBJECT_HAS_VALUE = "object_has_value"
    OBJECT_ONE_OF = "object_one_of"
    OBJECT_COMPLEMENT_OF = "object_complement_of"
    OBJECT_INTERSECTION_OF = "object_intersection_of"
    OBJECT_UNION_OF = "object_union_of"
    DATA_SOME_VALUES_FROM = "data_some_values_from"
    DATA_ALL_VALUES_FROM = "data_all_values_from"
    DATA_MIN_CARDINALITY = "data_min_cardinality"
    DATA_MAX_CARDINALITY = "data_max_cardinality"
    DATA_EXACT_CARDINALITY = "data_exact_cardinality"
    DATA_HAS_VALUE = "data_has_value"
    DATA_ONE_OF = "data_one_of"
    DATA_COMPLEMENT_OF = "data_complement_of"
    DATA_INTERSECTION_OF = "data_intersection_of"
    DATA_UNION_OF = "data_union_of"
    UNKNOWN = "unknown"

    @property
    def is_data(self) -> bool:
        return self.value.startswith("data_")

    @property
    def is_object(self) -> bool:
        return self.value.startswith("object_")

    @property
    def is_property_restriction(self) -> bool:
        """True for the kinds that constrain a property (owl:Restriction nodes)."""
        return self in _PROPERTY_RESTRICTIONS

    @property
    def is_cardinality(self) -> bool:
        return self in _CARDINALITIES


_CARDINALITIES = {
    RestrictionKind.OBJECT_MIN_CARDINALITY,
    RestrictionKind.OBJECT_MAX_CARDINALITY,
    RestrictionKind.OBJECT_EXACT_CARDINALITY,
    RestrictionKind.DATA_MIN_CARDINALITY,
    RestrictionKind.DATA_MAX_CARDINALITY,
    RestrictionKind.DATA_EXACT_CARDINALITY,
}

_PROPERTY_RESTRICTIONS = _CARDINALITIES | {
    RestrictionKind.OBJECT_SOME_VALUES_FROM,
    RestrictionKind.OBJECT_ALL_VALUES_FROM,
    RestrictionKind.OBJECT_HAS_VALUE,
    RestrictionKind.DATA_SOME_VALUES_FROM,
    RestrictionKind.DATA_ALL_VALUES_FROM,
    RestrictionKind.DATA_HAS_VALUE,
}

# (owl predicate, object kind, data kind)
_CARDINALITY_PREDICATES = (
    (OWL.minCardinality, RestrictionKind.OBJECT_MIN_CARDINALITY, RestrictionKind.DATA_MIN_CARDINALITY),
    (OWL.minQualifiedCardinality, RestrictionKind.OBJECT_MIN_CARDINALITY, RestrictionKind.DATA_MIN_CARDINALITY),
    (OWL.maxCardinality, RestrictionKind.OBJECT_MAX_CARDINALITY, RestrictionKind.DATA_MAX_CARDINALITY),
    (OWL.maxQualifiedCardinality, RestrictionKind.OBJECT_MAX_CARDINALITY, RestrictionKind.DATA_MAX_CARDINALITY),
    (OWL.cardinality, RestrictionKind.OBJECT_EXACT_CARDINALITY, RestrictionKind.DATA_EXACT_CARDINALITY),
    (OWL.qualifiedCardinality, RestrictionKind.OBJECT_EXACT_CARDINALITY, RestrictionKind.DATA_EXACT_CARDINALITY),
)


def rdf_list(g: Graph, head) -> list:
    """Members of an RDF collection, in order."""
    members = []
    seen = set()
    while head is not None and head != RDF.nil and head not in seen:
        seen.add(head)
        first = g.value(head, RDF.first)
        if first is not None:
            members.append(first)
        head = g.value(head, RDF.rest)
    return members


def is_data_range(g: Graph, node) -> bool:
    """True if node looks like a datatype, a datatype restriction or a data range expression."""
    if isinstance(node, Literal) or node is None:
        return False
    if isinstance(node, URIRef):
        return (
            str(node).startswith(str(XSD))
            or node == RDFS.Literal
            or (node, RDF.type, RDFS.Datatype) in g
        )
    if (node, RDF.type, RDFS.Datatype) in g:
        return True
    if g.value(node, OWL.onDatatype) is not None or g.value(node, OWL.datatypeComplementOf) is not None:
        return True
    one_of = g.value(node, OWL.oneOf)
    if one_of is not None:
        members = rdf_list(g, one_of)
        return bool(members) and all(isinstance(m, Literal) for m in members)
    for pred in (OWL.intersectionOf, OWL.unionOf):
        head = g.value(node, pred)
        if head is not None:
            members = rdf_list(g, head)
            return bool(members) and all(is_data_range(g, m) for m in members)
    return False


def is_data_restriction(g: Graph, node) -> bool:
    """Decide whether an owl:Restriction constrains a data property."""
    prop = g.value(node, OWL.onProperty)
    if prop is not None and (prop, RDF.type, OWL.DatatypeProperty) in g:
        return True
    if prop is not None and (prop, RDF.type, OWL.ObjectProperty) in g:
        return False
    if g.value(node, OWL.onDataRange) is not None:
        return True
    if isinstance(g.value(node, OWL.hasValue), Literal):
        return True
    for pred in (OWL.someValuesFrom, OWL.allValuesFrom):
        filler = g.value(node, pred)
        if filler is not None and is_data_range(g, filler):
            return True
    return False


def classify(g: Graph, node) -> RestrictionKind:
    """Map one class expression (or data range) node of ``g`` to its RestrictionKind."""
    if node is None or isinstance(node, Literal):
        return RestrictionKind.UNKNOWN

    if (node, RDF.type, OWL.Restriction) in g or g.value(node, OWL.onProperty) is not None:
        if g.value(node, OWL.onProperty) is None:
            return RestrictionKind.UNKNOWN
        data = is_data_restriction(g, node)
        if g.value(node, OWL.someValuesFrom) is not None:
            return RestrictionKind.DATA_SOME_VALUES_FROM if data else RestrictionKind.OBJECT_SOME_VALUES_FROM
        if g.value(node, OWL.allValuesFrom) is not None:
            return RestrictionKind.DATA_ALL_VALUES_FROM if data else RestrictionKind.OBJECT_ALL_VALUES_FROM
        if g.value(node, OWL.hasValue) is not None:
            return RestrictionKind.DATA_HAS_VALUE if data else RestrictionKind.OBJECT_HAS_VALUE
        for pred, object_kind, data_kind in _CARDINALITY_PREDICATES:
            if g.value(node, pred) is not None:
                return data_kind if data else object_kind
        # hasSelf and anything else
        return RestrictionKind.UNKNOWN

    if g.value(node, OWL.datatypeComplementOf) is not None:
        return RestrictionKind.DATA_COMPLEMENT_OF
    if g.value(node, OWL.complementOf) is not None:
        return RestrictionKind.OBJECT_COMPLEMENT_OF

    data = is_data_range(g, node)
    if g.value(node, OWL.oneOf) is not None:
        return RestrictionKind.DATA_ONE_OF if data else RestrictionKind.OBJECT_ONE_OF
    if g.value(node, OWL.intersectionOf) is not None:
        return RestrictionKind.DATA_INTERSECTION_OF if data else RestrictionKind.OBJECT_INTERSECTION_OF
    if g.value(node, OWL.unionOf) is not None:
        return RestrictionKind.DATA_UNION_OF if data else RestrictionKind.OBJECT_UNION_OF

    return RestrictionKind.UNKNOWN


def cardinality_of(g: Graph, node) -> int | None:
    """The integer bound of a cardinality restriction, if any."""
    for pred, _, _ in _CARDINALITY_PREDICATES:
        val = g.value(node, pred)
        if val is not None:
            try:
                return int(str(val))
            except ValueError:
                return None
    return None


def filler_of(g: Graph, node):
    """The class / data range a restriction points to (qualified, some or all), or None."""
    for pred in (OWL.someValuesFrom, OWL.allValuesFrom, OWL.onClass, OWL.onDataRange):
        val = g.value(node, pred)
        if val is not None:
            return val
    return None
