"""
Read-only view of an ontology document, backed by rdflib and owlrl.

The asserted graph is what the document says; reasoning runs once, on a
separate copy, and answers the subclass / superclass questions. Both graphs
are only read after construction, so one Ontology can be shared by several
compile workers.
"""

import logging
from pathlib import Path

from owlrl import DeductiveClosure, OWLRL_Semantics
from rdflib import BNode, Graph, Literal, Namespace, URIRef
from rdflib.namespace import OWL, RDF, RDFS
from rdflib.util import guess_format

from .constants import DEFAULT_DESCRIPTION, DESCRIPTION_PROPERTIES
from .exceptions import InvalidOntologyFormatError
from .restrictions import is_data_range, rdf_list

logger = logging.getLogger(__name__)

# owlrl types its inconsistency reports with this vocabulary
OWLRL_ERR = Namespace("http://www.daml.org/2002/03/agents/agent-ont#")

# serializations that have no way to declare prefixes
PREFIXLESS_FORMATS = {"nt", "nt11", "ntriples", "nquads"}

_STRUCTURAL_NAMESPACES = (str(RDF), str(RDFS), str(OWL))
_BUILTIN_ANNOTATIONS = {
    RDFS.label, RDFS.comment, RDFS.seeAlso, RDFS.isDefinedBy,
    OWL.deprecated, OWL.versionInfo, OWL.priorVersion, OWL.backwardCompatibleWith,
    OWL.incompatibleWith,
}


# --------------------
# Helpers
# --------------------
def local_name(u) -> str:
    s = str(u)
    if "#" in s:
        return s.split("#")[-1]
    return s.rstrip("/").split("/")[-1]


def literal_value(node):
    """Plain Python value of a literal; IRIs become their local name."""
    if isinstance(node, Literal):
        val = node.toPython()
        if isinstance(val, (str, int, float, bool)):
            return val
        return str(node)
    if isinstance(node, URIRef):
        return local_name(node)
    return str(node)


def normalize_text(text: str) -> str:
    return str(text).replace("\r\n", "\n").replace("\r", "\n").strip()


class Ontology:
    """Query surface used by the schema compiler."""

    def __init__(self, graph: Graph, fmt: str | None = None, location: str | None = None, reason: bool = True):
        self.graph = graph
        self.format = fmt
        self.location = location
        if reason:
            # Reason on a separate copy (read-only view)
            self.reasoned = Graph()
            self.reasoned += graph
            DeductiveClosure(
                OWLRL_Semantics,
                axiomatic_triples=False,
                datatype_axioms=False,
            ).expand(self.reasoned)
        else:
            self.reasoned = graph
        self._domain_index = self._index_domains()

    @classmethod
    def load(cls, location, fmt: str | None = None, reason: bool = True) -> "Ontology":
        loc = str(location)
        fmt = fmt or guess_format(loc) or "xml"
        g = Graph()
        g.parse(Path(loc).as_posix() if "://" not in loc else loc, format=fmt)
        logger.info("Loaded %s (%d triples, format %s)", loc, len(g), fmt)
        return cls(g, fmt=fmt, location=loc, reason=reason)

    # ---- prefixes / naming ----
    @property
    def has_prefix_format(self) -> bool:
        return (self.format or "").lower() not in PREFIXLESS_FORMATS

    @property
    def prefixes(self) -> dict[str, str]:
        return {str(p): str(ns) for p, ns in self.graph.namespace_manager.namespaces()}

    @staticmethod
    def short_form(iri) -> str:
        return local_name(iri)

    def prefixed_name(self, iri) -> str:
        """
        Schema name for ``iri``: ``<prefix>-<localName>`` when the document
        binds a non-empty prefix to the IRI's namespace, else the local name.
        """
        if not self.has_prefix_format:
            raise InvalidOntologyFormatError(
                f"Ontology {self.location or ''} has an invalid or null prefix document format. Unable to proceed."
            )
        short = local_name(iri)
        namespace = str(iri)[: len(str(iri)) - len(short)]
        matches = sorted(p for p, ns in self.prefixes.items() if ns == namespace and p.strip(":"))
        if matches:
            return f"{matches[0].strip(':')}-{short}"
        return short

    # ---- entities ----
    def classes(self) -> list[URIRef]:
        g = self.graph
        classes = set(s for s in g.subjects(RDF.type, OWL.Class) if isinstance(s, URIRef))
        classes.update(s for s, _, _ in g.triples((None, RDFS.subClassOf, None)) if isinstance(s, URIRef))
        classes.discard(OWL.Thing)
        classes.discard(OWL.Nothing)
        return sorted(classes, key=lambda u: str(u))

    def object_properties(self) -> list[URIRef]:
        props = set(s for s in self.graph.subjects(RDF.type, OWL.ObjectProperty) if isinstance(s, URIRef))
        props -= {OWL.topObjectProperty, OWL.bottomObjectProperty}
        return sorted(props, key=lambda u: str(u))

    def data_properties(self) -> list[URIRef]:
        props = set(s for s in self.graph.subjects(RDF.type, OWL.DatatypeProperty) if isinstance(s, URIRef))
        props -= {OWL.topDataProperty, OWL.bottomDataProperty}
        return sorted(props, key=lambda u: str(u))

    def is_object_property(self, p) -> bool:
        return (p, RDF.type, OWL.ObjectProperty) in self.graph

    def is_data_property(self, p) -> bool:
        return (p, RDF.type, OWL.DatatypeProperty) in self.graph

    def is_functional(self, p) -> bool:
        return (p, RDF.type, OWL.FunctionalProperty) in self.graph

    # ---- property domains / ranges ----
    def super_properties_transitive(self, p) -> set:
        """All super-properties of p via transitive rdfs:subPropertyOf (including direct ones)."""
        visited, stack = set(), [p]
        supers = set()
        while stack:
            cur = stack.pop()
            if cur in visited:
                continue
            visited.add(cur)
            for sup in self.graph.objects(cur, RDFS.subPropertyOf):
                if isinstance(sup, URIRef):
                    supers.add(sup)
                    stack.append(sup)
        return supers

    def property_frontier(self, p) -> set:
        """Fixed-point closure of p over super-properties and equivalent properties."""
        frontier = {p}
        changed = True
        while changed:
            changed = False
            new = set()
            for q in list(frontier):
                new |= self.super_properties_transitive(q)
                eq = set(self.graph.objects(q, OWL.equivalentProperty)) | set(self.graph.subjects(OWL.equivalentProperty, q))
                new |= {e for e in eq if isinstance(e, URIRef)}
            if not new.issubset(frontier):
                frontier |= new
                changed = True
        return frontier

    def domain_nodes(self, p) -> list:
        doms = set()
        for prop in self.property_frontier(p):
            doms.update(self.graph.objects(prop, RDFS.domain))
        return sorted(doms, key=str)

    def range_nodes(self, p) -> list:
        rngs = set()
        for prop in self.property_frontier(p):
            rngs.update(self.graph.objects(prop, RDFS.range))
        return sorted(rngs, key=str)

    def _flatten_union(self, node) -> list:
        if isinstance(node, URIRef):
            return [node]
        union = self.graph.value(node, OWL.unionOf)
        if union is not None:
            out = []
            for m in rdf_list(self.graph, union):
                out.extend(self._flatten_union(m))
            return out
        return []

    def domain_classes(self, p) -> list[URIRef]:
        out = []
        for d in self.domain_nodes(p):
            for c in self._flatten_union(d):
                if c not in out and c != OWL.Thing:
                    out.append(c)
        return out

    def range_classes(self, p) -> list[URIRef]:
        """Named classes in the range of an object property (unions flattened)."""
        out = []
        for r in self.range_nodes(p):
            if is_data_range(self.graph, r):
                continue
            for c in self._flatten_union(r):
                if c not in out and c != OWL.Thing:
                    out.append(c)
        return out

    def _index_domains(self) -> dict:
        index: dict = {}
        for p in self.data_properties() + self.object_properties():
            for c in self.domain_classes(p):
                index.setdefault(c, []).append(p)
        return index

    def properties_with_domain(self, cls) -> list[URIRef]:
        return list(self._domain_index.get(cls, []))

    def is_domain_of_data_property(self, cls) -> bool:
        return any(self.is_data_property(p) for p in self._domain_index.get(cls, []))

    # ---- class axioms ----
    def subclass_expressions(self, cls) -> list:
        return sorted(self.graph.objects(cls, RDFS.subClassOf), key=self.expression_key)

    def equivalent_expressions(self, cls) -> list:
        eq = set(self.graph.objects(cls, OWL.equivalentClass)) | set(self.graph.subjects(OWL.equivalentClass, cls))
        eq.discard(cls)
        return sorted(eq, key=self.expression_key)

    def super_classes(self, cls) -> list[URIRef]:
        """Named super-classes of cls (direct and indirect), owl:Thing excluded."""
        seen, stack = set(), [cls]
        while stack:
            cur = stack.pop()
            for sup in self.reasoned.objects(cur, RDFS.subClassOf):
                if isinstance(sup, URIRef) and sup not in seen:
                    seen.add(sup)
                    stack.append(sup)
        seen -= {cls, OWL.Thing, OWL.Nothing}
        return sorted(seen, key=str)

    def is_subclass_of(self, a, b) -> bool:
        """True iff a ⊑* b in the reasoned graph (reflexive-transitive)."""
        if a == b:
            return True
        seen = {a}
        stack = [a]
        while stack:
            cur = stack.pop()
            for sup in self.reasoned.objects(cur, RDFS.subClassOf):
                if not isinstance(sup, URIRef):
                    continue
                if sup == b:
                    return True
                if sup not in seen:
                    seen.add(sup)
                    stack.append(sup)
        return False

    def is_consistent(self) -> bool:
        g = self.reasoned
        if any(True for _ in g.subjects(RDF.type, OWLRL_ERR.ErrorMessage)):
            return False
        return not any(s != OWL.Nothing for s in g.subjects(RDF.type, OWL.Nothing))

    # ---- expressions ----
    def rdf_list(self, head) -> list:
        return rdf_list(self.graph, head)

    def expression_key(self, node, _depth: int = 0) -> str:
        """Structural key of a class expression; equal for isomorphic blank-node trees."""
        if not isinstance(node, BNode) or _depth > 20:
            return node.n3() if hasattr(node, "n3") else str(node)
        parts = []
        for p, o in self.graph.predicate_objects(node):
            parts.append(p.n3() + " " + self.expression_key(o, _depth + 1))
        return "[" + " ; ".join(sorted(parts)) + "]"

    def named_classes_in(self, expr) -> list[URIRef]:
        """Named classes mentioned anywhere inside ``expr`` (fillers, unions, complements)."""
        out: list = []
        self._collect_classes(expr, out, set())
        return out

    def _collect_classes(self, node, out: list, seen: set):
        if node in seen or isinstance(node, Literal):
            return
        seen.add(node)
        if isinstance(node, URIRef):
            if node not in (OWL.Thing, OWL.Nothing) and not is_data_range(self.graph, node) and node not in out:
                out.append(node)
            return
        g = self.graph
        for pred in (OWL.someValuesFrom, OWL.allValuesFrom, OWL.onClass, OWL.complementOf):
            val = g.value(node, pred)
            if val is not None:
                self._collect_classes(val, out, seen)
        for pred in (OWL.unionOf, OWL.intersectionOf):
            head = g.value(node, pred)
            if head is not None:
                for m in rdf_list(g, head):
                    self._collect_classes(m, out, seen)

    def properties_in(self, expr) -> list[URIRef]:
        """Properties constrained by restrictions inside ``expr``."""
        out: list = []
        stack, seen = [expr], set()
        g = self.graph
        while stack:
            node = stack.pop()
            if node in seen or not isinstance(node, BNode):
                continue
            seen.add(node)
            prop = g.value(node, OWL.onProperty)
            if isinstance(prop, URIRef) and prop not in out:
                out.append(prop)
            for pred in (OWL.someValuesFrom, OWL.allValuesFrom, OWL.onClass, OWL.complementOf):
                val = g.value(node, pred)
                if val is not None:
                    stack.append(val)
            for pred in (OWL.unionOf, OWL.intersectionOf):
                head = g.value(node, pred)
                if head is not None:
                    stack.extend(rdf_list(g, head))
        return out

    # ---- annotations ----
    def _is_annotation_predicate(self, p) -> bool:
        if p in _BUILTIN_ANNOTATIONS:
            return True
        if (p, RDF.type, OWL.AnnotationProperty) in self.graph:
            return True
        if str(p).startswith(_STRUCTURAL_NAMESPACES):
            return False
        return not (self.is_object_property(p) or self.is_data_property(p))

    def annotations(self, entity) -> list[tuple[str, object]]:
        """(annotation local name, value node) pairs attached to ``entity``."""
        out = []
        for p, o in self.graph.predicate_objects(entity):
            if self._is_annotation_predicate(p):
                out.append((local_name(p), o))
        return sorted(out, key=lambda pair: (pair[0], str(pair[1])))

    def axiom_annotations(self, source, predicate, target) -> list[tuple[str, object]]:
        """Annotations on the reified axiom ``source predicate target`` (owl:Axiom)."""
        target_key = self.expression_key(target)
        out = []
        for ax in self.graph.subjects(OWL.annotatedSource, source):
            if self.graph.value(ax, OWL.annotatedProperty) != predicate:
                continue
            ax_target = self.graph.value(ax, OWL.annotatedTarget)
            if ax_target is None or self.expression_key(ax_target) != target_key:
                continue
            out.extend(self.annotations(ax))
        return out

    # ---- descriptions ----
    def _description_from_annotations(self, entity) -> str | None:
        by_lang: dict = {}
        for prop in DESCRIPTION_PROPERTIES:
            for o in self.graph.objects(entity, prop):
                if not isinstance(o, Literal):
                    continue
                by_lang.setdefault(o.language or "", normalize_text(o))
            if by_lang:
                break
        if not by_lang:
            return None
        return by_lang.get("en") or by_lang.get("") or by_lang[sorted(by_lang)[0]]

    def description(self, entity, default_descriptions: bool) -> str | None:
        """
        Description of ``entity`` (en first, then untagged). Object properties
        without one borrow it from their range class.
        """
        text = self._description_from_annotations(entity)
        if text is None and self.is_object_property(entity):
            for rng in self.range_classes(entity):
                text = self._description_from_annotations(rng)
                if text is not None:
                    break
        if text is None:
            logger.debug("No description for %s", entity)
            return DEFAULT_DESCRIPTION if default_descriptions else None
        return text
