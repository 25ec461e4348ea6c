"""
Collect annotation text for the markdown documentation file.

For every configured annotation name the result maps a target, either a
class local name or ``Class#property``, to the annotation's literal text.
When several annotations hit the same target the one seen last is kept.
"""

import logging

from rdflib import Literal
from rdflib.namespace import OWL, RDFS

from .ontology import Ontology, normalize_text
from .restrictions import classify

logger = logging.getLogger(__name__)


def _text(value) -> str:
    return normalize_text(value) if isinstance(value, Literal) else ""


def _record(markdown_map: dict, names: set, annotations, target: str) -> None:
    for name, value in annotations:
        if name in names:
            markdown_map.setdefault(name, {})[target] = _text(value)


def _restriction_components(ontology: Ontology, expr) -> list:
    """Restriction nodes in ``expr``: the node itself or members of intersections/unions."""
    g = ontology.graph
    out, stack, seen = [], [expr], set()
    while stack:
        node = stack.pop(0)
        if node in seen:
            continue
        seen.add(node)
        if g.value(node, OWL.onProperty) is not None or (node, None, OWL.Restriction) in g:
            out.append(node)
            continue
        for pred in (OWL.intersectionOf, OWL.unionOf):
            head = g.value(node, pred)
            if head is not None:
                stack.extend(ontology.rdf_list(head))
    return out


def collect_class_annotations(ontology: Ontology, cls, names: set, markdown_map: dict) -> None:
    g = ontology.graph
    cls_name = ontology.short_form(cls)

    _record(markdown_map, names, ontology.annotations(cls), cls_name)

    for prop in ontology.properties_with_domain(cls):
        target = f"{cls_name}#{ontology.short_form(prop)}"
        _record(markdown_map, names, ontology.annotations(prop), target)
        for domain in g.objects(prop, RDFS.domain):
            _record(markdown_map, names, ontology.axiom_annotations(prop, RDFS.domain, domain), target)

    for expr in ontology.subclass_expressions(cls):
        axiom_annotations = ontology.axiom_annotations(cls, RDFS.subClassOf, expr)
        if axiom_annotations:
            for component in _restriction_components(ontology, expr):
                kind = classify(g, component)
                prop = g.value(component, OWL.onProperty)
                if kind.is_property_restriction and prop is not None:
                    target = f"{cls_name}#{ontology.short_form(prop)}"
                    _record(markdown_map, names, axiom_annotations, target)
                else:
                    logger.info(
                        "Failed while attempting to add markdown annotations for: %s (%s)",
                        cls_name, kind.value,
                    )

        for prop in ontology.properties_in(expr):
            target = f"{cls_name}#{ontology.short_form(prop)}"
            _record(markdown_map, names, ontology.annotations(prop), target)


def set_markdown_content_from_axiom_annotations(context) -> dict:
    """Fill ``context.markdown_generation_map`` for every referenced class."""
    names = context.config.annotation_config.markdown_annotation_names
    if not names:
        return context.markdown_generation_map
    classes = set(context.referenced_classes) | {context.base_class}
    for cls in sorted(classes, key=str):
        collect_class_annotations(context.ontology, cls, names, context.markdown_generation_map)
    return context.markdown_generation_map


def merge_markdown_maps(target: dict, source: dict) -> dict:
    """Merge ``source`` into ``target``; later entries win."""
    for name, entries in source.items():
        target.setdefault(name, {}).update(entries)
    return target
