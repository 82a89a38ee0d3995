"""Ingestion of JSON-LD documents into graph nodes.

Files may be compact (with an ``@context``) or already expanded; they are run
through pyld's ``expand`` first, so node conversion only ever sees expanded
form (every key a full IRI, every value a list of ``{"@id": ...}`` or
``{"@value": ..., "@language": ...}`` objects). Identifiers are shortened
with the configured namespaces so the rest of the pipeline works on
``ph:Ebola`` rather than full IRIs.
"""

import json
from pathlib import Path

from pyld import jsonld

from ontofacet.config import OntologyConfig
from ontofacet.identifiers import shorten
from ontofacet.models import GraphNode, LiteralValue, Reference
from ontofacet.vocab import ALT_LABEL_PREDICATES, RDFS_COMMENT, RDFS_LABEL, RDFS_SUBCLASS_OF

_DESCRIPTIVE = {RDFS_LABEL, RDFS_COMMENT, RDFS_SUBCLASS_OF, *ALT_LABEL_PREDICATES}


def _as_list(value) -> list:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def pick_literal(values: list, language: str = "en") -> str | None:
    """Pick a literal, preferring the given language, else the first one."""
    literals = [v for v in _as_list(values) if isinstance(v, dict) and "@value" in v]
    if not literals:
        return None
    for v in literals:
        if v.get("@language") == language:
            return v["@value"]
    return literals[0]["@value"] or None


def _flatten(data) -> list[dict]:
    """Collect node objects, descending into @graph containers."""
    nodes = []
    for item in _as_list(data):
        if not isinstance(item, dict):
            continue
        if "@graph" in item:
            nodes.extend(_flatten(item["@graph"]))
            # A named graph object carries no node data of its own
            if set(item) <= {"@graph", "@id", "@context"}:
                continue
        nodes.append(item)
    return nodes


def node_from_jsonld(raw: dict, config: OntologyConfig) -> GraphNode:
    """Convert one expanded JSON-LD node object into a GraphNode."""
    ns = config.namespaces
    by_predicate = {
        shorten(key, ns): _as_list(values)
        for key, values in raw.items()
        if not key.startswith("@")
    }

    alt_labels: list[str] = []
    for predicate in ALT_LABEL_PREDICATES:
        values = by_predicate.get(predicate)
        if values:
            alt_labels = [v["@value"] for v in values if isinstance(v, dict) and v.get("@value")]
            break

    parents = [
        shorten(v["@id"], ns)
        for v in by_predicate.get(RDFS_SUBCLASS_OF, [])
        if isinstance(v, dict) and "@id" in v
    ]

    properties: dict[str, list] = {}
    for predicate, values in by_predicate.items():
        if predicate in _DESCRIPTIVE:
            continue
        converted = []
        for v in values:
            if not isinstance(v, dict):
                continue
            # Ordered lists are flattened into plain values
            for item in _as_list(v["@list"]) if "@list" in v else [v]:
                if not isinstance(item, dict):
                    continue
                if "@id" in item:
                    converted.append(Reference(id=shorten(item["@id"], ns)))
                elif "@value" in item:
                    converted.append(LiteralValue(value=item["@value"]))
        if converted:
            properties[predicate] = converted

    return GraphNode(
        id=shorten(raw["@id"], ns),
        types=[shorten(t, ns) for t in _as_list(raw.get("@type"))],
        label=pick_literal(by_predicate.get(RDFS_LABEL, []), config.language),
        description=pick_literal(by_predicate.get(RDFS_COMMENT, []), config.language),
        alt_labels=alt_labels,
        parents=parents,
        properties=properties,
    )


def parse_expanded(data, config: OntologyConfig | None = None) -> list[GraphNode]:
    """Convert an expanded JSON-LD document into graph nodes.

    Node objects without an ``@id`` (blank nodes) are skipped.

    Raises:
        ValueError: If the document is neither a node list nor an object
    """
    if not isinstance(data, (list, dict)):
        raise ValueError("Expanded JSON-LD must be a list or an object")
    config = config or OntologyConfig()
    return [
        node_from_jsonld(raw, config)
        for raw in _flatten(data)
        if isinstance(raw.get("@id"), str) and not raw["@id"].startswith("_:")
    ]


def expand_document(data) -> list:
    """Expand a compact or expanded JSON-LD document.

    Raises:
        ValueError: If the JSON-LD processor rejects the document
    """
    try:
        return jsonld.expand(data)
    except jsonld.JsonLdError as e:
        raise ValueError(f"Invalid JSON-LD document: {e}") from e


def load_jsonld(path: Path, config: OntologyConfig | None = None) -> list[GraphNode]:
    """Load a JSON-LD file, compact or expanded.

    Args:
        path: Path to the .jsonld file
        config: Ontology config (namespaces, preferred language)

    Returns:
        List of GraphNode objects, in document order
    """
    if not path.exists():
        raise FileNotFoundError(f"Ontology file not found: {path}")
    return parse_expanded(expand_document(json.loads(path.read_text())), config)
