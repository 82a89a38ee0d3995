"""Build pipeline: graph nodes -> registry, relation index and diagnostics."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import structlog

from ontofacet.classes import build_class_graph
from ontofacet.config import OntologyConfig
from ontofacet.hierarchy import (
    HierarchyMaterializer,
    add_virtual_all,
    find_missing_references,
    index_nodes,
)
from ontofacet.jsonld import load_jsonld
from ontofacet.models import EntityType, GraphNode, MissingReference
from ontofacet.query import QueryEngine
from ontofacet.registry import Registry
from ontofacet.relations import RelationIndex, build_relation_index, synthesize_symptoms

logger = structlog.get_logger(__name__)


@dataclass
class OntologyBuild:
    """Everything derived from one ingested ontology snapshot."""

    registry: Registry
    relations: RelationIndex
    missing_references: dict[str, list[MissingReference]] = field(default_factory=dict)
    unresolved_classes: list[str] = field(default_factory=list)
    promoted_classes: list[str] = field(default_factory=list)
    placeholders: list[str] = field(default_factory=list)
    skipped_nodes: list[str] = field(default_factory=list)

    def engine(self) -> QueryEngine:
        return QueryEngine(self.registry, self.relations)

    @property
    def missing_count(self) -> int:
        return sum(len(refs) for refs in self.missing_references.values())


def build_ontology(nodes: Iterable[GraphNode], config: OntologyConfig | None = None) -> OntologyBuild:
    """Run the hierarchy constructor over ingested nodes.

    Steps: class graph and type inference, pre-order materialization with
    placeholder parents, virtual "All" categories, relation index, symptom
    synthesis, missing-reference diagnostics. Nothing here raises for bad
    ontology content; problems are logged and returned on the build.

    Args:
        nodes: Graph nodes from ingestion
        config: Ontology config (defaults to the ECMO vocabulary)

    Returns:
        OntologyBuild with a read-only registry and relation index
    """
    config = config or OntologyConfig()
    nodes = list(nodes)
    nodes_by_id = index_nodes(nodes)

    graph = build_class_graph(nodes, config)
    materialized = HierarchyMaterializer(graph, nodes, config).materialize()
    partitions = add_virtual_all(materialized.partitions)

    relations = build_relation_index(partitions[EntityType.DISEASE], nodes_by_id)
    partitions[EntityType.SYMPTOM].extend(
        synthesize_symptoms(relations, partitions[EntityType.SYMPTOM], nodes_by_id)
    )

    missing = find_missing_references(partitions, relations.as_dict(), nodes_by_id)
    registry = Registry(partitions, graph.classes, materialized.unresolved_roots)

    logger.info(
        "ontology_built",
        entities=len(registry),
        diseases_with_relations=len(relations),
        unresolved_roots=len(materialized.unresolved_roots),
        missing_references=sum(len(refs) for refs in missing.values()),
    )
    return OntologyBuild(
        registry=registry,
        relations=relations,
        missing_references=missing,
        unresolved_classes=materialized.unresolved_roots,
        promoted_classes=materialized.promoted_classes,
        placeholders=materialized.placeholders,
        skipped_nodes=materialized.skipped_individuals,
    )


def build_from_file(path: Path, config: OntologyConfig | None = None) -> OntologyBuild:
    """Load a JSON-LD file and build it."""
    return build_ontology(load_jsonld(path, config), config)
