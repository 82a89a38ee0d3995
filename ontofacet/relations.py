"""Relation index: typed outgoing relations of Disease individuals."""

from typing import Iterable, Iterator

import structlog

from ontofacet.identifiers import label_from_identifier
from ontofacet.models import Entity, EntityType, GraphNode, RelationKind, RelationRecord
from ontofacet.vocab import RELATION_PREDICATES

logger = structlog.get_logger(__name__)


def extract_relations(node: GraphNode) -> RelationRecord:
    """Extract a disease's relations from its raw properties.

    Every relation kind is present in the record; absent kinds are empty.
    Duplicate targets within one kind are dropped, keeping source order.
    """
    record = RelationRecord(disease_id=node.id)
    for kind, predicate in RELATION_PREDICATES.items():
        record.targets[kind] = list(dict.fromkeys(node.references(predicate)))
    return record


class RelationIndex:
    """Disease id -> RelationRecord, with an inverse target index."""

    def __init__(self, records: Iterable[RelationRecord] = ()):
        self._records: dict[str, RelationRecord] = {}
        self._inverse: dict[str, list[str]] = {}
        for record in records:
            self.add(record)

    def add(self, record: RelationRecord) -> None:
        if record.disease_id in self._records:
            return
        self._records[record.disease_id] = record
        for target in record.all_targets():
            self._inverse.setdefault(target, []).append(record.disease_id)

    def get(self, disease_id: str) -> RelationRecord | None:
        return self._records.get(disease_id)

    def targets(self, disease_id: str, kind: RelationKind | None = None) -> list[str]:
        """Targets of one disease, for one kind or all kinds (kind order)."""
        record = self._records.get(disease_id)
        if record is None:
            return []
        if kind is not None:
            return list(record.targets.get(kind, []))
        return record.all_targets()

    def diseases_referencing(self, entity_id: str) -> list[str]:
        """Diseases with ``entity_id`` among their targets, in index order."""
        return list(self._inverse.get(entity_id, []))

    def all_targets(self, kind: RelationKind) -> list[str]:
        """Every target of one kind across all diseases, first-seen order."""
        seen: dict[str, None] = {}
        for record in self._records.values():
            for target in record.targets.get(kind, []):
                seen.setdefault(target, None)
        return list(seen)

    def as_dict(self) -> dict[str, list[str]]:
        return {disease_id: record.all_targets() for disease_id, record in self._records.items()}

    def __contains__(self, disease_id: str) -> bool:
        return disease_id in self._records

    def __iter__(self) -> Iterator[RelationRecord]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)


def build_relation_index(
    diseases: Iterable[Entity],
    nodes_by_id: dict[str, GraphNode],
) -> RelationIndex:
    """Build the relation index for every Disease individual.

    Args:
        diseases: Entities of the Disease partition (categories are ignored)
        nodes_by_id: Ingested nodes, source of the raw relation properties

    Returns:
        RelationIndex in disease partition order
    """
    index = RelationIndex()
    for entity in diseases:
        if entity.is_category or entity.type != EntityType.DISEASE:
            continue
        node = nodes_by_id.get(entity.id)
        if node is None:
            index.add(RelationRecord(disease_id=entity.id))
            continue
        index.add(extract_relations(node))

    logger.info(
        "relation_index_built",
        diseases=len(index),
        with_relations=sum(1 for r in index if r.all_targets()),
    )
    return index


def synthesize_symptoms(
    index: RelationIndex,
    existing: Iterable[Entity],
    nodes_by_id: dict[str, GraphNode],
) -> list[Entity]:
    """Create Symptom entities from symptom relation targets.

    Symptoms have no standalone declaration in the source ontology; they exist
    only as targets of ``hasSignOrSymptom``. Targets already present in the
    Symptom partition are left alone. Labels come from any ingested node with
    the same identifier, else are generated from the identifier.
    """
    known = {e.id for e in existing}
    symptoms = []
    for target in index.all_targets(RelationKind.SYMPTOMS):
        if target in known:
            continue
        node = nodes_by_id.get(target)
        symptoms.append(Entity(
            id=target,
            label=node.label if node and node.label else label_from_identifier(target),
            type=EntityType.SYMPTOM,
            is_category=False,
            description=node.description if node else None,
            alt_labels=tuple(node.alt_labels) if node else (),
        ))

    logger.info("symptoms_synthesized", count=len(symptoms))
    return symptoms
