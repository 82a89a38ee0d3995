"""Hierarchy materialization: class tree -> flat, typed entity partitions.

Each resolved root class is walked in pre-order. Every visited class becomes
a category entity, followed by the individuals declared as its instances,
followed by its subclasses. The result is one ordered list of entities per
semantic type; tree shape lives only in the ``parent`` back-references.
"""

from dataclasses import dataclass, field
from typing import Iterable

import structlog

from ontofacet.classes import ClassGraph, is_class_node
from ontofacet.config import OntologyConfig
from ontofacet.identifiers import (
    label_from_identifier,
    namespace_of,
    virtual_all_id,
    virtual_all_label,
)
from ontofacet.models import (
    Entity,
    EntityType,
    GraphNode,
    LiteralValue,
    MissingReference,
    PropertyName,
    Reference,
    ReferenceList,
)
from ontofacet.vocab import PROPERTY_VOCABULARY

logger = structlog.get_logger(__name__)


def index_nodes(nodes: Iterable[GraphNode]) -> dict[str, GraphNode]:
    """Map identifier -> node.

    The first labeled node with an identifier wins; an unlabeled node is only
    kept until a labeled one with the same identifier turns up. Keys stay in
    first-appearance order.
    """
    by_id: dict[str, GraphNode] = {}
    for node in nodes:
        current = by_id.get(node.id)
        if current is None or (not current.label and node.label):
            by_id[node.id] = node
    return by_id


def extract_properties(node: GraphNode, entity_type: EntityType) -> dict[PropertyName, object]:
    """Extract the property bag for a node through its type's vocabulary."""
    properties = {}
    for name, spec in PROPERTY_VOCABULARY.get(entity_type, {}).items():
        if spec.shape == "literal":
            value = node.literal(spec.predicate)
            if value is not None:
                properties[name] = LiteralValue(value=value)
            continue

        refs = node.references(spec.predicate)
        if not refs:
            continue
        if spec.shape == "ref":
            properties[name] = Reference(id=refs[0])
        else:
            properties[name] = ReferenceList(ids=refs)
    return properties


@dataclass
class _Partition:
    entities: list[Entity] = field(default_factory=list)
    ids: set[str] = field(default_factory=set)

    def add(self, entity: Entity) -> None:
        self.entities.append(entity)
        self.ids.add(entity.id)


@dataclass
class Materialization:
    """Output of the materializer plus what it had to work around."""

    partitions: dict[EntityType, list[Entity]]
    unresolved_roots: list[str] = field(default_factory=list)
    promoted_classes: list[str] = field(default_factory=list)
    placeholders: list[str] = field(default_factory=list)
    skipped_individuals: list[str] = field(default_factory=list)


class HierarchyMaterializer:
    """Flatten a class graph and its individuals into typed partitions."""

    def __init__(
        self,
        graph: ClassGraph,
        nodes: Iterable[GraphNode],
        config: OntologyConfig | None = None,
    ):
        self.graph = graph
        self.config = config or OntologyConfig()
        self.nodes_by_id = index_nodes(nodes)
        self.type_table = self.config.type_table()

        self._partitions = {t: _Partition() for t in EntityType}
        self._placed_classes: set[str] = set()
        self._placed_individuals: set[str] = set()
        self._individuals: list[GraphNode] = []
        self._skipped: list[str] = []
        # class id -> individuals typed with it, independent of traversal order
        self._instances: dict[str, list[GraphNode]] = {}
        self._index_individuals()

    def _index_individuals(self) -> None:
        for node in self.nodes_by_id.values():
            if is_class_node(node):
                continue
            if not node.label:
                self._skipped.append(node.id)
                continue
            self._individuals.append(node)
            for type_id in node.types:
                if type_id in self.graph.classes:
                    self._instances.setdefault(type_id, []).append(node)

    def materialize(self) -> Materialization:
        result = Materialization(partitions={}, skipped_individuals=list(self._skipped))

        for root_id in self.graph.roots:
            entity_type = self.graph.classes[root_id].inferred_type
            if entity_type is None:
                result.unresolved_roots.append(root_id)
                logger.warning(
                    "unresolved_root_class",
                    class_id=root_id,
                    label=self.graph.classes[root_id].label,
                )
                continue
            self._walk(root_id, None, entity_type)

        # Classes no root reaches: members of is-a cycles, or children of
        # unlabeled declarations. First in declaration order is promoted.
        for class_id, cls in self.graph.classes.items():
            if class_id in self._placed_classes:
                continue
            if cls.inferred_type is None:
                logger.warning("unreachable_class_untyped", class_id=class_id)
                continue
            unlabeled = self.graph.unlabeled_parents(class_id)
            parent = unlabeled[0] if unlabeled else None
            result.promoted_classes.append(class_id)
            logger.info("class_promoted", class_id=class_id, parent=parent)
            self._walk(class_id, parent, cls.inferred_type)

        self._place_loose_individuals()

        for entity_type, partition in self._partitions.items():
            result.placeholders.extend(self._synthesize_placeholders(entity_type, partition))

        result.partitions = {t: p.entities for t, p in self._partitions.items()}
        if self._skipped:
            logger.info("individuals_without_label_skipped", count=len(self._skipped))
        return result

    def _walk(self, class_id: str, parent: str | None, entity_type: EntityType) -> None:
        """Pre-order walk of one class subtree into a partition.

        A class already present in the partition is not visited again, so the
        first parent seen wins and cyclic is-a edges terminate.
        """
        partition = self._partitions[entity_type]
        if class_id in partition.ids:
            return
        self._placed_classes.add(class_id)

        cls = self.graph.classes[class_id]
        node = self.nodes_by_id.get(class_id)
        partition.add(Entity(
            id=class_id,
            label=cls.label,
            type=entity_type,
            is_category=True,
            parent=parent,
            description=cls.description,
            alt_labels=tuple(node.alt_labels) if node else (),
        ))

        for individual in self._instances.get(class_id, []):
            if individual.id in partition.ids:
                continue
            partition.add(self._individual_entity(individual, entity_type, class_id))

        for child_id in self.graph.children.get(class_id, []):
            if child_id in self.graph.classes:
                self._walk(child_id, class_id, entity_type)

    def _individual_entity(
        self, node: GraphNode, entity_type: EntityType, parent: str | None
    ) -> Entity:
        # Class membership decides type and parent, whatever else the node says
        self._placed_individuals.add(node.id)
        return Entity(
            id=node.id,
            label=node.label,
            type=entity_type,
            is_category=False,
            parent=parent,
            description=node.description,
            alt_labels=tuple(node.alt_labels),
            properties=extract_properties(node, entity_type),
        )

    def _place_loose_individuals(self) -> None:
        """Place individuals no class pulled in, using their type tags.

        A tag found in the type table selects the partition; unless it is a
        base type it also becomes the parent (synthesized later if missing).
        """
        base_types = set(self.config.base_types)
        generic = set(self.config.generic_parents)
        for node in self._individuals:
            if node.id in self._placed_individuals:
                continue
            seen_types = set()
            for type_id in node.types:
                if type_id in generic or type_id not in self.type_table:
                    continue
                entity_type = self.type_table[type_id]
                if entity_type in seen_types:
                    continue
                seen_types.add(entity_type)
                partition = self._partitions[entity_type]
                if node.id in partition.ids:
                    continue
                parent = None if type_id in base_types else type_id
                partition.add(self._individual_entity(node, entity_type, parent))

    def _synthesize_placeholders(self, entity_type: EntityType, partition: _Partition) -> list[str]:
        missing = []
        for entity in partition.entities:
            if entity.parent and entity.parent not in partition.ids and entity.parent not in missing:
                missing.append(entity.parent)

        for parent_id in missing:
            node = self.nodes_by_id.get(parent_id)
            label = node.label if node and node.label else label_from_identifier(parent_id)
            partition.add(Entity(
                id=parent_id,
                label=label,
                type=entity_type,
                is_category=True,
                description=node.description if node else None,
            ))
            logger.debug("placeholder_synthesized", entity_id=parent_id, type=entity_type.value)
        return missing


def add_virtual_all(partitions: dict[EntityType, list[Entity]]) -> dict[EntityType, list[Entity]]:
    """Prepend the virtual "All <type>" category to every partition."""
    return {
        entity_type: [
            Entity(
                id=virtual_all_id(entity_type),
                label=virtual_all_label(entity_type),
                type=entity_type,
                is_category=True,
            ),
            *[e for e in partitions.get(entity_type, []) if not e.is_virtual],
        ]
        for entity_type in EntityType
    }


def find_missing_references(
    partitions: dict[EntityType, list[Entity]],
    relation_targets: dict[str, list[str]],
    nodes_by_id: dict[str, GraphNode] | None = None,
) -> dict[str, list[MissingReference]]:
    """Report identifiers referenced but never materialized, by namespace.

    Args:
        partitions: Materialized entities per type
        relation_targets: Disease id -> every relation target id
        nodes_by_id: Ingested nodes, used for labels when available

    Returns:
        Namespace -> missing references, in first-reference order
    """
    nodes_by_id = nodes_by_id or {}
    known: dict[str, Entity] = {}
    for entities in partitions.values():
        for entity in entities:
            known.setdefault(entity.id, entity)

    missing: dict[str, MissingReference] = {}

    def record(target: str, referrer: str) -> None:
        if target in known:
            return
        if target not in missing:
            node = nodes_by_id.get(target)
            missing[target] = MissingReference(
                id=target,
                namespace=namespace_of(target),
                label=node.label if node and node.label else label_from_identifier(target),
            )
        missing[target].referenced_by.append(referrer)

    for entities in partitions.values():
        for entity in entities:
            for target in entity.referenced_ids():
                record(target, f"{entity.label} ({entity.type.value})")

    for disease_id, targets in relation_targets.items():
        referrer = known[disease_id] if disease_id in known else None
        name = f"{referrer.label} ({referrer.type.value})" if referrer else disease_id
        for target in targets:
            record(target, name)

    grouped: dict[str, list[MissingReference]] = {}
    for ref in missing.values():
        grouped.setdefault(ref.namespace, []).append(ref)

    for namespace, refs in grouped.items():
        logger.warning(
            "missing_referenced_entities",
            namespace=namespace or "(none)",
            count=len(refs),
            ids=[r.id for r in refs],
        )
    return grouped
