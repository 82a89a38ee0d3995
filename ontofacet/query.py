"""Faceted query engine: boolean term folds over tagged documents.

A query is an ordered list of (entity, operator) terms. Evaluation seeds the
result from the first term and folds the rest strictly left to right, with
no precedence or grouping:

    ANY  -> result or match
    ALL  -> result and match
    NONE -> result and not match

so ``[(A, ALL), (B, NONE)]`` and ``[(B, NONE), (A, ALL)]`` can differ. The
engine is a pure function of its inputs and the read-only registry and
relation index.
"""

from typing import Iterable, Sequence

from ontofacet.models import Document, Entity, EntityType, Operator, QueryTerm, RelationKind
from ontofacet.registry import Registry
from ontofacet.relations import RelationIndex
from ontofacet.vocab import RELATION_TARGET_TYPES


def parse_term(text: str, registry: Registry) -> QueryTerm:
    """Build a query term from ``<id or label>[=any|all|none]``.

    The operator defaults to ANY. The entity is looked up by identifier
    first, then by exact label or alternate label.

    Raises:
        ValueError: If the entity or operator is unknown
    """
    reference, sep, op_text = text.rpartition("=")
    if not sep:
        reference, op_text = text, Operator.ANY.value
    reference = reference.strip()

    try:
        operator = Operator(op_text.strip().lower())
    except ValueError:
        valid = ", ".join(o.value for o in Operator)
        raise ValueError(f"Unknown operator '{op_text}' (expected one of: {valid})") from None

    entity = registry.get(reference) or registry.get_by_label(reference)
    if entity is None:
        raise ValueError(f"Unknown entity: {reference}")
    return QueryTerm(entity=entity, operator=operator)


class QueryEngine:
    """Evaluate queries and compute related terms over one registry."""

    def __init__(self, registry: Registry, relations: RelationIndex):
        self.registry = registry
        self.relations = relations

    def descendant_closure(self, category: Entity) -> list[Entity]:
        return self.registry.descendant_closure(category)

    def _match_set(self, entity: Entity) -> frozenset[str]:
        if entity.is_category:
            return frozenset(e.id for e in self.descendant_closure(entity))
        return frozenset((entity.id,))

    def matches(self, document: Document, term: QueryTerm) -> bool:
        """Whether a document matches one term, ignoring its operator."""
        return not self._match_set(term.entity).isdisjoint(document.tags)

    def evaluate(self, query: Sequence[QueryTerm], documents: Iterable[Document]) -> list[Document]:
        """Documents satisfying the query, in input order.

        An empty query matches nothing.
        """
        if not query:
            return []

        # Closures are computed once per term, not per document
        match_sets = [self._match_set(term.entity) for term in query]
        first = query[0]

        results = []
        for document in documents:
            hits = [not ids.isdisjoint(document.tags) for ids in match_sets]

            result = not hits[0] if first.operator == Operator.NONE else hits[0]
            for term, hit in zip(query[1:], hits[1:]):
                if term.operator == Operator.ANY:
                    result = result or hit
                elif term.operator == Operator.ALL:
                    result = result and hit
                else:
                    result = result and not hit

            if result:
                results.append(document)
        return results

    def _resolve(self, target_id: str, kind: RelationKind) -> Entity | None:
        return (
            self.registry.get(target_id, RELATION_TARGET_TYPES[kind])
            or self.registry.get(target_id)
        )

    def _disease_targets(self, diseases: Iterable[Entity]) -> list[Entity]:
        related: dict[str, Entity] = {}
        for disease in diseases:
            record = self.relations.get(disease.id)
            if record is None:
                continue
            for kind in RelationKind:
                for target_id in record.targets.get(kind, []):
                    if target_id in related:
                        continue
                    entity = self._resolve(target_id, kind)
                    if entity is not None:
                        related[target_id] = entity
        return list(related.values())

    def related_to(self, selected: Entity) -> list[Entity]:
        """Entities semantically related to a selected term.

        - Disease individual: its relation targets across every kind.
        - Disease category (virtual "All" included): the union of targets of
          every disease in its descendant closure.
        - Other individual: every disease individual referencing it.
        - Other category: every disease individual referencing any member of
          its descendant closure, followed by those members.

        Results are unique and in first-seen order; targets missing from the
        registry are skipped.
        """
        if selected.type == EntityType.DISEASE:
            if selected.is_category:
                return self._disease_targets(self.descendant_closure(selected))
            return self._disease_targets([selected])

        if not selected.is_category:
            diseases = []
            for disease_id in self.relations.diseases_referencing(selected.id):
                disease = self.registry.get(disease_id, EntityType.DISEASE)
                if disease is not None and not disease.is_category:
                    diseases.append(disease)
            return diseases

        members = self.descendant_closure(selected)
        member_ids = {m.id for m in members}
        diseases = []
        for disease in self.registry.individuals(EntityType.DISEASE):
            if not member_ids.isdisjoint(self.relations.targets(disease.id)):
                diseases.append(disease)

        related: dict[str, Entity] = {}
        for entity in [*diseases, *members]:
            related.setdefault(entity.id, entity)
        return list(related.values())

    # Natural-language rendering

    def describe_term(self, entity: Entity) -> str:
        if entity.is_category:
            count = len(self.descendant_closure(entity))
            return f"any {entity.label.lower()} ({count} types)"
        return entity.label

    def describe_query(self, query: Sequence[QueryTerm]) -> str:
        """Render a query as text, e.g. ``Ebola Virus Disease and not any rash (2 types)``."""
        parts = []
        for position, term in enumerate(query):
            text = self.describe_term(term.entity)
            if position == 0:
                parts.append(f"not {text}" if term.operator == Operator.NONE else text)
            elif term.operator == Operator.ANY:
                parts.append(f"or {text}")
            elif term.operator == Operator.ALL:
                parts.append(f"and {text}")
            else:
                parts.append(f"and not {text}")
        return " ".join(parts)
