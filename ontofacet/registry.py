"""Entity/category registry: the read-only store the query engine reads.

Entities are kept as one ordered list per semantic type (an arena) plus a
parent-identifier index per partition. The registry is built once and never
mutated, so one instance can be shared by any number of readers.
"""

from typing import Iterable, Iterator

from ontofacet.identifiers import is_virtual, virtual_all_id
from ontofacet.models import Entity, EntityType, OntologyClass
from ontofacet.vocab import TYPE_LABELS

DEFAULT_SEARCH_LIMIT = 20
MIN_PARTITION_QUERY = 3


class Registry:
    """Typed partitions of entities with lookup and hierarchy navigation."""

    def __init__(
        self,
        partitions: dict[EntityType, Iterable[Entity]],
        classes: dict[str, OntologyClass] | None = None,
        unresolved_classes: Iterable[str] = (),
    ):
        self._partitions: dict[EntityType, tuple[Entity, ...]] = {
            t: tuple(partitions.get(t, ())) for t in EntityType
        }
        self._classes = dict(classes or {})
        self._unresolved = tuple(unresolved_classes)

        self._by_id: dict[str, dict[EntityType, Entity]] = {}
        self._children: dict[tuple[EntityType, str], list[Entity]] = {}
        for entity_type, entities in self._partitions.items():
            for entity in entities:
                self._by_id.setdefault(entity.id, {}).setdefault(entity_type, entity)
                if entity.parent:
                    self._children.setdefault((entity_type, entity.parent), []).append(entity)

    # Lookup

    def get(self, entity_id: str, entity_type: EntityType | None = None) -> Entity | None:
        """Look up an entity by identifier.

        An identifier can live in several partitions (e.g. a disease that is
        also a hazard); without ``entity_type`` the first partition in
        EntityType order wins.
        """
        found = self._by_id.get(entity_id)
        if not found:
            return None
        if entity_type is not None:
            return found.get(entity_type)
        return next(iter(found.values()))

    def get_by_label(self, label: str) -> Entity | None:
        """First entity whose label or alternate label equals ``label`` (case-insensitive)."""
        wanted = label.casefold()
        for entity in self:
            if entity.label.casefold() == wanted:
                return entity
            if any(alt.casefold() == wanted for alt in entity.alt_labels):
                return entity
        return None

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self._by_id

    def __iter__(self) -> Iterator[Entity]:
        for entities in self._partitions.values():
            yield from entities

    def __len__(self) -> int:
        return sum(len(entities) for entities in self._partitions.values())

    # Partitions

    def partition(self, entity_type: EntityType) -> list[Entity]:
        return list(self._partitions[entity_type])

    def partition_of(self, entity_id: str) -> list[EntityType]:
        """Every partition holding ``entity_id``, in EntityType order."""
        return list(self._by_id.get(entity_id, {}))

    def individuals(self, entity_type: EntityType) -> list[Entity]:
        return [e for e in self._partitions[entity_type] if not e.is_category]

    def top_level(self, entity_type: EntityType) -> list[Entity]:
        """Entities with no parent, excluding the virtual-all category."""
        return [e for e in self._partitions[entity_type] if not e.parent and not e.is_virtual]

    def virtual_all(self, entity_type: EntityType) -> Entity | None:
        return self.get(virtual_all_id(entity_type), entity_type)

    def children(self, category_id: str, entity_type: EntityType) -> list[Entity]:
        return list(self._children.get((entity_type, category_id), []))

    @property
    def classes(self) -> dict[str, OntologyClass]:
        return dict(self._classes)

    @property
    def unresolved_classes(self) -> list[str]:
        return list(self._unresolved)

    # Hierarchy

    def descendant_closure(self, category: Entity | str, entity_type: EntityType | None = None) -> list[Entity]:
        """Every leaf individual under a category, in partition order.

        Nested category nodes are traversed but never returned. The virtual
        "All" category of a type closes over every individual of that type.
        An individual's closure is the individual itself.
        """
        if isinstance(category, str):
            entity = self.get(category, entity_type)
            if entity is None:
                return []
            category = entity

        if not category.is_category:
            return [category]

        if is_virtual(category.id):
            return self.individuals(category.type)

        closure: list[Entity] = []
        self._collect(category.type, category.id, set(), closure, set())
        return closure

    def _collect(
        self,
        entity_type: EntityType,
        category_id: str,
        visited: set[str],
        out: list[Entity],
        out_ids: set[str],
    ) -> None:
        if category_id in visited:
            return
        visited.add(category_id)
        for child in self._children.get((entity_type, category_id), []):
            if child.is_category:
                self._collect(entity_type, child.id, visited, out, out_ids)
            elif child.id not in out_ids:
                out.append(child)
                out_ids.add(child.id)

    # Search

    def search(self, text: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[Entity]:
        """Case-insensitive label search.

        If the text starts a partition name (at least three characters, e.g.
        "pathogen"), that partition's top-level items are returned instead.
        Otherwise entities whose label or alternate label contains the text
        are returned, in partition order, up to ``limit``.
        """
        query = text.strip().casefold()
        if not query:
            return []

        if len(query) >= MIN_PARTITION_QUERY:
            for entity_type, labels in TYPE_LABELS.items():
                if labels.plural.casefold().startswith(query):
                    return self.top_level(entity_type)[:limit]

        results = []
        for entity in self:
            if entity.is_virtual:
                continue
            haystack = [entity.label, *entity.alt_labels]
            if any(query in h.casefold() for h in haystack):
                results.append(entity)
                if len(results) >= limit:
                    break
        return results

    def stats(self) -> dict[str, dict[str, int]]:
        """Category and individual counts per partition (virtual excluded)."""
        return {
            t.value: {
                "categories": sum(1 for e in entities if e.is_category and not e.is_virtual),
                "individuals": sum(1 for e in entities if not e.is_category),
            }
            for t, entities in self._partitions.items()
        }
