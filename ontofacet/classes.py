"""Class graph construction and semantic type inference.

Classes are the ``owl:Class`` nodes of the ingested graph. The builder keeps
their raw ``rdfs:subClassOf`` parents for type inference and derives a
parent -> children adjacency restricted to edges between declared classes.
"""

from dataclasses import dataclass, field
from typing import Iterable

import structlog

from ontofacet.config import OntologyConfig
from ontofacet.models import EntityType, GraphNode, OntologyClass
from ontofacet.vocab import OWL_CLASS

logger = structlog.get_logger(__name__)

OWL_CLASS_IRI = "http://www.w3.org/2002/07/owl#Class"


def is_class_node(node: GraphNode) -> bool:
    return OWL_CLASS in node.types or OWL_CLASS_IRI in node.types


@dataclass
class ClassGraph:
    """Declared classes with their adjacency and roots."""

    classes: dict[str, OntologyClass]  # labeled declarations, in declaration order
    declared: set[str]  # every owl:Class identifier, labeled or not
    raw_parents: dict[str, tuple[str, ...]]  # for every declared identifier
    children: dict[str, list[str]] = field(default_factory=dict)
    roots: list[str] = field(default_factory=list)
    generic_parents: frozenset[str] = frozenset()

    def informative_parents(self, class_id: str) -> list[str]:
        """Raw parents minus generic ones and self references."""
        return [
            p for p in self.raw_parents.get(class_id, ())
            if p not in self.generic_parents and p != class_id
        ]

    def declared_parents(self, class_id: str) -> list[str]:
        return [p for p in self.informative_parents(class_id) if p in self.declared]

    def unlabeled_parents(self, class_id: str) -> list[str]:
        """Declared parents that were discarded for lacking a label."""
        return [p for p in self.declared_parents(class_id) if p not in self.classes]

    def is_root(self, class_id: str) -> bool:
        return not self.declared_parents(class_id)


def infer_type(
    class_id: str,
    graph: ClassGraph,
    table: dict[str, EntityType],
    visited: set[str] | None = None,
) -> EntityType | None:
    """Resolve the semantic type of a class.

    Tries the identifier itself in ``table``, then walks the raw parent list
    depth-first (generic parents skipped), testing each parent against the
    table before recursing into its own ancestors. The first resolved type
    wins. ``visited`` is threaded through the recursion so cyclic ancestry
    terminates.

    Returns:
        The resolved EntityType, or None if no table entry is reachable
    """
    if class_id in table:
        return table[class_id]
    if visited is None:
        visited = set()
    visited.add(class_id)

    for parent in graph.informative_parents(class_id):
        if parent in visited:
            continue
        if parent in table:
            return table[parent]
        resolved = infer_type(parent, graph, table, visited)
        if resolved is not None:
            return resolved
    return None


def build_class_graph(nodes: Iterable[GraphNode], config: OntologyConfig | None = None) -> ClassGraph:
    """Build the class graph from ingested nodes.

    Class declarations without a label are discarded as classes, but their
    identifiers still count as declared for adjacency and root
    identification. When a class is declared twice, the first labeled
    declaration wins, parents included.

    Args:
        nodes: Ingested graph nodes (classes and individuals mixed)
        config: Ontology config (generic parents, type table)

    Returns:
        ClassGraph with inferred types set on every class
    """
    config = config or OntologyConfig()
    declared: set[str] = set()
    raw_parents: dict[str, tuple[str, ...]] = {}
    untyped: dict[str, OntologyClass] = {}
    skipped = 0

    for node in nodes:
        if not is_class_node(node):
            continue
        declared.add(node.id)
        if not node.label:
            raw_parents.setdefault(node.id, tuple(node.parents))
            skipped += 1
            logger.debug("class_without_label_skipped", class_id=node.id)
            continue
        if node.id in untyped:
            continue
        # Parents come from the declaration that supplies the class
        raw_parents[node.id] = tuple(node.parents)
        untyped[node.id] = OntologyClass(
            id=node.id,
            label=node.label,
            description=node.description,
            parents=tuple(node.parents),
        )

    graph = ClassGraph(
        classes=untyped,
        declared=declared,
        raw_parents=raw_parents,
        generic_parents=frozenset(config.generic_parents),
    )

    for class_id in untyped:
        for parent in graph.declared_parents(class_id):
            siblings = graph.children.setdefault(parent, [])
            if class_id not in siblings:
                siblings.append(class_id)
        if graph.is_root(class_id):
            graph.roots.append(class_id)

    table = config.type_table()
    graph.classes = {
        class_id: cls.model_copy(update={"inferred_type": infer_type(class_id, graph, table)})
        for class_id, cls in untyped.items()
    }

    logger.info(
        "class_graph_built",
        classes=len(graph.classes),
        roots=len(graph.roots),
        skipped_unlabeled=skipped,
    )
    return graph
