"""Data models for the OntoFacet ontology explorer."""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

VIRTUAL_PREFIX = "virtual:All"


class EntityType(str, Enum):
    """Semantic type partitions of the registry, in display order."""

    DISEASE = "Disease"
    SYMPTOM = "Symptom"
    PATHOGEN = "Pathogen"
    VECTOR = "Vector"
    HOST = "Host"
    HAZARD = "Hazard"
    ROUTE_OF_TRANSMISSION = "RouteOfTransmission"
    PHSM_TYPE = "PHSMType"
    ANIMAL_TYPE = "AnimalType"
    TAXONOMIC_RANK = "TaxonomicRank"
    SEVERITY_LEVEL = "SeverityLevel"
    PLANT_TYPE = "PlantType"
    SPECIES = "Species"
    TOXIN_TYPE = "ToxinType"
    PEST_TYPE = "PestType"


class Operator(str, Enum):
    """How a query term folds into the running result."""

    ANY = "any"
    ALL = "all"
    NONE = "none"


class RelationKind(str, Enum):
    """Directed relations from a Disease individual, in fixed order."""

    SYMPTOMS = "symptoms"
    PATHOGENS = "pathogens"
    VECTORS = "vectors"
    HOSTS = "hosts"


class PropertyName(str, Enum):
    """Closed vocabulary of entity properties (see vocab.PROPERTY_VOCABULARY)."""

    TAXONOMIC_RANK = "taxonomicRank"
    BELONGS_TO = "belongsTo"
    INCLUDES = "includes"
    ROUTES_OF_TRANSMISSION = "routesOfTransmission"
    OUTCOMES = "outcomes"
    INCUBATION_PERIOD = "incubationPeriod"
    PRODUCES_TOXIN = "producesToxin"
    CAUSED_DISEASES = "causedDiseases"
    VECTOR_OF_DISEASES = "vectorOfDiseases"
    SUSCEPTIBLE_TO_DISEASES = "susceptibleToDiseases"
    COMPOSED_OF_ORGANISMS = "composedOfOrganisms"
    PRESENT_IN_DISEASES = "presentInDiseases"
    MANIFESTED_IN_EVENTS = "manifestedInEvents"


class Reference(BaseModel):
    """A single reference to another node."""

    kind: Literal["ref"] = "ref"
    id: str

    def referenced_ids(self) -> list[str]:
        return [self.id]


class ReferenceList(BaseModel):
    """An ordered list of references."""

    kind: Literal["refs"] = "refs"
    ids: list[str]

    def referenced_ids(self) -> list[str]:
        return list(self.ids)


class LiteralValue(BaseModel):
    """A literal value (string, number or boolean)."""

    kind: Literal["literal"] = "literal"
    value: str | int | float | bool

    def referenced_ids(self) -> list[str]:
        return []


PropertyValue = Annotated[
    Union[Reference, ReferenceList, LiteralValue], Field(discriminator="kind")
]
NodeValue = Annotated[Union[Reference, LiteralValue], Field(discriminator="kind")]


class GraphNode(BaseModel):
    """A node delivered by ingestion, with references already resolved."""

    id: str
    types: list[str] = []
    label: str | None = None
    description: str | None = None
    alt_labels: list[str] = []
    parents: list[str] = []  # rdfs:subClassOf targets
    properties: dict[str, list[NodeValue]] = {}

    def references(self, predicate: str) -> list[str]:
        """Referenced ids for a predicate, in source order."""
        return [v.id for v in self.properties.get(predicate, []) if isinstance(v, Reference)]

    def literal(self, predicate: str) -> str | int | float | bool | None:
        """First literal value for a predicate, if any."""
        for v in self.properties.get(predicate, []):
            if isinstance(v, LiteralValue):
                return v.value
        return None


class OntologyClass(BaseModel):
    """A declared ontology class."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    description: str | None = None
    parents: tuple[str, ...] = ()  # raw, before generic parents are filtered
    inferred_type: EntityType | None = None


class Entity(BaseModel):
    """A category or individual in one semantic-type partition."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    type: EntityType
    is_category: bool = False
    parent: str | None = None  # nearest enclosing category in the materialized tree
    description: str | None = None
    alt_labels: tuple[str, ...] = ()
    properties: dict[PropertyName, PropertyValue] = {}

    @property
    def is_virtual(self) -> bool:
        return self.id.startswith(VIRTUAL_PREFIX)

    def referenced_ids(self) -> list[str]:
        """All reference values in the property bag."""
        ids = []
        for value in self.properties.values():
            ids.extend(value.referenced_ids())
        return ids


class RelationRecord(BaseModel):
    """Outgoing relations of one Disease individual."""

    disease_id: str
    targets: dict[RelationKind, list[str]] = Field(
        default_factory=lambda: {kind: [] for kind in RelationKind}
    )

    def all_targets(self) -> list[str]:
        """Targets across every kind, in kind order, without duplicates."""
        seen: dict[str, None] = {}
        for kind in RelationKind:
            for target in self.targets.get(kind, []):
                seen.setdefault(target, None)
        return list(seen)


class QueryTerm(BaseModel):
    """One (entity, operator) pair of a query."""

    entity: Entity
    operator: Operator = Operator.ANY


class Document(BaseModel):
    """A report tagged with entity identifiers."""

    model_config = ConfigDict(frozen=True)

    id: str
    metadata: dict[str, Any] = {}
    tags: frozenset[str] = frozenset()


class MissingReference(BaseModel):
    """An identifier referenced by the ontology but never defined."""

    id: str
    namespace: str
    label: str
    referenced_by: list[str] = []
