"""Static vocabulary of the ECMO ontology: namespaces, type table, properties.

Identifiers here are in short (prefixed) form; ``identifiers.shorten`` turns
full IRIs into this form using the configured namespaces.
"""

from typing import Literal, NamedTuple

from ontofacet.models import EntityType, PropertyName, RelationKind

DEFAULT_NAMESPACES = {
    "ph": "http://ec.europa.eu/ecmo/public-health#",
    "core": "http://ec.europa.eu/ecmo/core#",
    "bio": "http://ec.europa.eu/ecmo/biology#",
    "owl": "http://www.w3.org/2002/07/owl#",
    "rdfs": "http://www.w3.org/2000/01/rdf-schema#",
    "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "skos": "http://www.w3.org/2004/02/skos/core#",
    "xsd": "http://www.w3.org/2001/XMLSchema#",
}


OWL_CLASS = "owl:Class"
RDFS_LABEL = "rdfs:label"
RDFS_COMMENT = "rdfs:comment"
RDFS_SUBCLASS_OF = "rdfs:subClassOf"
ALT_LABEL_PREDICATES = ("skos:altLabel", "ph:alternativeLabel")

# Uninformative ancestors ignored for root identification and type inference
GENERIC_PARENTS = (
    "owl:Thing",
    "owl:NamedIndividual",
    "rdfs:Resource",
    "http://www.w3.org/2002/07/owl#Thing",
    "http://www.w3.org/2002/07/owl#NamedIndividual",
    "http://www.w3.org/2000/01/rdf-schema#Resource",
)

CLASS_TYPE_TABLE: dict[str, EntityType] = {
    "ph:Disease": EntityType.DISEASE,
    "ph:InfectiousDisease": EntityType.DISEASE,
    "ph:SignOrSymptom": EntityType.SYMPTOM,
    "core:PathogenType": EntityType.PATHOGEN,
    "ph:PathogenicVirusType": EntityType.PATHOGEN,
    "ph:PathogenicBacteriumType": EntityType.PATHOGEN,
    "ph:PathogenicProtistType": EntityType.PATHOGEN,
    "ph:PathogenicParasiteType": EntityType.PATHOGEN,
    "bio:Virus": EntityType.PATHOGEN,
    "bio:Bacterium": EntityType.PATHOGEN,
    "bio:Parasite": EntityType.PATHOGEN,
    "ph:DiseaseVectorType": EntityType.VECTOR,
    "bio:Vector": EntityType.VECTOR,
    "ph:DiseaseHostType": EntityType.HOST,
    "core:Hazard": EntityType.HAZARD,
    "core:HydroMeteorologicalHazard": EntityType.HAZARD,
    "core:TechnologicalHazard": EntityType.HAZARD,
    "core:BiologicalHazard": EntityType.HAZARD,
    "ph:RouteOfTransmission": EntityType.ROUTE_OF_TRANSMISSION,
    "ph:PHSMType": EntityType.PHSM_TYPE,
    "bio:AnimalType": EntityType.ANIMAL_TYPE,
    "bio:TaxonomicRank": EntityType.TAXONOMIC_RANK,
    "core:SeverityLevelValue": EntityType.SEVERITY_LEVEL,
    "core:SeverityLevelScale": EntityType.SEVERITY_LEVEL,
    "bio:PlantType": EntityType.PLANT_TYPE,
    "bio:Species": EntityType.SPECIES,
    "ph:ToxinType": EntityType.TOXIN_TYPE,
    "ph:PestType": EntityType.PEST_TYPE,
}

# Types that name a whole partition; loose instances tagged only with one of
# these sit at the top level instead of under a subgroup.
BASE_TYPES = (
    "core:Hazard",
    "core:PathogenType",
    "ph:Disease",
    "ph:InfectiousDisease",
    "ph:DiseaseHostType",
    "ph:DiseaseVectorType",
    "bio:AnimalType",
    "bio:TaxonomicRank",
    "ph:RouteOfTransmission",
    "ph:PHSMType",
    "core:SeverityLevelValue",
    "core:SeverityLevelScale",
    "bio:PlantType",
    "bio:Species",
    "ph:ToxinType",
    "ph:PestType",
    "ph:SignOrSymptom",
)


class TypeLabels(NamedTuple):
    singular: str
    plural: str
    virtual_key: str  # suffix of the virtual-all identifier


TYPE_LABELS: dict[EntityType, TypeLabels] = {
    EntityType.DISEASE: TypeLabels("Disease", "Diseases", "Diseases"),
    EntityType.SYMPTOM: TypeLabels("Symptom", "Symptoms", "Symptoms"),
    EntityType.PATHOGEN: TypeLabels("Pathogen", "Pathogens", "Pathogens"),
    EntityType.VECTOR: TypeLabels("Vector", "Vectors", "Vectors"),
    EntityType.HOST: TypeLabels("Host", "Hosts", "Hosts"),
    EntityType.HAZARD: TypeLabels("Hazard", "Hazards", "Hazards"),
    EntityType.ROUTE_OF_TRANSMISSION: TypeLabels(
        "Route of Transmission", "Routes of Transmission", "RoutesOfTransmission"
    ),
    EntityType.PHSM_TYPE: TypeLabels("PHSM Type", "PHSM Types", "PHSMTypes"),
    EntityType.ANIMAL_TYPE: TypeLabels("Animal Type", "Animal Types", "AnimalTypes"),
    EntityType.TAXONOMIC_RANK: TypeLabels("Taxonomic Rank", "Taxonomic Ranks", "TaxonomicRanks"),
    EntityType.SEVERITY_LEVEL: TypeLabels("Severity Level", "Severity Levels", "SeverityLevels"),
    EntityType.PLANT_TYPE: TypeLabels("Plant Type", "Plant Types", "PlantTypes"),
    EntityType.SPECIES: TypeLabels("Species", "Species", "Species"),
    EntityType.TOXIN_TYPE: TypeLabels("Toxin Type", "Toxin Types", "ToxinTypes"),
    EntityType.PEST_TYPE: TypeLabels("Pest Type", "Pest Types", "PestTypes"),
}


RELATION_PREDICATES: dict[RelationKind, str] = {
    RelationKind.SYMPTOMS: "ph:hasSignOrSymptom",
    RelationKind.PATHOGENS: "ph:hasCausativeAgent",
    RelationKind.VECTORS: "ph:hasVector",
    RelationKind.HOSTS: "ph:hasSusceptibleHost",
}

RELATION_TARGET_TYPES: dict[RelationKind, EntityType] = {
    RelationKind.SYMPTOMS: EntityType.SYMPTOM,
    RelationKind.PATHOGENS: EntityType.PATHOGEN,
    RelationKind.VECTORS: EntityType.VECTOR,
    RelationKind.HOSTS: EntityType.HOST,
}

# Disease -> target phrasing, and the inverse phrasing from the target's side
RELATION_LABELS: dict[RelationKind, str] = {
    RelationKind.SYMPTOMS: "has as symptoms",
    RelationKind.PATHOGENS: "is caused by",
    RelationKind.VECTORS: "is transmitted via",
    RelationKind.HOSTS: "has as hosts",
}

REVERSE_RELATION_LABELS: dict[EntityType, str] = {
    EntityType.SYMPTOM: "is a symptom present in",
    EntityType.PATHOGEN: "is the pathogenic agent of",
    EntityType.VECTOR: "is a transmission vector for",
    EntityType.HOST: "is a host for",
    EntityType.HAZARD: "is associated with",
}


class PropertySpec(NamedTuple):
    predicate: str
    shape: Literal["ref", "refs", "literal"]


_BIOLOGICAL = {
    PropertyName.TAXONOMIC_RANK: PropertySpec("bio:hasRank", "ref"),
    PropertyName.BELONGS_TO: PropertySpec("bio:belongsTo", "refs"),
    PropertyName.INCLUDES: PropertySpec("bio:includes", "refs"),
}

PROPERTY_VOCABULARY: dict[EntityType, dict[PropertyName, PropertySpec]] = {
    EntityType.DISEASE: {
        PropertyName.ROUTES_OF_TRANSMISSION: PropertySpec("ph:hasRouteOfTransmission", "refs"),
        PropertyName.OUTCOMES: PropertySpec("ph:hasOutcome", "refs"),
        PropertyName.INCUBATION_PERIOD: PropertySpec("ph:hasIncubationPeriod", "literal"),
    },
    EntityType.PATHOGEN: {
        **_BIOLOGICAL,
        PropertyName.PRODUCES_TOXIN: PropertySpec("ph:producesToxin", "refs"),
        PropertyName.CAUSED_DISEASES: PropertySpec("ph:isCausativeAgentOf", "refs"),
    },
    EntityType.VECTOR: {
        **_BIOLOGICAL,
        PropertyName.VECTOR_OF_DISEASES: PropertySpec("ph:isVectorOf", "refs"),
    },
    EntityType.HOST: {
        **_BIOLOGICAL,
        PropertyName.SUSCEPTIBLE_TO_DISEASES: PropertySpec("ph:isSusceptibleHostOf", "refs"),
        PropertyName.COMPOSED_OF_ORGANISMS: PropertySpec("ph:composedOfOrganisms", "refs"),
    },
    EntityType.SYMPTOM: {
        PropertyName.PRESENT_IN_DISEASES: PropertySpec("ph:isSignOrSymptomOf", "refs"),
    },
    EntityType.HAZARD: {
        PropertyName.MANIFESTED_IN_EVENTS: PropertySpec("core:isManifestationIn", "refs"),
    },
    EntityType.ANIMAL_TYPE: dict(_BIOLOGICAL),
    EntityType.PLANT_TYPE: dict(_BIOLOGICAL),
    EntityType.SPECIES: dict(_BIOLOGICAL),
}
