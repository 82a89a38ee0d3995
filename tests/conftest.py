"""Shared fixtures: a small ECMO-like ontology as ingested graph nodes."""

import pytest
import structlog

from ontofacet.build import build_ontology
from ontofacet.models import GraphNode, Reference


def owl_class(class_id, label=None, parents=()):
    return GraphNode(id=class_id, types=["owl:Class"], label=label, parents=list(parents))


def individual(node_id, label, types, **relations):
    properties = {
        predicate: [Reference(id=target) for target in targets]
        for predicate, targets in relations.items()
    }
    return GraphNode(id=node_id, types=list(types), label=label, properties=properties)


def disease(node_id, label, types, symptoms=(), pathogens=(), vectors=(), hosts=()):
    return individual(
        node_id,
        label,
        types,
        **{
            "ph:hasSignOrSymptom": symptoms,
            "ph:hasCausativeAgent": pathogens,
            "ph:hasVector": vectors,
            "ph:hasSusceptibleHost": hosts,
        },
    )


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def sample_nodes():
    """Disease, pathogen and vector trees with the usual irregularities.

    - ph:Orphan sits under an unlabeled class and must be promoted
    - ph:Mystery resolves to no type
    - ph:Cholera is typed only with a base type that is not declared
    - ph:BacillusAnthracis is referenced but never defined
    """
    return [
        owl_class("ph:Disease", "Disease", ["owl:Thing"]),
        owl_class("ph:ViralDisease", "Viral Disease", ["ph:Disease"]),
        owl_class("ph:VHF", "Viral Haemorrhagic Fever", ["ph:ViralDisease"]),
        owl_class("ph:BacterialDisease", "Bacterial Disease", ["ph:Disease"]),
        owl_class("core:PathogenType", "Pathogen", ["owl:Thing"]),
        owl_class("ph:PathogenicVirusType", "Pathogenic Virus", ["core:PathogenType"]),
        owl_class("ph:DiseaseVectorType", "Disease Vector"),
        owl_class("ph:Unlabeled", None, ["ph:Disease"]),
        owl_class("ph:Orphan", "Orphan Disease Group", ["ph:Unlabeled"]),
        owl_class("ph:Mystery", "Mystery"),
        disease(
            "ph:Ebola", "Ebola Virus Disease", ["ph:VHF", "owl:NamedIndividual"],
            symptoms=["ph:Fever", "ph:Rash"], pathogens=["ph:EbolaVirus"],
        ),
        disease(
            "ph:Marburg", "Marburg Virus Disease", ["ph:VHF"],
            symptoms=["ph:Fever", "ph:Bleeding"], pathogens=["ph:MarburgVirus"],
        ),
        disease(
            "ph:Anthrax", "Anthrax", ["ph:BacterialDisease"],
            symptoms=["ph:Rash"], pathogens=["ph:BacillusAnthracis"],
        ),
        disease(
            "ph:Dengue", "Dengue Fever", ["ph:ViralDisease"],
            symptoms=["ph:Fever"], vectors=["ph:AedesAegypti"],
        ),
        disease("ph:Cholera", "Cholera", ["ph:InfectiousDisease"]),
        individual("ph:EbolaVirus", "Ebola virus", ["ph:PathogenicVirusType"]),
        individual("ph:MarburgVirus", "Marburg virus", ["ph:PathogenicVirusType"]),
        individual("ph:AedesAegypti", "Aedes aegypti", ["ph:DiseaseVectorType"]),
        GraphNode(id="ph:Fever", label="Fever", alt_labels=["Pyrexia"]),
    ]


@pytest.fixture
def sample_build(sample_nodes):
    return build_ontology(sample_nodes)


@pytest.fixture
def registry(sample_build):
    return sample_build.registry


@pytest.fixture
def engine(sample_build):
    return sample_build.engine()
