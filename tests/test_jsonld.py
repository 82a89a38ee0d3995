"""Tests for JSON-LD ingestion and identifier helpers."""

import json
from pathlib import Path

import pytest

from ontofacet.build import build_ontology
from ontofacet.config import OntologyConfig
from ontofacet.identifiers import (
    label_from_identifier,
    namespace_of,
    shorten,
    virtual_all_id,
)
from ontofacet.jsonld import load_jsonld, parse_expanded, pick_literal
from ontofacet.models import EntityType, LiteralValue, Reference
from ontofacet.vocab import DEFAULT_NAMESPACES

PH = "http://ec.europa.eu/ecmo/public-health#"
RDFS = "http://www.w3.org/2000/01/rdf-schema#"
OWL = "http://www.w3.org/2002/07/owl#"


class TestIdentifiers:
    def test_shorten(self):
        assert shorten(PH + "Ebola", DEFAULT_NAMESPACES) == "ph:Ebola"
        assert shorten("http://example.org/x", DEFAULT_NAMESPACES) == "http://example.org/x"

    def test_namespace_of(self):
        assert namespace_of("bio:Genus") == "bio"
        assert namespace_of("http://example.org/onto#Thing") == "http://example.org/onto#"
        assert namespace_of("Bare") == ""

    def test_label_from_identifier(self):
        assert label_from_identifier("ph:ViralDiseaseOrSyndrome") == "Viral Disease Or Syndrome"
        assert label_from_identifier("ph:PHSMType") == "PHSM Type"
        assert label_from_identifier("ph:yellow_fever") == "yellow fever"
        assert label_from_identifier(PH + "MpoxVirus") == "Mpox Virus"

    def test_virtual_all_id(self):
        assert virtual_all_id(EntityType.PHSM_TYPE) == "virtual:AllPHSMTypes"


class TestPickLiteral:
    def test_prefers_language(self):
        values = [
            {"@value": "Fièvre", "@language": "fr"},
            {"@value": "Fever", "@language": "en"},
        ]
        assert pick_literal(values) == "Fever"
        assert pick_literal(values, "fr") == "Fièvre"

    def test_falls_back_to_first(self):
        assert pick_literal([{"@value": "Fieber", "@language": "de"}]) == "Fieber"

    def test_empty(self):
        assert pick_literal([]) is None
        assert pick_literal([{"@id": "ph:X"}]) is None


class TestParseExpanded:
    def test_class_node(self):
        nodes = parse_expanded([{
            "@id": PH + "VHF",
            "@type": [OWL + "Class"],
            RDFS + "label": [{"@value": "VHF", "@language": "en"}],
            RDFS + "comment": [{"@value": "Haemorrhagic fevers"}],
            RDFS + "subClassOf": [{"@id": PH + "ViralDisease"}, {"@id": OWL + "Thing"}],
        }])
        assert len(nodes) == 1
        node = nodes[0]
        assert node.id == "ph:VHF"
        assert node.types == ["owl:Class"]
        assert node.label == "VHF"
        assert node.description == "Haemorrhagic fevers"
        assert node.parents == ["ph:ViralDisease", "owl:Thing"]
        assert node.properties == {}

    def test_properties_and_alt_labels(self):
        nodes = parse_expanded([{
            "@id": PH + "Ebola",
            "@type": [PH + "VHF"],
            RDFS + "label": [{"@value": "Ebola"}],
            PH + "alternativeLabel": [{"@value": "EVD"}, {"@value": "Ebola haemorrhagic fever"}],
            PH + "hasSignOrSymptom": [{"@list": [{"@id": PH + "Fever"}, {"@id": PH + "Rash"}]}],
            PH + "hasIncubationPeriod": [{"@value": 21}],
        }])
        node = nodes[0]
        assert node.alt_labels == ["EVD", "Ebola haemorrhagic fever"]
        assert node.references("ph:hasSignOrSymptom") == ["ph:Fever", "ph:Rash"]
        assert node.properties["ph:hasIncubationPeriod"] == [LiteralValue(value=21)]
        assert node.literal("ph:hasIncubationPeriod") == 21

    def test_graph_container_and_blank_nodes(self):
        data = {
            "@graph": [
                {"@id": PH + "Fever", RDFS + "label": [{"@value": "Fever"}]},
                {"@id": "_:b0", RDFS + "label": [{"@value": "blank"}]},
                {RDFS + "label": [{"@value": "no id"}]},
            ]
        }
        nodes = parse_expanded(data)
        assert [n.id for n in nodes] == ["ph:Fever"]

    def test_custom_namespace(self):
        config = OntologyConfig(namespaces={**DEFAULT_NAMESPACES, "ex": "http://example.org/#"})
        nodes = parse_expanded(
            [{"@id": "http://example.org/#Thing", "http://example.org/#rel": [{"@id": PH + "X"}]}],
            config,
        )
        assert nodes[0].id == "ex:Thing"
        assert nodes[0].properties["ex:rel"] == [Reference(id="ph:X")]

    def test_invalid_document(self):
        with pytest.raises(ValueError):
            parse_expanded("not json-ld")


class TestLoadJsonld:
    def test_nonexistent_file(self):
        with pytest.raises(FileNotFoundError):
            load_jsonld(Path("/nonexistent/ontology.jsonld"))

    def test_load(self, tmp_path):
        path = tmp_path / "onto.jsonld"
        path.write_text(json.dumps([{"@id": PH + "Fever", RDFS + "label": [{"@value": "Fever"}]}]))
        nodes = load_jsonld(path)
        assert nodes[0].label == "Fever"

    def test_load_compact(self, tmp_path):
        path = tmp_path / "onto.jsonld"
        path.write_text(json.dumps({
            "@context": {"ph": PH, "rdfs": RDFS, "owl": OWL},
            "@graph": [
                {"@id": "ph:Disease", "@type": "owl:Class", "rdfs:label": "Disease"},
                {
                    "@id": "ph:Ebola",
                    "@type": "ph:Disease",
                    "rdfs:label": "Ebola",
                    "ph:hasSignOrSymptom": {"@id": "ph:Fever"},
                },
            ],
        }))
        nodes = load_jsonld(path)
        by_id = {n.id: n for n in nodes}
        assert set(by_id) == {"ph:Disease", "ph:Ebola"}
        assert by_id["ph:Disease"].types == ["owl:Class"]
        assert by_id["ph:Ebola"].label == "Ebola"
        assert by_id["ph:Ebola"].types == ["ph:Disease"]
        assert by_id["ph:Ebola"].references("ph:hasSignOrSymptom") == ["ph:Fever"]

        build = build_ontology(nodes)
        assert [e.id for e in build.registry.individuals(EntityType.DISEASE)] == ["ph:Ebola"]

    def test_invalid_context(self, tmp_path):
        path = tmp_path / "onto.jsonld"
        path.write_text(json.dumps({"@context": 42, "@id": "ph:X"}))
        with pytest.raises(ValueError):
            load_jsonld(path)
