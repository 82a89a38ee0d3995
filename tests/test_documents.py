"""Tests for corpus loading and ontology config."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from ontofacet.config import OntologyConfig, load_config
from ontofacet.documents import document_from_dict, load_documents
from ontofacet.models import EntityType


class TestDocumentFromDict:
    def test_tags_and_metadata(self):
        document = document_from_dict({
            "id": 7,
            "title": "Dengue outbreak",
            "source": "WHO",
            "entities": ["ph:Dengue", "ph:Fever"],
        })
        assert document.id == "7"
        assert document.tags == frozenset({"ph:Dengue", "ph:Fever"})
        assert document.metadata == {"title": "Dengue outbreak", "source": "WHO"}

    def test_tags_key(self):
        assert document_from_dict({"id": "a", "tags": ["ph:Ebola"]}).tags == {"ph:Ebola"}

    def test_untagged(self):
        assert document_from_dict({"id": "a"}).tags == frozenset()

    def test_missing_id(self):
        with pytest.raises(ValueError, match="without id"):
            document_from_dict({"tags": []})

    def test_tags_not_list(self):
        with pytest.raises(ValueError, match="must be a list"):
            document_from_dict({"id": "a", "tags": "ph:Ebola"})


class TestLoadDocuments:
    def test_list(self, tmp_path):
        path = tmp_path / "corpus.json"
        path.write_text(json.dumps([{"id": 1, "tags": []}, {"id": 2, "tags": ["ph:Ebola"]}]))
        assert [d.id for d in load_documents(path)] == ["1", "2"]

    def test_wrapped(self, tmp_path):
        path = tmp_path / "corpus.json"
        path.write_text(json.dumps({"documents": [{"id": 1}]}))
        assert len(load_documents(path)) == 1

    def test_invalid_shape(self, tmp_path):
        path = tmp_path / "corpus.json"
        path.write_text(json.dumps("nope"))
        with pytest.raises(ValueError):
            load_documents(path)

    def test_nonexistent_file(self):
        with pytest.raises(FileNotFoundError):
            load_documents(Path("/nonexistent/corpus.json"))


class TestLoadConfig:
    def test_defaults(self):
        config = OntologyConfig()
        assert config.namespaces["ph"] == "http://ec.europa.eu/ecmo/public-health#"
        assert "owl:Thing" in config.generic_parents
        assert config.type_table()["ph:Disease"] == EntityType.DISEASE

    def test_yaml_overrides(self, tmp_path):
        path = tmp_path / "ontofacet.yaml"
        path.write_text(
            "namespaces:\n"
            "  ex: http://example.org/#\n"
            "class_types:\n"
            "  ph:ZoonoticDisease: Disease\n"
            "language: fr\n"
        )
        config = load_config(path)
        assert config.namespaces["ex"] == "http://example.org/#"
        assert config.namespaces["ph"] == "http://ec.europa.eu/ecmo/public-health#"
        assert config.type_table()["ph:ZoonoticDisease"] == EntityType.DISEASE
        assert config.language == "fr"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "ontofacet.yaml"
        path.write_text("")
        assert load_config(path) == OntologyConfig()

    def test_invalid_type(self, tmp_path):
        path = tmp_path / "ontofacet.yaml"
        path.write_text("class_types:\n  ph:X: NotAType\n")
        with pytest.raises(ValidationError):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "ontofacet.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_config(path)

    def test_nonexistent_file(self):
        with pytest.raises(FileNotFoundError):
            load_config(Path("/nonexistent/ontofacet.yaml"))
