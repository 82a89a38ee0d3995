"""Tests for the entity registry."""

from ontofacet.models import Entity, EntityType
from ontofacet.registry import Registry


def ids(entities):
    return [e.id for e in entities]


class TestLookup:
    def test_get(self, registry):
        assert registry.get("ph:Ebola").label == "Ebola Virus Disease"
        assert registry.get("ph:Ebola", EntityType.PATHOGEN) is None
        assert registry.get("ph:Unknown") is None

    def test_get_first_partition_wins(self):
        flood = [
            Entity(id="core:Flood", label="Flood (hazard)", type=EntityType.HAZARD),
        ]
        flood_disease = [
            Entity(id="core:Flood", label="Flood (disease)", type=EntityType.DISEASE),
        ]
        registry = Registry({EntityType.HAZARD: flood, EntityType.DISEASE: flood_disease})
        assert registry.get("core:Flood").type == EntityType.DISEASE
        assert registry.get("core:Flood", EntityType.HAZARD).label == "Flood (hazard)"
        assert registry.partition_of("core:Flood") == [EntityType.DISEASE, EntityType.HAZARD]

    def test_get_by_label(self, registry):
        assert registry.get_by_label("marburg virus disease").id == "ph:Marburg"
        assert registry.get_by_label("Pyrexia").id == "ph:Fever"
        assert registry.get_by_label("Nope") is None

    def test_contains_and_len(self, registry):
        assert "ph:Ebola" in registry
        assert "ph:Mystery" not in registry
        assert len(registry) == len(list(registry))

    def test_top_level(self, registry):
        assert ids(registry.top_level(EntityType.DISEASE)) == [
            "ph:Disease", "ph:Cholera", "ph:Unlabeled",
        ]

    def test_children(self, registry):
        assert ids(registry.children("ph:VHF", EntityType.DISEASE)) == ["ph:Ebola", "ph:Marburg"]
        assert registry.children("ph:VHF", EntityType.PATHOGEN) == []

    def test_unresolved_classes(self, registry):
        assert registry.unresolved_classes == ["ph:Mystery"]
        assert "ph:VHF" in registry.classes


class TestDescendantClosure:
    def test_category(self, registry):
        assert ids(registry.descendant_closure("ph:Disease")) == [
            "ph:Dengue", "ph:Ebola", "ph:Marburg", "ph:Anthrax",
        ]

    def test_nested_category(self, registry):
        assert ids(registry.descendant_closure("ph:VHF")) == ["ph:Ebola", "ph:Marburg"]

    def test_never_returns_categories(self, registry):
        for entity in registry:
            if entity.is_category:
                closure = registry.descendant_closure(entity)
                assert not any(e.is_category for e in closure)

    def test_virtual_all_is_every_individual(self, registry):
        virtual = registry.virtual_all(EntityType.DISEASE)
        assert ids(registry.descendant_closure(virtual)) == [
            "ph:Dengue", "ph:Ebola", "ph:Marburg", "ph:Anthrax", "ph:Cholera",
        ]

    def test_individual_is_its_own_closure(self, registry):
        assert ids(registry.descendant_closure("ph:Ebola")) == ["ph:Ebola"]

    def test_idempotent(self, registry):
        for entity in registry.partition(EntityType.DISEASE):
            closure = registry.descendant_closure(entity)
            again = []
            for member in closure:
                for e in registry.descendant_closure(member):
                    if e not in again:
                        again.append(e)
            assert again == closure

    def test_unknown_identifier(self, registry):
        assert registry.descendant_closure("ph:Unknown") == []

    def test_cyclic_parents_terminate(self):
        entities = [
            Entity(id="ph:A", label="A", type=EntityType.DISEASE, is_category=True, parent="ph:B"),
            Entity(id="ph:B", label="B", type=EntityType.DISEASE, is_category=True, parent="ph:A"),
            Entity(id="ph:Flu", label="Influenza", type=EntityType.DISEASE, parent="ph:B"),
        ]
        registry = Registry({EntityType.DISEASE: entities})
        assert ids(registry.descendant_closure("ph:A")) == ["ph:Flu"]


class TestSearch:
    def test_substring(self, registry):
        assert ids(registry.search("virus")) == [
            "ph:Ebola", "ph:Marburg", "ph:PathogenicVirusType", "ph:EbolaVirus", "ph:MarburgVirus",
        ]

    def test_alt_label(self, registry):
        assert ids(registry.search("pyrex")) == ["ph:Fever"]

    def test_case_insensitive_and_limit(self, registry):
        assert ids(registry.search("EBOLA", limit=1)) == ["ph:Ebola"]

    def test_partition_name_returns_top_level(self, registry):
        assert ids(registry.search("pathogens")) == ["core:PathogenType"]
        assert ids(registry.search("Symp")) == ["ph:Fever", "ph:Rash", "ph:Bleeding"]

    def test_short_text_not_partition(self, registry):
        assert ids(registry.search("dis")) == ["ph:Disease", "ph:Cholera", "ph:Unlabeled"]
        assert "ph:ViralDisease" in ids(registry.search("di"))

    def test_empty(self, registry):
        assert registry.search("  ") == []
