"""Ontology configuration: namespaces, generic parents and type table."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from ontofacet.models import EntityType
from ontofacet.vocab import BASE_TYPES, CLASS_TYPE_TABLE, DEFAULT_NAMESPACES, GENERIC_PARENTS


class OntologyConfig(BaseModel):
    """Configuration for ingesting and classifying an ontology."""

    namespaces: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_NAMESPACES))
    generic_parents: list[str] = Field(default_factory=lambda: list(GENERIC_PARENTS))
    class_types: dict[str, EntityType] = {}  # added to / overriding CLASS_TYPE_TABLE
    base_types: list[str] = Field(default_factory=lambda: list(BASE_TYPES))
    language: str = "en"  # preferred label language

    def type_table(self) -> dict[str, EntityType]:
        return {**CLASS_TYPE_TABLE, **self.class_types}


def load_config(path: Path) -> OntologyConfig:
    """Load and validate an ontology config from YAML.

    Example config:

        namespaces:
          ph: "http://ec.europa.eu/ecmo/public-health#"
        class_types:
          ph:ZoonoticDisease: Disease
        language: en

    Omitted keys keep their defaults; ``namespaces`` entries are merged into
    the default namespaces.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the config is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping: {path}")

    if "namespaces" in data:
        data["namespaces"] = {**DEFAULT_NAMESPACES, **(data["namespaces"] or {})}

    return OntologyConfig(**data)
