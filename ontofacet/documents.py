"""Corpus loading: tagged reports stored as JSON.

Format: a list of objects (or ``{"documents": [...]}``), each with an
``id`` and a list of entity identifiers under ``tags`` or ``entities``.
Every other key is kept as metadata:

    [
      {"id": 1, "title": "Dengue outbreak", "source": "WHO",
       "entities": ["ph:DengueFever", "ph:Fever"]}
    ]
"""

import json
from pathlib import Path

from ontofacet.models import Document

TAG_KEYS = ("tags", "entities")


def document_from_dict(data: dict) -> Document:
    """Build a Document from one JSON object.

    Raises:
        ValueError: If the object has no id or its tags are not a list
    """
    if "id" not in data:
        raise ValueError(f"Document without id: {data}")

    tags = []
    for key in TAG_KEYS:
        if key in data:
            tags = data[key]
            break
    if not isinstance(tags, list):
        raise ValueError(f"Tags of document {data['id']} must be a list")

    metadata = {k: v for k, v in data.items() if k != "id" and k not in TAG_KEYS}
    return Document(id=str(data["id"]), metadata=metadata, tags=frozenset(tags))


def load_documents(path: Path) -> list[Document]:
    """Load a corpus file, keeping document order."""
    if not path.exists():
        raise FileNotFoundError(f"Corpus file not found: {path}")

    data = json.loads(path.read_text())
    if isinstance(data, dict):
        data = data.get("documents", [])
    if not isinstance(data, list):
        raise ValueError(f"Corpus must be a list of documents: {path}")

    return [document_from_dict(item) for item in data]
