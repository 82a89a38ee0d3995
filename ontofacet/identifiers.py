"""Identifier utilities: prefix handling, namespaces and generated labels."""

import re

from ontofacet.models import VIRTUAL_PREFIX, EntityType
from ontofacet.vocab import TYPE_LABELS

_SEPARATORS = re.compile(r"[_\-\s.]+")
# Boundary before an uppercase letter that follows a lowercase letter/digit,
# or before the last capital of an acronym ("PHSMType" -> "PHSM Type")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def is_full_iri(identifier: str) -> bool:
    return "://" in identifier or identifier.startswith("urn:")


def shorten(iri: str, namespaces: dict[str, str]) -> str:
    """Convert a full IRI to prefixed form (http://...#Ebola -> ph:Ebola).

    IRIs outside every configured namespace are returned unchanged.
    """
    for prefix, base in namespaces.items():
        if iri.startswith(base):
            return f"{prefix}:{iri[len(base):]}"
    return iri


def namespace_of(identifier: str) -> str:
    """Namespace used to group diagnostics.

    Prefixed identifiers group by prefix; full IRIs by their base up to the
    last '#' or '/'.
    """
    if is_full_iri(identifier):
        cut = max(identifier.rfind("#"), identifier.rfind("/"))
        return identifier[: cut + 1]
    prefix, sep, _ = identifier.partition(":")
    return prefix if sep else ""


def local_name(identifier: str) -> str:
    if is_full_iri(identifier):
        return re.split(r"[#/]", identifier)[-1]
    _, sep, local = identifier.partition(":")
    return local if sep else identifier


def label_from_identifier(identifier: str) -> str:
    """Generate a readable label from an identifier.

    Splits the local name on separators and de-camel-cases each part:
    ``ph:ViralDiseaseOrSyndrome`` -> ``Viral Disease Or Syndrome``,
    ``ph:SARS_CoV_2`` -> ``SARS Co V 2``.
    """
    parts = [p for p in _SEPARATORS.split(local_name(identifier)) if p]
    words = []
    for part in parts:
        words.extend(_CAMEL_BOUNDARY.sub(" ", part).split())
    return " ".join(words) or identifier


def virtual_all_id(entity_type: EntityType) -> str:
    return VIRTUAL_PREFIX + TYPE_LABELS[entity_type].virtual_key


def virtual_all_label(entity_type: EntityType) -> str:
    return f"All {TYPE_LABELS[entity_type].plural}"


def is_virtual(identifier: str) -> bool:
    return identifier.startswith(VIRTUAL_PREFIX)
