"""
VettdRE - Property Ownership Entity Resolution

Reconciles who owns a property across registration rolls, deed filings,
assessment and tax rolls: individuals versus the shell LLCs that hold
title for them.
"""

__version__ = "0.1.0"

from .geocoding import GeocodingBudget, normalize_address_with_geocodio
from .resolution import (
    address_similarity,
    extract_address_from_llc,
    group_by_owner,
    is_entity_name,
    is_person_name,
    is_same_entity,
    jaro_winkler_similarity,
    levenshtein_similarity,
    normalize_address,
    normalize_name,
    resolve_owner,
    resolve_value,
)

__all__ = [
    "GeocodingBudget",
    "address_similarity",
    "extract_address_from_llc",
    "group_by_owner",
    "is_entity_name",
    "is_person_name",
    "is_same_entity",
    "jaro_winkler_similarity",
    "levenshtein_similarity",
    "normalize_address",
    "normalize_address_with_geocodio",
    "normalize_name",
    "resolve_owner",
    "resolve_value",
]
