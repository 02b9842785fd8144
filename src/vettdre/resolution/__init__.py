"""Ownership entity resolution.

Provides name/address normalization, pairwise owner matching and the
aggregate resolvers built on it (owner resolution, portfolio grouping,
scalar field reconciliation). Everything here is pure and synchronous.
"""

from .addresses import NormalizedAddress, address_similarity, normalize_address
from .matcher import MatchMethod, MatchResult, is_same_entity
from .names import (
    extract_address_from_llc,
    is_entity_name,
    is_person_name,
    normalize_name,
)
from .owner import (
    DeedParty,
    NameCluster,
    OwnershipSources,
    RawNameEntry,
    RegistrationRecord,
    ResolvedEntity,
    cluster_names,
    flatten_sources,
    resolve_owner,
    resolve_owner_from_entries,
)
from .portfolio import OwnerCandidate, group_by_owner
from .similarity import (
    jaro_similarity,
    jaro_winkler_similarity,
    levenshtein,
    levenshtein_similarity,
)
from .values import AlternateValue, ConfidentValue, ValueEntry, resolve_value

__all__ = [
    "AlternateValue",
    "ConfidentValue",
    "DeedParty",
    "MatchMethod",
    "MatchResult",
    "NameCluster",
    "NormalizedAddress",
    "OwnerCandidate",
    "OwnershipSources",
    "RawNameEntry",
    "RegistrationRecord",
    "ResolvedEntity",
    "ValueEntry",
    "address_similarity",
    "cluster_names",
    "extract_address_from_llc",
    "flatten_sources",
    "group_by_owner",
    "is_entity_name",
    "is_person_name",
    "is_same_entity",
    "jaro_similarity",
    "jaro_winkler_similarity",
    "levenshtein",
    "levenshtein_similarity",
    "normalize_address",
    "normalize_name",
    "resolve_owner",
    "resolve_owner_from_entries",
    "resolve_value",
]
