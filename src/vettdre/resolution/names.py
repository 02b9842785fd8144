"""Owner-name normalization and classification.

Public-record owner strings mix individuals ("SMITH, JOHN") with shell
companies ("123 NASSAU ST HOLDINGS LLC"). Normalization strips the legal
noise so the matcher compares the distinguishing part of a name;
classification decides whether a raw string reads as a company or a
person.

All patterns are compiled once at import. ``re.ASCII`` keeps word
boundaries on ASCII letters and digits only, which is how the public
record feeds are encoded.
"""

import re

# Legal-entity words removed anywhere in a name, with an optional period.
ENTITY_SUFFIXES = (
    "LLC", r"L\.L\.C", "INC", "INCORPORATED", "CORP", "CORPORATION",
    "LTD", "LIMITED", r"L\.P\.", "LP", "TRUST", "COMPANY", "CO",
    "ASSOC", "ASSOCIATES", "HOLDINGS", "PROPERTIES", "REALTY", "GROUP",
    "ENTERPRISES", "MGMT", "MANAGEMENT", "PARTNERS", "PARTNERSHIP",
    "ESTATE", "FUND", "CAPITAL", "DEVELOPMENT", "DEV", "INVESTMENTS",
    "VENTURES",
)

# Markers that make a raw string read as a company rather than a person.
ENTITY_MARKERS = (
    "LLC", r"L\.L\.C", "INC", "CORP", "CORPORATION", "LTD", r"L\.P\.",
    "LP", "TRUST", "REALTY", "HOLDINGS", "PROPERTIES", "MGMT",
    "MANAGEMENT", "ASSOCIATES", "PARTNERS", "FUND", "CAPITAL",
    "DEVELOPMENT", "ENTERPRISES", "VENTURES",
)

LLC_STREET_TYPES = (
    "ST", "STREET", "AVE", "AVENUE", "BLVD", "BOULEVARD", "DR", "DRIVE",
    "PL", "PLACE", "RD", "ROAD", "WAY", "CT", "COURT", "LN", "LANE",
    "TER", "TERRACE",
)

_SUFFIX_PATTERN = re.compile(
    r"\b(" + "|".join(ENTITY_SUFFIXES) + r")\b\.?",
    re.IGNORECASE | re.ASCII,
)
_ENTITY_MARKER_PATTERN = re.compile(
    r"\b(" + "|".join(ENTITY_MARKERS) + r")\b",
    re.IGNORECASE | re.ASCII,
)
_PREFIX_PATTERN = re.compile(r"^(THE|A|AN)\s+", re.IGNORECASE)
_SEPARATOR_PATTERN = re.compile(r"[,.\-_/\\]+")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_POSSESSIVE_PATTERN = re.compile(r"'S\b", re.ASCII)
_LLC_ADDRESS_PATTERN = re.compile(
    r"^(\d+\s+[A-Z]+(?:\s+(?:" + "|".join(LLC_STREET_TYPES) + r"))?)",
    re.IGNORECASE | re.ASCII,
)


def _normalize_once(name: str) -> str:
    n = name.upper().strip()
    n = _SUFFIX_PATTERN.sub("", n).strip()
    n = _PREFIX_PATTERN.sub("", n).strip()
    n = _SEPARATOR_PATTERN.sub(" ", n)
    n = _WHITESPACE_PATTERN.sub(" ", n).strip()
    n = _POSSESSIVE_PATTERN.sub("", n)
    return n


def normalize_name(raw: str | None) -> str:
    """Normalize an owner name for comparison.

    Uppercases, removes legal-entity words (LLC, INC, TRUST, HOLDINGS...),
    a leading THE/A/AN, separators and possessives, and collapses
    whitespace. Numbers are kept: "123 MAIN ST LLC" is identified by its
    address.

    A single pass can expose new removable text ("THE THE SMITH",
    "SMITH_LLC"), so the pass is repeated until the result is stable,
    which makes the function idempotent.

    Examples:
        >>> normalize_name("The Smith Family's Holdings, LLC")
        'SMITH FAMILY'
    """
    if not raw:
        return ""

    current = _normalize_once(raw)
    while True:
        again = _normalize_once(current)
        if again == current:
            return current
        current = again


def is_entity_name(name: str | None) -> bool:
    """Check if a raw name looks like an LLC/corporation/trust."""
    if not name:
        return False
    return bool(_ENTITY_MARKER_PATTERN.search(name))


def is_person_name(name: str | None) -> bool:
    """Check if a raw name looks like an individual.

    Individual names have at least three characters, carry no entity
    marker and contain a space (first + last name).
    """
    if not name or len(name) < 3:
        return False
    if is_entity_name(name):
        return False
    return " " in name.strip()


def extract_address_from_llc(name: str | None) -> str | None:
    """Extract the street address a shell LLC is named after.

    Single-asset LLCs are commonly named for the building they hold.

    Examples:
        >>> extract_address_from_llc("123 NASSAU ST HOLDINGS LLC")
        '123 NASSAU ST'
        >>> extract_address_from_llc("SMITH HOLDINGS LLC") is None
        True
    """
    if not name:
        return None
    match = _LLC_ADDRESS_PATTERN.match(name)
    return match.group(1).strip() if match else None
