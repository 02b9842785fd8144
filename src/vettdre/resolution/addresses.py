"""Street address decomposition and comparison.

Addresses arrive from registration rolls, deed filings and assessment
rolls in free text ("123 Main St Apt 4B, Brooklyn, NY 11201"). They are
decomposed into parts in a fixed order. Each step removes its match
from the working string before the next one runs, so a later step never
re-reads tokens an earlier step already consumed.
"""

import re

from pydantic import BaseModel, ConfigDict

from .similarity import levenshtein_similarity

STREET_TYPES: dict[str, str] = {
    "ST": "STREET", "STREET": "STREET",
    "AVE": "AVENUE", "AVENUE": "AVENUE", "AV": "AVENUE",
    "BLVD": "BOULEVARD", "BOULEVARD": "BOULEVARD",
    "DR": "DRIVE", "DRIVE": "DRIVE",
    "PL": "PLACE", "PLACE": "PLACE",
    "RD": "ROAD", "ROAD": "ROAD",
    "WAY": "WAY",
    "CT": "COURT", "COURT": "COURT",
    "LN": "LANE", "LANE": "LANE",
    "TER": "TERRACE", "TERRACE": "TERRACE",
    "CIR": "CIRCLE", "CIRCLE": "CIRCLE",
    "PKWY": "PARKWAY", "PARKWAY": "PARKWAY",
    "HWY": "HIGHWAY", "HIGHWAY": "HIGHWAY",
    "SQ": "SQUARE", "SQUARE": "SQUARE",
}

DIRECTIONALS: dict[str, str] = {
    "N": "NORTH", "NORTH": "NORTH",
    "S": "SOUTH", "SOUTH": "SOUTH",
    "E": "EAST", "EAST": "EAST",
    "W": "WEST", "WEST": "WEST",
    "NE": "NORTHEAST", "NW": "NORTHWEST",
    "SE": "SOUTHEAST", "SW": "SOUTHWEST",
}

STATE_CODES: dict[str, str] = {
    "NY": "NY",
    "NEW YORK": "NY",
    "NJ": "NJ",
    "NEW JERSEY": "NJ",
}

BOROUGHS = ("MANHATTAN", "BRONX", "BROOKLYN", "QUEENS", "STATEN ISLAND")

# Street similarity at which a matching house number earns the bonus.
HOUSE_NUMBER_BONUS_THRESHOLD = 80
HOUSE_NUMBER_BONUS = 5

# Keywords need word boundaries ("FLATBUSH" is no unit); "#" may touch the
# street ("ST#5").
_UNIT_PATTERN = re.compile(
    r"(?:\b(?:APT|APARTMENT|UNIT|STE|SUITE|FL|FLOOR|RM|ROOM)\b|#)\s*\.?\s*([^\s,]+)",
    re.IGNORECASE | re.ASCII,
)
_ZIP_PATTERN = re.compile(r"\b(\d{5})(-\d{4})?\b", re.ASCII)
# NYC lots carry compound numbers such as 32-15 or 1/2.
_HOUSE_NUMBER_PATTERN = re.compile(r"^(\d+[-/]?\d*)\s+", re.ASCII)
_STATE_PATTERN = re.compile(r"\b(NY|NEW YORK|NJ|NEW JERSEY)\b", re.IGNORECASE)
_BOROUGH_PATTERN = re.compile(r"\b(" + "|".join(BOROUGHS) + r")\b", re.IGNORECASE)
_COMMA_PATTERN = re.compile(r",\s*")
_WHITESPACE_PATTERN = re.compile(r"\s+")


class NormalizedAddress(BaseModel):
    """An address decomposed into parts. Empty string means absent."""

    number: str = ""
    street: str = ""
    unit: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    borough: str = ""
    raw: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def one_line(self) -> str:
        """Canonical single-line rendering of the parsed parts."""
        first = " ".join(p for p in (self.number, self.street) if p)
        if self.unit:
            first = f"{first} APT {self.unit}".strip()
        tail = " ".join(p for p in (self.state, self.zip) if p)
        return ", ".join(p for p in (first, self.city, tail) if p)

    @property
    def is_empty(self) -> bool:
        return not (self.number or self.street)


def _cut(text: str, match: re.Match) -> str:
    return (text[: match.start()] + text[match.end():]).strip()


def normalize_address(raw: str | None) -> NormalizedAddress:
    """Decompose a raw address string.

    Extraction order: unit, zip, house number, state, borough (which
    doubles as the city), then street-type and directional
    canonicalization of the remaining tokens.

    Examples:
        >>> addr = normalize_address("123 N Main St Apt 4B, Brooklyn, NY 11201")
        >>> (addr.number, addr.street, addr.unit, addr.city, addr.state, addr.zip)
        ('123', 'NORTH MAIN STREET', '4B', 'BROOKLYN', 'NY', '11201')
    """
    if not raw:
        return NormalizedAddress()

    trimmed = raw.strip()
    working = trimmed.upper()

    unit = ""
    unit_match = _UNIT_PATTERN.search(working)
    if unit_match:
        unit = unit_match.group(1)
        working = _cut(working, unit_match)

    zip_code = ""
    zip_match = _ZIP_PATTERN.search(working)
    if zip_match:
        zip_code = zip_match.group(1)
        working = _cut(working, zip_match)

    number = ""
    number_match = _HOUSE_NUMBER_PATTERN.match(working)
    if number_match:
        number = number_match.group(1)
        working = working[number_match.end():]

    state = ""
    state_match = _STATE_PATTERN.search(working)
    if state_match:
        state = STATE_CODES[state_match.group(1).upper()]
        working = _cut(working, state_match)

    borough = ""
    borough_match = _BOROUGH_PATTERN.search(working)
    if borough_match:
        borough = borough_match.group(1).upper()
        working = _cut(working, borough_match)

    city = borough
    working = _COMMA_PATTERN.sub(" ", working)
    working = _WHITESPACE_PATTERN.sub(" ", working).strip()

    tokens = [
        STREET_TYPES.get(token) or DIRECTIONALS.get(token) or token
        for token in working.split()
    ]

    return NormalizedAddress(
        number=number,
        street=" ".join(tokens),
        unit=unit,
        city=city,
        state=state,
        zip=zip_code,
        borough=borough,
        raw=trimmed,
    )


def address_similarity(a: str | None, b: str | None) -> int:
    """Compare two raw addresses, returning a confidence of 0-100.

    Differing house numbers are conclusive: the result is 0 however
    alike the streets are. Otherwise the parsed streets are compared,
    with a bonus when the house numbers agree and the streets are close.
    Without a parsed street on both sides, the raw strings are compared.
    """
    a = a or ""
    b = b or ""
    na = normalize_address(a)
    nb = normalize_address(b)

    if na.number and nb.number and na.number != nb.number:
        return 0

    if na.street and nb.street:
        street_sim = levenshtein_similarity(na.street, nb.street)
        if na.number and nb.number:
            if street_sim >= HOUSE_NUMBER_BONUS_THRESHOLD:
                return min(100, street_sim + HOUSE_NUMBER_BONUS)
        return street_sim

    return levenshtein_similarity(a.upper(), b.upper())
