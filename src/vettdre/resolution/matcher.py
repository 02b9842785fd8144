"""Pairwise owner-name matching.

``is_same_entity`` runs an ordered decision cascade over two raw owner
names. The first rule that fires returns; later rules are never
evaluated:

1. Empty input (raw or after normalization) -> no match, confidence 0
2. Identical normalized names -> exact, 100
3. One normalized name contains the other (length ratio > 0.5) -> containment
4. Either normalized name shorter than 15 chars and Jaro-Winkler >= 0.90
5. Levenshtein similarity >= 85
6. Both raw names embed a street address (shell LLC naming) and the
   addresses are >= 90 similar -> llc_address
7. Both raw names are person-like and share a last name: same first
   initial is a match (80), different first initial is not (60)
8. Otherwise no match, reporting the Levenshtein similarity

The thresholds are fixed module constants and are not
configurable.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .names import extract_address_from_llc, is_person_name, normalize_name
from .similarity import (
    jaro_winkler_similarity,
    levenshtein_similarity,
    round_half_up,
)

CONTAINMENT_MIN_RATIO = 0.5
SHORT_NAME_LENGTH = 15
JARO_WINKLER_THRESHOLD = 0.90
LEVENSHTEIN_THRESHOLD = 85
LLC_ADDRESS_THRESHOLD = 90
LAST_NAME_MIN_LENGTH = 2
LAST_NAME_FIRST_INITIAL_CONFIDENCE = 80
LAST_NAME_ONLY_CONFIDENCE = 60


class MatchMethod(str, Enum):
    """Which cascade step produced a verdict."""

    EMPTY = "empty"
    EMPTY_AFTER_NORMALIZE = "empty_after_normalize"
    EXACT = "exact"
    CONTAINMENT = "containment"
    JARO_WINKLER = "jaro_winkler"
    LEVENSHTEIN = "levenshtein"
    LLC_ADDRESS = "llc_address"
    LAST_NAME_FIRST_INITIAL = "last_name_first_initial"
    LAST_NAME_ONLY = "last_name_only"
    NO_MATCH = "no_match"


class MatchResult(BaseModel):
    """Verdict of one pairwise comparison."""

    match: bool
    confidence: int = Field(ge=0, le=100)
    method: MatchMethod

    model_config = ConfigDict(frozen=True)

    @property
    def is_high_confidence(self) -> bool:
        """Check if this is a high confidence verdict (>= 90)."""
        return self.confidence >= 90

    @property
    def is_low_confidence(self) -> bool:
        """Check if this is a low confidence verdict (< 70)."""
        return self.confidence < 70


def is_same_entity(name1: str | None, name2: str | None) -> MatchResult:
    """Decide whether two raw owner names denote the same entity.

    Args:
        name1: First raw name (as it appears in the source record)
        name2: Second raw name

    Returns:
        MatchResult with the verdict, a 0-100 confidence and the
        cascade step that decided it
    """
    if not name1 or not name2:
        return MatchResult(match=False, confidence=0, method=MatchMethod.EMPTY)

    n1 = normalize_name(name1)
    n2 = normalize_name(name2)

    if not n1 or not n2:
        return MatchResult(
            match=False, confidence=0, method=MatchMethod.EMPTY_AFTER_NORMALIZE
        )

    if n1 == n2:
        return MatchResult(match=True, confidence=100, method=MatchMethod.EXACT)

    if n1 in n2 or n2 in n1:
        ratio = min(len(n1), len(n2)) / max(len(n1), len(n2))
        if ratio > CONTAINMENT_MIN_RATIO:
            return MatchResult(
                match=True,
                confidence=round_half_up(85 + ratio * 15),
                method=MatchMethod.CONTAINMENT,
            )

    if len(n1) < SHORT_NAME_LENGTH or len(n2) < SHORT_NAME_LENGTH:
        jw = jaro_winkler_similarity(n1, n2)
        if jw >= JARO_WINKLER_THRESHOLD:
            return MatchResult(
                match=True,
                confidence=round_half_up(jw * 100),
                method=MatchMethod.JARO_WINKLER,
            )

    lev = levenshtein_similarity(n1, n2)
    if lev >= LEVENSHTEIN_THRESHOLD:
        return MatchResult(match=True, confidence=lev, method=MatchMethod.LEVENSHTEIN)

    addr1 = extract_address_from_llc(name1)
    addr2 = extract_address_from_llc(name2)
    if addr1 and addr2:
        # Compared case-insensitively, so "Main St" and "MAIN ST" agree.
        addr_sim = levenshtein_similarity(addr1.upper(), addr2.upper())
        if addr_sim >= LLC_ADDRESS_THRESHOLD:
            return MatchResult(
                match=True,
                confidence=round_half_up(addr_sim * 0.9),
                method=MatchMethod.LLC_ADDRESS,
            )

    if is_person_name(name1) and is_person_name(name2):
        last1 = n1.split(" ")[-1]
        last2 = n2.split(" ")[-1]
        if (
            len(last1) > LAST_NAME_MIN_LENGTH
            and len(last2) > LAST_NAME_MIN_LENGTH
            and last1 == last2
        ):
            if n1[:1] == n2[:1]:
                return MatchResult(
                    match=True,
                    confidence=LAST_NAME_FIRST_INITIAL_CONFIDENCE,
                    method=MatchMethod.LAST_NAME_FIRST_INITIAL,
                )
            return MatchResult(
                match=False,
                confidence=LAST_NAME_ONLY_CONFIDENCE,
                method=MatchMethod.LAST_NAME_ONLY,
            )

    return MatchResult(match=False, confidence=lev, method=MatchMethod.NO_MATCH)
