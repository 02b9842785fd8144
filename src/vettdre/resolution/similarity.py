"""String similarity primitives used by the matching cascade.

Levenshtein distance comes from RapidFuzz (unit-cost insert/delete/
substitute, identical to the textbook dynamic program). Jaro and
Jaro-Winkler are implemented here with the classic matching window
(``max(len) // 2 - 1``), which RapidFuzz computes differently, and with
the prefix bonus applied at every Jaro score.
"""

import math

from rapidfuzz.distance import Levenshtein

# Winkler prefix scaling factor and maximum prefix length.
WINKLER_SCALING = 0.1
WINKLER_MAX_PREFIX = 4


def levenshtein(a: str, b: str) -> int:
    """Edit distance between two strings."""
    return Levenshtein.distance(a, b)


def levenshtein_similarity(a: str, b: str) -> int:
    """Levenshtein similarity as an integer percentage (0-100).

    Two empty strings are fully similar.
    """
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 100
    return round_half_up((1 - levenshtein(a, b) / max_len) * 100)


def jaro_similarity(s1: str, s2: str) -> float:
    """Jaro similarity in [0, 1].

    Characters match when equal and no further apart than
    ``floor(max(len) / 2) - 1`` positions; transpositions are counted
    over the matched characters in order.
    """
    if s1 == s2:
        return 1.0

    len1, len2 = len(s1), len(s2)
    if len1 == 0 or len2 == 0:
        return 0.0

    match_window = max(0, max(len1, len2) // 2 - 1)

    s1_matches = [False] * len1
    s2_matches = [False] * len2
    matches = 0

    for i in range(len1):
        start = max(0, i - match_window)
        end = min(i + match_window + 1, len2)
        for j in range(start, end):
            if s2_matches[j] or s1[i] != s2[j]:
                continue
            s1_matches[i] = True
            s2_matches[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    transpositions = 0
    k = 0
    for i in range(len1):
        if not s1_matches[i]:
            continue
        while not s2_matches[k]:
            k += 1
        if s1[i] != s2[k]:
            transpositions += 1
        k += 1

    return (
        matches / len1
        + matches / len2
        + (matches - transpositions / 2) / matches
    ) / 3


def jaro_winkler_similarity(s1: str, s2: str) -> float:
    """Jaro-Winkler similarity in [0, 1].

    ``jaro + prefix_len * 0.1 * (1 - jaro)`` where ``prefix_len`` is the
    length of the common prefix, capped at four characters.
    """
    jaro = jaro_similarity(s1, s2)

    prefix_len = 0
    for c1, c2 in zip(s1[:WINKLER_MAX_PREFIX], s2[:WINKLER_MAX_PREFIX]):
        if c1 != c2:
            break
        prefix_len += 1

    return jaro + prefix_len * WINKLER_SCALING * (1 - jaro)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up.

    Python's ``round`` uses banker's rounding; confidence scores are
    defined with halves rounded toward positive infinity.
    """
    return int(math.floor(value + 0.5))
