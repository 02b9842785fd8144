"""Priority and agreement based reconciliation of scalar fields.

Unit counts, square footage, year built and similar facts arrive from
several providers that do not always agree. The most authoritative
source (lowest priority number) wins; confidence rises with every source
that agrees with it and falls with every source that does not.
Dissenting values are kept alongside the result.
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

BASE_CONFIDENCE = 60
AGREEMENT_BONUS = 15
DISAGREEMENT_PENALTY = 5
MIN_CONFIDENCE = 30
MAX_CONFIDENCE = 100


class ValueEntry(BaseModel, Generic[T]):
    """One provider's value for a field."""

    value: T
    source: str
    priority: int


class AlternateValue(BaseModel, Generic[T]):
    """A dissenting value and where it came from."""

    value: T
    source: str


class ConfidentValue(BaseModel, Generic[T]):
    """A reconciled field value with its provenance and dissent."""

    value: T
    source: str
    confidence: int = Field(ge=MIN_CONFIDENCE, le=MAX_CONFIDENCE)
    alternate_values: list[AlternateValue[T]] = Field(default_factory=list)


def _coerce_entry(entry: Any) -> ValueEntry:
    if isinstance(entry, ValueEntry):
        return entry
    if isinstance(entry, Mapping):
        return ValueEntry(**entry)
    if isinstance(entry, tuple) and len(entry) == 3:
        value, source, priority = entry
        return ValueEntry(value=value, source=source, priority=priority)
    raise TypeError(
        f"Expected ValueEntry, mapping or (value, source, priority) tuple, "
        f"got {type(entry).__name__}"
    )


def _strict_equal(a: Any, b: Any) -> bool:
    # True == 1 in Python; a flag never agrees with a count
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    return a == b


def resolve_value(
    entries: Iterable[ValueEntry[T] | Mapping[str, Any] | tuple[T, str, int]],
    is_equal: Callable[[T, T], bool] | None = None,
) -> ConfidentValue[T] | None:
    """Resolve one field from several providers.

    Args:
        entries: (value, source, priority) records; lower priority wins
        is_equal: Equality used to decide agreement (default: ``==``,
            except that booleans never agree with numbers)

    Returns:
        The primary value with confidence
        ``clamp(30, 100, 60 + 15 * (agreeing - 1) - 5 * disagreeing)``,
        or None when no entries were supplied

    Examples:
        >>> resolve_value([(10, "a", 1), (10, "b", 2), (20, "c", 3)]).confidence
        70
    """
    items = [_coerce_entry(entry) for entry in entries]
    if not items:
        return None

    eq = is_equal or _strict_equal

    # sorted() is stable: equal priorities keep caller order
    ordered = sorted(items, key=lambda e: e.priority)
    primary = ordered[0]

    agreeing = [e for e in ordered if eq(e.value, primary.value)]
    disagreeing = [e for e in ordered if not eq(e.value, primary.value)]

    confidence = (
        BASE_CONFIDENCE
        + (len(agreeing) - 1) * AGREEMENT_BONUS
        - len(disagreeing) * DISAGREEMENT_PENALTY
    )
    confidence = min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, confidence))

    return ConfidentValue(
        value=primary.value,
        source=primary.source,
        confidence=confidence,
        alternate_values=[
            AlternateValue(value=e.value, source=e.source) for e in disagreeing
        ],
    )
