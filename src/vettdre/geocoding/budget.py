"""Daily lookup budget for the paid geocoding escalation.

The budget is an explicit collaborator: callers that want a shared quota
create one ``GeocodingBudget`` per process and pass it to every call.
The counter resets when the UTC calendar day changes.
"""

from collections.abc import Callable
from datetime import date, datetime, timezone

from pydantic import BaseModel

from ..config import get_settings


class BudgetStatus(BaseModel):
    """Snapshot of today's lookup usage."""

    used: int
    limit: int
    remaining: int


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class GeocodingBudget:
    """Per-UTC-day lookup counter.

    Args:
        daily_limit: Lookups allowed per day (default from settings)
        clock: Returns the current time; injectable for tests
    """

    def __init__(
        self,
        daily_limit: int | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        if daily_limit is None:
            daily_limit = get_settings().geocodio_daily_limit
        if daily_limit < 0:
            raise ValueError("daily_limit must be >= 0")
        self.daily_limit = daily_limit
        self._clock = clock
        self._day: date | None = None
        self._used = 0

    def _roll(self) -> None:
        today = self._clock().astimezone(timezone.utc).date()
        if today != self._day:
            self._day = today
            self._used = 0

    @property
    def used(self) -> int:
        self._roll()
        return self._used

    @property
    def limit(self) -> int:
        return self.daily_limit

    @property
    def remaining(self) -> int:
        self._roll()
        return self.daily_limit - self._used

    def check(self, count: int = 1) -> bool:
        """Whether ``count`` more lookups fit in today's budget."""
        self._roll()
        return self._used + count <= self.daily_limit

    def consume(self, count: int = 1) -> None:
        """Record ``count`` lookups against today's budget."""
        self._roll()
        self._used += count

    def status(self) -> BudgetStatus:
        self._roll()
        return BudgetStatus(
            used=self._used,
            limit=self.daily_limit,
            remaining=self.daily_limit - self._used,
        )
