"""
Clock abstraction.
Working-day and target calculations read "today" from an injected clock
instead of the wall clock so results are reproducible.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import Optional


class Clock(ABC):
    """Source of the current date and time."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current timezone-aware datetime."""

    def today(self) -> date:
        """Return the current calendar date."""
        return self.now().date()


class SystemClock(Clock):
    """Clock backed by the system time (UTC)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Clock pinned to a given instant. Used in tests and for what-if queries."""

    def __init__(self, today: date, now: Optional[datetime] = None):
        self._today = today
        self._now = now or datetime(today.year, today.month, today.day, 12, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._now

    def today(self) -> date:
        return self._today
