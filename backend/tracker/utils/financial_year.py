"""
Financial year helpers.

A financial year (FY) runs from 1 April to 31 March and is labelled by its
start and end calendar years, e.g. "2025/26".
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Tuple


# Calendar months in financial-year order (April first)
FY_MONTH_ORDER: Tuple[int, ...] = (4, 5, 6, 7, 8, 9, 10, 11, 12, 1, 2, 3)


def fy_month_index(month: int) -> int:
    """Position of a calendar month within the financial year (April = 0, March = 11)."""
    if month < 1 or month > 12:
        raise ValueError(f"Month must be 1-12, got {month}")
    return FY_MONTH_ORDER.index(month)


@dataclass(frozen=True)
class FinancialYear:
    """A financial year identified by the calendar year it starts in."""
    start: int

    @property
    def end(self) -> int:
        return self.start + 1

    @property
    def label(self) -> str:
        return f"{self.start}/{str(self.end)[-2:]}"

    @classmethod
    def from_month(cls, month: int, year: int) -> "FinancialYear":
        """FY containing the given calendar month."""
        return cls(start=year if month >= 4 else year - 1)

    @classmethod
    def from_date(cls, value: date) -> "FinancialYear":
        return cls.from_month(value.month, value.year)

    def calendar_year_for(self, month: int) -> int:
        """Calendar year in which the given FY month falls."""
        fy_month_index(month)
        return self.start if month >= 4 else self.end

    def date_range(self) -> Tuple[date, date]:
        """First and last day of the financial year."""
        return date(self.start, 4, 1), date(self.end, 3, 31)

    def contains(self, value: date) -> bool:
        first, last = self.date_range()
        return first <= value <= last

    def months(self) -> List[Tuple[int, int]]:
        """(month, calendar year) pairs in FY order."""
        return [(month, self.calendar_year_for(month)) for month in FY_MONTH_ORDER]


def financial_year_options(today: date, back: int = 2, forward: int = 1) -> List[FinancialYear]:
    """Selectable financial years around the one containing today."""
    current = FinancialYear.from_date(today)
    return [FinancialYear(start=current.start + offset) for offset in range(-back, forward + 1)]


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a calendar month."""
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def last_completed_months_window(today: date, months: int = 12) -> Tuple[date, date]:
    """
    Window covering the last `months` completed calendar months.

    Ends on the last day of the month before today and starts on the first
    day of the month `months - 1` months before that.
    """
    end = today.replace(day=1) - timedelta(days=1)
    start_index = end.year * 12 + (end.month - 1) - (months - 1)
    start = date(start_index // 12, start_index % 12 + 1, 1)
    return start, end


def month_year_pairs_between(start: date, end: date) -> List[Tuple[int, int]]:
    """(month, year) pairs for every calendar month touched by [start, end]."""
    pairs: List[Tuple[int, int]] = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        pairs.append((month, year))
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return pairs
