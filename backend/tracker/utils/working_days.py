"""
Working day arithmetic.

A working day is a weekday that is not a bank holiday for the relevant region
and, for an individual, not covered by that person's leave. Everything here is
pure: holiday dates and leave ranges are looked up by the caller.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from tracker.utils.financial_year import FinancialYear, month_bounds


DateRange = Tuple[date, date]


@dataclass(frozen=True)
class WorkingDayCounts:
    """Working day breakdown for one calendar month."""
    year: int
    month: int

    # Weekdays before any holiday or leave is removed
    base_working_days: int
    base_working_days_to_today: int

    # Net of bank holidays
    team_working_days: int
    team_working_days_to_today: int

    # Net of bank holidays and the staff member's leave (equal to team when no leave given)
    staff_working_days: int
    staff_working_days_to_today: int


def is_weekday(value: date) -> bool:
    return value.weekday() < 5  # Mon=0, Fri=4


def iter_days(start: date, end: date) -> Iterator[date]:
    """Every calendar day in [start, end]."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def iter_weekdays(start: date, end: date) -> Iterator[date]:
    """Weekdays in [start, end]."""
    return (day for day in iter_days(start, end) if is_weekday(day))


def count_weekdays(start: date, end: date) -> int:
    """Count weekdays (Mon-Fri) between start and end inclusive."""
    if start > end:
        return 0
    return sum(1 for _ in iter_weekdays(start, end))


def holiday_days_in_range(holidays: Iterable[date], start: date, end: date) -> Set[date]:
    """Distinct weekday holiday dates inside [start, end]."""
    return {day for day in holidays if start <= day <= end and is_weekday(day)}


def leave_days_in_range(leave_ranges: Iterable[DateRange], start: date, end: date) -> Set[date]:
    """
    Distinct weekday leave dates inside [start, end].

    Each range is inclusive and is clipped to [start, end] before it is walked,
    so leave that begins before or ends after the window still counts for the
    days it overlaps.
    """
    days: Set[date] = set()
    for leave_start, leave_end in leave_ranges:
        clipped_start = max(leave_start, start)
        clipped_end = min(leave_end, end)
        if clipped_start > clipped_end:
            continue
        days.update(iter_weekdays(clipped_start, clipped_end))
    return days


def _elapsed(days: List[date], first_day: date, today: date) -> int:
    """
    Count of `days` on or before today, clamped by comparing whole months:
    future months have none elapsed and past months have all of them.
    """
    current_first = today.replace(day=1)
    if first_day > current_first:
        return 0
    if first_day < current_first:
        return len(days)
    return sum(1 for day in days if day <= today)


def calculate_working_days(
    year: int,
    month: int,
    today: date,
    holidays: Iterable[date] = (),
    leave_ranges: Optional[Iterable[DateRange]] = None,
) -> WorkingDayCounts:
    """
    Working days in a calendar month and how many have elapsed as of today.

    Args:
        year: Calendar year
        month: Calendar month (1-12)
        today: Reference date for the elapsed counts
        holidays: Bank holiday dates for the relevant region; duplicates and
            dates outside the month or on weekends are ignored
        leave_ranges: Inclusive (start, end) leave ranges for one staff member,
            or None for a team-level count

    Returns:
        WorkingDayCounts for the month
    """
    first_day, last_day = month_bounds(year, month)
    weekdays = list(iter_weekdays(first_day, last_day))

    holiday_set = holiday_days_in_range(holidays, first_day, last_day)
    team_days = [day for day in weekdays if day not in holiday_set]

    if leave_ranges is None:
        staff_days = team_days
    else:
        # A day that is both a holiday and leave is only removed once
        leave_set = leave_days_in_range(leave_ranges, first_day, last_day)
        staff_days = [day for day in team_days if day not in leave_set]

    base_to_today = _elapsed(weekdays, first_day, today)
    team_to_today = _elapsed(team_days, first_day, today)
    staff_to_today = _elapsed(staff_days, first_day, today)

    return WorkingDayCounts(
        year=year,
        month=month,
        base_working_days=len(weekdays),
        base_working_days_to_today=base_to_today,
        team_working_days=max(0, len(team_days)),
        team_working_days_to_today=max(0, min(team_to_today, len(team_days))),
        staff_working_days=max(0, len(staff_days)),
        staff_working_days_to_today=max(0, min(staff_to_today, len(staff_days))),
    )


def calculate_fy_month_working_days(
    financial_year: FinancialYear,
    month: int,
    today: date,
    holidays: Iterable[date] = (),
    leave_ranges: Optional[Iterable[DateRange]] = None,
) -> WorkingDayCounts:
    """calculate_working_days for a month addressed by financial year."""
    return calculate_working_days(
        financial_year.calendar_year_for(month),
        month,
        today,
        holidays=holidays,
        leave_ranges=leave_ranges,
    )


def working_dates(
    start: date,
    end: date,
    holidays: Iterable[date] = (),
    leave_ranges: Iterable[DateRange] = (),
) -> List[date]:
    """Working dates in [start, end] net of holidays and leave, in order."""
    excluded = holiday_days_in_range(holidays, start, end) | leave_days_in_range(leave_ranges, start, end)
    return [day for day in iter_weekdays(start, end) if day not in excluded]
