"""
Performance metrics for the dashboard and team analytics views.

All functions are pure and operate on plain numbers, dates and mappings
prepared by the analytics service.
"""

import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from tracker.utils.working_days import DateRange, iter_days, is_weekday


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return int(math.floor(value + 0.5))


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation."""
    average = mean(values)
    return math.sqrt(mean([(value - average) ** 2 for value in values]))


@dataclass(frozen=True)
class PerformanceSummary:
    delivered: int
    target: int
    expected: int
    variance: int
    status_text: str


def performance_summary(
    delivered: int,
    target: int,
    working_days: int,
    working_days_up_to_today: int,
    is_current_month: bool,
) -> PerformanceSummary:
    """
    Compare delivery with the target expected so far.

    Outside the current month the whole target is expected; inside it the
    target is pro-rated by elapsed working days.
    """
    expected = 0.0
    if target > 0:
        if not is_current_month:
            expected = float(target)
        elif working_days > 0:
            expected = target / working_days * working_days_up_to_today

    variance = delivered - expected

    status_text = "No target set"
    if target > 0:
        if abs(variance) < 0.5:
            status_text = "On track"
        elif variance > 0:
            status_text = f"Ahead by {round_half_up(variance)} items"
        else:
            status_text = f"Behind by {abs(round_half_up(variance))} items"

    return PerformanceSummary(
        delivered=delivered,
        target=target,
        expected=round_half_up(expected),
        variance=round_half_up(variance),
        status_text=status_text,
    )


@dataclass(frozen=True)
class RunRatePoint:
    day: int
    expected_cumulative: float
    actual_cumulative: int


def run_rate_series(
    year: int,
    month: int,
    target: int,
    working_days: int,
    delivered_by_day: Mapping[int, int],
    days_in_month: int,
) -> List[RunRatePoint]:
    """
    Cumulative expected and actual delivery for each day of a month.

    Expected grows by the daily target on weekdays and is scaled so the last
    point equals the monthly target.
    """
    daily_target = target / working_days if working_days > 0 else 0.0

    expected: List[float] = []
    actual: List[int] = []
    expected_sum = 0.0
    actual_sum = 0
    for day in range(1, days_in_month + 1):
        if is_weekday(date(year, month, day)):
            expected_sum += daily_target
        expected.append(expected_sum)
        actual_sum += delivered_by_day.get(day, 0)
        actual.append(actual_sum)

    raw_end = expected[-1] if expected else 0.0
    if raw_end > 0 and target > 0:
        scale = target / raw_end
        expected = [value * scale for value in expected]

    return [
        RunRatePoint(day=day, expected_cumulative=round(expected[day - 1], 2), actual_cumulative=actual[day - 1])
        for day in range(1, days_in_month + 1)
    ]


@dataclass(frozen=True)
class Prediction:
    projected: int
    projected_from_run_rate: int
    projected_from_average: int
    run_rate: float
    gap: int
    gap_percentage: float
    status: str


def predict_month_end(
    delivered: int,
    target: int,
    working_days: int,
    working_days_up_to_today: int,
    historical_average: float,
) -> Prediction:
    """Project month-end delivery from the current run rate and the historical average."""
    days_passed = max(working_days_up_to_today, 1)
    run_rate = delivered / days_passed
    from_run_rate = round_half_up(run_rate * working_days)
    from_average = round_half_up(historical_average)

    projected = round_half_up((from_run_rate + from_average) / 2)
    gap = projected - target
    gap_percentage = gap / target * 100 if target > 0 else 0.0

    if gap >= 0:
        status = "On track / ahead"
    elif gap_percentage >= -10:
        status = "Slightly behind"
    else:
        status = "Significantly behind"

    return Prediction(
        projected=projected,
        projected_from_run_rate=from_run_rate,
        projected_from_average=from_average,
        run_rate=run_rate,
        gap=gap,
        gap_percentage=gap_percentage,
        status=status,
    )


@dataclass(frozen=True)
class MonthPerformance:
    month: int
    year: int
    delivered: int
    target: int

    @property
    def percent_achieved(self) -> float:
        return self.delivered / self.target * 100 if self.target > 0 else 0.0


def _targeted(months: Iterable[MonthPerformance]) -> List[MonthPerformance]:
    return [month for month in months if month.target > 0]


def consistency_score(months: Sequence[MonthPerformance]) -> float:
    """100 minus the coefficient of variation of % achieved, floored at 0."""
    percentages = [month.percent_achieved for month in _targeted(months)]
    if len(percentages) <= 1:
        return 100.0
    average = mean(percentages)
    if average == 0:
        return 0.0
    return 100 - min(100.0, standard_deviation(percentages) / average * 100)


def target_accuracy(months: Sequence[MonthPerformance], tolerance: float = 10.0) -> float:
    """Share of targeted months delivered within ±tolerance% of target."""
    targeted = _targeted(months)
    if not targeted:
        return 0.0
    accurate = [month for month in targeted if abs(month.percent_achieved - 100) <= tolerance]
    return len(accurate) / len(targeted) * 100


def over_delivery_index(months: Sequence[MonthPerformance], threshold: float = 120.0) -> float:
    """Share of targeted months delivered above threshold% of target."""
    targeted = _targeted(months)
    if not targeted:
        return 0.0
    over = [month for month in targeted if month.percent_achieved > threshold]
    return len(over) / len(targeted) * 100


def average_percent_achieved(months: Sequence[MonthPerformance]) -> float:
    return mean([month.percent_achieved for month in _targeted(months)])


@dataclass(frozen=True)
class BagelMetrics:
    working_days: int
    bagel_days: int
    frequency_rate: float
    avg_per_month: float
    longest_streak: int
    clusters: int
    recovery_speed: float


def bagel_metrics(
    start: date,
    end: date,
    delivery_dates: Iterable[date],
    leave_ranges: Iterable[DateRange] = (),
    months_with_data: int = 0,
) -> BagelMetrics:
    """
    Zero-delivery ("bagel") day statistics between start and end inclusive.

    Working days here are weekdays not covered by leave.

    Args:
        start: First day considered
        end: Last day considered, usually today
        delivery_dates: Dates with at least one delivery
        leave_ranges: Inclusive leave ranges
        months_with_data: Distinct months with recorded activity

    Returns:
        BagelMetrics where longest_streak is the longest run of working days
        with deliveries, clusters counts runs of two or more bagel days and
        recovery_speed is the average number of working days from a bagel day
        to the next delivery day.
    """
    ranges = list(leave_ranges)
    delivered: Set[date] = set(delivery_dates)

    def on_leave(day: date) -> bool:
        return any(leave_start <= day <= leave_end for leave_start, leave_end in ranges)

    days = [day for day in iter_days(start, end) if is_weekday(day) and not on_leave(day)]
    flags = [day in delivered for day in days]

    bagel_days = flags.count(False)
    frequency_rate = bagel_days / len(days) * 100 if days else 0.0
    avg_per_month = bagel_days / months_with_data if months_with_data > 0 else 0.0

    longest_streak = 0
    streak = 0
    clusters = 0
    run = 0
    for has_delivery in flags:
        if has_delivery:
            streak += 1
            longest_streak = max(longest_streak, streak)
            if run >= 2:
                clusters += 1
            run = 0
        else:
            streak = 0
            run += 1
    if run >= 2:
        clusters += 1

    recovery_total = 0
    recoveries = 0
    next_delivery: Optional[int] = None
    for index in range(len(flags) - 1, -1, -1):
        if flags[index]:
            next_delivery = index
        elif next_delivery is not None:
            recovery_total += next_delivery - index
            recoveries += 1
    recovery_speed = recovery_total / recoveries if recoveries else 0.0

    return BagelMetrics(
        working_days=len(days),
        bagel_days=bagel_days,
        frequency_rate=frequency_rate,
        avg_per_month=avg_per_month,
        longest_streak=longest_streak,
        clusters=clusters,
        recovery_speed=recovery_speed,
    )


def trend(values: Sequence[float], threshold: float = 2.0) -> str:
    """Compare the last three values with the earlier ones: increasing, stable or decreasing."""
    if len(values) < 2:
        return "stable"
    recent = values[-3:]
    older = values[: max(1, len(values) - 3)]
    difference = mean(recent) - mean(older)
    if abs(difference) < threshold:
        return "stable"
    return "increasing" if difference > 0 else "decreasing"


def rolling_average(values: Sequence[float], window: int = 3) -> List[float]:
    """Trailing mean over up to `window` values at each position."""
    result: List[float] = []
    for index in range(len(values)):
        window_values = values[max(0, index - window + 1): index + 1]
        result.append(mean(window_values))
    return result


def momentum_label(current: float, previous: float, threshold: float = 2.0) -> str:
    difference = current - previous
    if abs(difference) < threshold:
        return "Flat"
    return "Improving" if difference > 0 else "Declining"


def momentum(values: Sequence[float], window: int = 3) -> str:
    """Momentum of the rolling average against its value three months earlier."""
    averages = rolling_average(values, window)
    if not averages:
        return "Flat"
    current = averages[-1]
    previous = averages[max(0, len(averages) - 4)]
    return momentum_label(current, previous)


def leave_months(leave_ranges: Iterable[DateRange], end: date) -> Set[int]:
    """Calendar months touched by leave on or before `end`."""
    months: Set[int] = set()
    for leave_start, leave_end in leave_ranges:
        current = leave_start
        last = min(leave_end, end)
        while current <= last:
            months.add(current.month)
            current = (current.replace(day=1) + timedelta(days=32)).replace(day=1)
    return months


@dataclass(frozen=True)
class LeaveImpact:
    with_leave: float
    without_leave: float


def leave_impact(months: Sequence[MonthPerformance], months_with_leave: Set[int]) -> LeaveImpact:
    """Average % achieved in targeted months with and without leave."""
    targeted = _targeted(months)
    with_leave = [month.percent_achieved for month in targeted if month.month in months_with_leave]
    without_leave = [month.percent_achieved for month in targeted if month.month not in months_with_leave]
    return LeaveImpact(with_leave=mean(with_leave), without_leave=mean(without_leave))


@dataclass(frozen=True)
class TeamHealth:
    avg_target_achieved: float
    team_bagel_rate: float
    performance_bands: Dict[str, int] = field(default_factory=dict)


def team_health(staff_months: Sequence[Sequence[MonthPerformance]], bagel_rates: Sequence[float]) -> TeamHealth:
    """
    Team-wide health from each staff member's months and bagel rate.

    Bands: excellent averages at least 100% of target, good 80-99%, poor below 80%.
    """
    averages = [average_percent_achieved(months) for months in staff_months]
    bands = {
        "excellent": sum(1 for average in averages if average >= 100),
        "good": sum(1 for average in averages if 80 <= average < 100),
        "poor": sum(1 for average in averages if average < 80),
    }
    return TeamHealth(
        avg_target_achieved=mean(averages),
        team_bagel_rate=mean(list(bagel_rates)),
        performance_bands=bands,
    )


def service_mix(
    monthly_totals: Sequence[int],
    monthly_service_totals: Mapping[str, Sequence[int]],
) -> Dict[str, Tuple[List[float], str]]:
    """Each service's monthly share of delivery (%) and its trend."""
    mix: Dict[str, Tuple[List[float], str]] = {}
    for service_name, totals in monthly_service_totals.items():
        percentages = [
            service_total / month_total * 100 if month_total > 0 else 0.0
            for service_total, month_total in zip(totals, monthly_totals)
        ]
        mix[service_name] = (percentages, trend(percentages))
    return mix
