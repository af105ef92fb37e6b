"""
Self Assessment target redistribution.

Splits an annual Self Assessment target into twelve monthly targets. The year
is walked through cumulative checkpoints at the end of July, November,
December and January; at each one the months that are still open receive
whatever is needed to bring the running total up to the checkpoint's share
of the annual target, so any shortfall in earlier months is pushed forward.
February and March are non-filing months and are always zero.

Usage:
    allocation = calculate_all_months(
        annual_target=1200,
        actuals_by_period={},
        current_month=4,
        overrides={5: 999},
        distribution_rules=DEFAULT_DISTRIBUTION_RULES,
    )
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from tracker.utils.financial_year import FY_MONTH_ORDER, FinancialYear, fy_month_index, month_bounds


SA_FIXED_ZERO_MONTHS = frozenset({2, 3})

# Reconciliation prefers the latest month of the calendar, January last
RECONCILIATION_ORDER: Tuple[int, ...] = (12, 11, 10, 9, 8, 7, 6, 5, 4, 1)


@dataclass(frozen=True)
class Checkpoint:
    """Cumulative share of the annual target due by the end of `months`."""
    name: str
    months: Tuple[int, ...]
    percentage: float

    @property
    def last_month(self) -> int:
        return self.months[-1]

    def boundary(self, financial_year: FinancialYear) -> date:
        """Last day of the checkpoint window within the given financial year."""
        return month_bounds(financial_year.calendar_year_for(self.last_month), self.last_month)[1]


@dataclass(frozen=True)
class RuleDefinition:
    period_name: str
    months: Tuple[int, ...]
    percentage: float


DEFAULT_DISTRIBUTION_RULES: Tuple[RuleDefinition, ...] = (
    RuleDefinition("Period 1", (4, 5, 6, 7), 50.0),
    RuleDefinition("Period 2", (8, 9, 10, 11), 40.0),
    RuleDefinition("Period 3a", (12,), 3.5),
    RuleDefinition("Period 3b", (1,), 6.5),
    RuleDefinition("Period 4", (2, 3), 0.0),
)


def checkpoints_from_rules(rules: Iterable[Any]) -> Tuple[Checkpoint, ...]:
    """
    Cumulative checkpoints for a rule set listed in financial-year order.

    Each rule ends a checkpoint whose percentage is the running total of the
    rules so far. Periods made up only of non-filing months are skipped.
    """
    checkpoints: List[Checkpoint] = []
    cumulative = Decimal(0)
    for rule in rules:
        cumulative += Decimal(str(rule.percentage))
        months = tuple(month for month in rule.months if month not in SA_FIXED_ZERO_MONTHS)
        if months:
            checkpoints.append(Checkpoint(rule.period_name, months, float(cumulative)))
    return tuple(checkpoints)


# Period 1 through 31 July (50%), Period 2 through 30 November (90%),
# Period 3a through 31 December (93.5%), Period 3b through 31 January (100%)
SA_CHECKPOINTS: Tuple[Checkpoint, ...] = checkpoints_from_rules(DEFAULT_DISTRIBUTION_RULES)


def distribute_integer_target(total: int, slots: int) -> List[int]:
    """
    Split an integer total across slots without rounding drift.

    Every slot gets floor(total / slots); the first `remainder` slots get one
    more, so the result always sums to `total`.

    Args:
        total: Amount to split
        slots: Number of slots

    Returns:
        List of `slots` integers, empty when slots <= 0
    """
    if slots <= 0:
        return []
    base = total // slots
    remainder = total - base * slots
    return [base + 1 if index < remainder else base for index in range(slots)]


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cumulative_target(annual_target: int, percentage: float) -> int:
    """Share of the annual target due by a checkpoint, rounded half up."""
    return round_half_up(Decimal(annual_target) * Decimal(str(percentage)) / Decimal(100))


def is_current_or_future_month(month: int, financial_year: FinancialYear, today: date) -> bool:
    """True when the FY month is the month containing today or later."""
    month_year = financial_year.calendar_year_for(month)
    return (month_year, month) >= (today.year, today.month)


def current_month_for(financial_year: FinancialYear, today: date) -> int:
    """
    Month to treat as "now" when redistributing a financial year.

    Today's month inside the year, April for a year that has not started and
    March for one that has finished.
    """
    first_day, last_day = financial_year.date_range()
    if today < first_day:
        return FY_MONTH_ORDER[0]
    if today > last_day:
        return FY_MONTH_ORDER[-1]
    return today.month


def normalise_overrides(overrides: Mapping[int, int]) -> Dict[int, int]:
    """Drop overrides for non-filing or invalid months and floor values at zero."""
    return {
        int(month): max(0, int(value))
        for month, value in overrides.items()
        if 1 <= int(month) <= 12 and int(month) not in SA_FIXED_ZERO_MONTHS
    }


def _reconcile(
    allocation: Dict[int, int],
    annual_target: int,
    fixed: Mapping[int, int],
    current_index: int,
) -> None:
    difference = annual_target - sum(allocation.values())
    if difference == 0:
        return

    adjustable = [month for month in RECONCILIATION_ORDER if month not in fixed]
    open_months = [month for month in adjustable if fy_month_index(month) >= current_index]
    # Past months are only reduced once the open months are exhausted
    candidates = open_months + [month for month in adjustable if month not in open_months]

    for month in candidates:
        if difference >= 0:
            allocation[month] += difference
            return
        taken = min(allocation[month], -difference)
        allocation[month] -= taken
        difference += taken
        if difference == 0:
            return


def calculate_all_months(
    annual_target: int,
    actuals_by_period: Mapping[str, int],
    current_month: int,
    overrides: Mapping[int, int],
    distribution_rules: Sequence[Any],
    checkpoints: Sequence[Checkpoint] = SA_CHECKPOINTS,
) -> Dict[int, int]:
    """
    Allocate an annual target across the twelve calendar months.

    Args:
        annual_target: Annual target for the financial year
        actuals_by_period: Cumulative delivered count from the start of the
            year through each checkpoint boundary, keyed by checkpoint name.
            Only deliveries in months before `current_month` belong here.
        current_month: Calendar month treated as "now"; earlier FY months are
            filled with what was actually delivered in them
        overrides: Manually fixed monthly values; they are never recomputed.
            February, March and out-of-range months are ignored.
        distribution_rules: Descriptive rule set; an empty set yields zeros
        checkpoints: Cumulative checkpoints in financial-year order

    Returns:
        Mapping of month (1-12) to target. Sums to `annual_target` whenever the
        overrides alone do not exceed it.
    """
    allocation = {month: 0 for month in range(1, 13)}
    if annual_target <= 0 or not distribution_rules:
        return allocation

    fixed = normalise_overrides(overrides)
    allocation.update(fixed)

    current_index = fy_month_index(current_month)
    carried = 0
    previous_actual = 0

    for checkpoint in checkpoints:
        target_at_checkpoint = cumulative_target(annual_target, checkpoint.percentage)
        open_months = [
            month for month in checkpoint.months
            if month not in fixed and month not in SA_FIXED_ZERO_MONTHS
        ]

        cumulative_actual = max(previous_actual, int(actuals_by_period.get(checkpoint.name, previous_actual)))
        window_actual = cumulative_actual - previous_actual
        previous_actual = cumulative_actual

        past = [month for month in open_months if fy_month_index(month) < current_index]
        for month, value in zip(past, distribute_integer_target(window_actual, len(past))):
            allocation[month] = value

        carried += sum(fixed.get(month, 0) for month in checkpoint.months)
        carried += sum(allocation[month] for month in past)

        eligible = [month for month in open_months if fy_month_index(month) >= current_index]
        if not eligible:
            # Shortfall stays in `carried` for the next checkpoint
            continue

        remaining_required = max(0, target_at_checkpoint - carried)
        for month, value in zip(eligible, distribute_integer_target(remaining_required, len(eligible))):
            allocation[month] = value
        carried += remaining_required

    _reconcile(allocation, annual_target, fixed, current_index)

    for month in SA_FIXED_ZERO_MONTHS:
        allocation[month] = 0
    return allocation


def validate_distribution_rules(rules: Iterable[Any]) -> List[str]:
    """
    Check a rule set covers every month exactly once and sums to 100%.

    Args:
        rules: Objects with `period_name`, `months` and `percentage`

    Returns:
        List of problems, empty when the rule set is valid
    """
    problems: List[str] = []
    seen: Dict[int, str] = {}
    total = Decimal(0)
    rules = list(rules)

    if not rules:
        return ["At least one distribution rule is required"]

    for rule in rules:
        total += Decimal(str(rule.percentage))
        if rule.percentage < 0:
            problems.append(f"{rule.period_name}: percentage cannot be negative")
        for month in rule.months:
            if month < 1 or month > 12:
                problems.append(f"{rule.period_name}: month {month} is not a calendar month")
            elif month in seen:
                problems.append(f"Month {month} appears in both {seen[month]} and {rule.period_name}")
            else:
                seen[month] = rule.period_name

    missing = sorted(set(range(1, 13)) - set(seen))
    if missing:
        problems.append(f"Months not covered by any rule: {missing}")
    if total != Decimal(100):
        problems.append(f"Percentages sum to {total}, expected 100")
    return problems
