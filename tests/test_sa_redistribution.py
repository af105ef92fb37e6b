"""
Self Assessment redistribution tests.
"""

from datetime import date

import pytest

from tracker.schemas.target import DistributionRuleCreate
from tracker.utils.financial_year import FinancialYear
from tracker.utils.sa_redistribution import (
    DEFAULT_DISTRIBUTION_RULES,
    SA_CHECKPOINTS,
    Checkpoint,
    RuleDefinition,
    calculate_all_months,
    checkpoints_from_rules,
    cumulative_target,
    current_month_for,
    distribute_integer_target,
    is_current_or_future_month,
    normalise_overrides,
    validate_distribution_rules,
)


def allocate(annual_target, current_month=4, actuals=None, overrides=None, rules=DEFAULT_DISTRIBUTION_RULES):
    return calculate_all_months(
        annual_target=annual_target,
        actuals_by_period=actuals or {},
        current_month=current_month,
        overrides=overrides or {},
        distribution_rules=rules,
    )


@pytest.mark.parametrize("total,slots", [(0, 3), (7, 3), (10, 4), (480, 4), (1, 5), (1001, 12)])
def test_distribute_integer_target_sums_and_spread(total, slots):
    values = distribute_integer_target(total, slots)

    assert len(values) == slots
    assert sum(values) == total
    assert all(total // slots <= value <= total // slots + 1 for value in values)
    # Larger shares come first
    assert values == sorted(values, reverse=True)


def test_distribute_integer_target_no_slots():
    assert distribute_integer_target(100, 0) == []
    assert distribute_integer_target(100, -1) == []


def test_cumulative_target_rounds_half_up():
    assert cumulative_target(1001, 50) == 501
    assert cumulative_target(1001, 90) == 901
    assert cumulative_target(1200, 100) == 1200
    assert cumulative_target(5, 50) == 3


def test_even_allocation_from_april():
    allocation = allocate(1200)

    assert [allocation[month] for month in (4, 5, 6, 7)] == [150, 150, 150, 150]
    assert [allocation[month] for month in (8, 9, 10, 11)] == [120, 120, 120, 120]
    assert allocation[12] == 42
    assert allocation[1] == 78
    assert allocation[2] == allocation[3] == 0
    assert sum(allocation.values()) == 1200


def test_override_is_kept_and_surplus_flows_forward():
    allocation = allocate(1200, overrides={5: 999})

    assert allocation[5] == 999
    assert allocation[4] == allocation[6] == allocation[7] == 0
    assert [allocation[month] for month in (8, 9, 10, 11)] == [21, 20, 20, 20]
    assert allocation[12] == 42
    assert allocation[1] == 78
    assert sum(allocation.values()) == 1200


def test_february_and_march_overrides_are_ignored():
    assert allocate(1200, overrides={2: 50, 3: 75}) == allocate(1200)


def test_negative_override_floors_at_zero():
    allocation = allocate(1200, overrides={6: -10})

    assert allocation[6] == 0
    assert sum(allocation.values()) == 1200


def test_shortfall_in_past_window_moves_to_next_checkpoint():
    allocation = allocate(1200, current_month=8, actuals={"Period 1": 500})

    assert [allocation[month] for month in (4, 5, 6, 7)] == [125, 125, 125, 125]
    assert [allocation[month] for month in (8, 9, 10, 11)] == [145, 145, 145, 145]
    assert allocation[12] == 42
    assert allocation[1] == 78
    assert sum(allocation.values()) == 1200


def test_december_and_january_follow_their_own_shares():
    allocation = allocate(1200, current_month=12, actuals={"Period 1": 600, "Period 2": 1080})

    # 93.5% is due by the end of December, the last 6.5% in January
    assert allocation[12] == 42
    assert allocation[1] == 78


def test_checkpoints_accumulate_rule_percentages():
    assert SA_CHECKPOINTS == (
        Checkpoint("Period 1", (4, 5, 6, 7), 50.0),
        Checkpoint("Period 2", (8, 9, 10, 11), 90.0),
        Checkpoint("Period 3a", (12,), 93.5),
        Checkpoint("Period 3b", (1,), 100.0),
    )


def test_checkpoints_skip_non_filing_periods():
    rules = [
        RuleDefinition("Spring", (4, 5, 6, 7, 8, 9), 70.0),
        RuleDefinition("Winter", (10, 11, 12, 1), 30.0),
        RuleDefinition("Closed", (2, 3), 0.0),
    ]

    assert checkpoints_from_rules(rules) == (
        Checkpoint("Spring", (4, 5, 6, 7, 8, 9), 70.0),
        Checkpoint("Winter", (10, 11, 12, 1), 100.0),
    )


def test_over_delivery_reduces_later_targets():
    allocation = allocate(1200, current_month=8, actuals={"Period 1": 700})

    assert [allocation[month] for month in (8, 9, 10, 11)] == [95, 95, 95, 95]
    assert sum(allocation.values()) == 1200


def test_january_absorbs_everything_still_required():
    allocation = allocate(1200, current_month=1, actuals={"Period 1": 600, "Period 2": 1000})

    assert [allocation[month] for month in (8, 9, 10, 11)] == [100, 100, 100, 100]
    assert allocation[12] == 0
    assert allocation[1] == 200
    assert sum(allocation.values()) == 1200


def test_delivery_above_annual_target_is_reconciled_without_negatives():
    allocation = allocate(1200, current_month=8, actuals={"Period 1": 1300})

    assert sum(allocation.values()) == 1200
    assert min(allocation.values()) == 0
    assert allocation[7] == 225


def test_rounding_is_reconciled_to_exact_total():
    allocation = allocate(1001)

    assert sum(allocation.values()) == 1001
    assert allocation[2] == allocation[3] == 0


@pytest.mark.parametrize("current_month", [4, 6, 8, 11, 12, 1, 2, 3])
@pytest.mark.parametrize("annual_target", [1, 97, 1200, 4321])
def test_total_and_pinned_months_hold(annual_target, current_month):
    allocation = allocate(annual_target, current_month=current_month)

    assert sum(allocation.values()) == annual_target
    assert allocation[2] == 0
    assert allocation[3] == 0
    assert all(value >= 0 for value in allocation.values())


def test_overrides_exceeding_target_are_kept():
    allocation = allocate(1200, overrides={4: 2000})

    assert allocation[4] == 2000
    assert sum(value for month, value in allocation.items() if month != 4) == 0


def test_zero_target_or_no_rules_gives_zeros():
    assert set(allocate(0).values()) == {0}
    assert set(allocate(-5).values()) == {0}
    assert set(allocate(1200, rules=[]).values()) == {0}


def test_allocation_is_deterministic():
    first = allocate(1234, current_month=9, actuals={"Period 1": 611}, overrides={10: 40})
    second = allocate(1234, current_month=9, actuals={"Period 1": 611}, overrides={10: 40})

    assert first == second


def test_normalise_overrides():
    assert normalise_overrides({1: 5, 2: 9, 3: 9, 13: 1, 0: 1, 7: -3}) == {1: 5, 7: 0}


def test_checkpoint_boundaries():
    financial_year = FinancialYear(2025)

    assert [checkpoint.boundary(financial_year) for checkpoint in SA_CHECKPOINTS] == [
        date(2025, 7, 31),
        date(2025, 11, 30),
        date(2025, 12, 31),
        date(2026, 1, 31),
    ]


def test_current_month_for_financial_year():
    financial_year = FinancialYear(2025)

    assert current_month_for(financial_year, date(2025, 6, 16)) == 6
    assert current_month_for(financial_year, date(2026, 2, 1)) == 2
    assert current_month_for(financial_year, date(2025, 3, 31)) == 4
    assert current_month_for(financial_year, date(2026, 4, 1)) == 3


def test_is_current_or_future_month():
    financial_year = FinancialYear(2025)
    today = date(2025, 6, 16)

    assert is_current_or_future_month(6, financial_year, today)
    assert is_current_or_future_month(1, financial_year, today)
    assert not is_current_or_future_month(5, financial_year, today)


def test_default_rules_are_valid():
    assert validate_distribution_rules(DEFAULT_DISTRIBUTION_RULES) == []


def test_invalid_rules_are_reported():
    rules = [
        DistributionRuleCreate(period_name="A", months=[4, 5, 6], percentage=60),
        DistributionRuleCreate(period_name="B", months=[6, 7], percentage=30),
    ]

    problems = validate_distribution_rules(rules)

    assert any("Month 6 appears in both A and B" in problem for problem in problems)
    assert any("not covered" in problem for problem in problems)
    assert any("sum to" in problem for problem in problems)


def test_empty_rule_set_is_invalid():
    assert validate_distribution_rules([]) == ["At least one distribution rule is required"]
