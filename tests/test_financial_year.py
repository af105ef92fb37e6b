"""
Financial year helper tests.
"""

from datetime import date

import pytest

from tracker.utils.financial_year import (
    FinancialYear,
    financial_year_options,
    fy_month_index,
    last_completed_months_window,
    month_bounds,
    month_year_pairs_between,
)


def test_label_and_range():
    financial_year = FinancialYear(2025)

    assert financial_year.label == "2025/26"
    assert financial_year.end == 2026
    assert financial_year.date_range() == (date(2025, 4, 1), date(2026, 3, 31))


def test_financial_year_from_month_and_date():
    assert FinancialYear.from_month(3, 2026) == FinancialYear(2025)
    assert FinancialYear.from_month(4, 2026) == FinancialYear(2026)
    assert FinancialYear.from_date(date(2026, 1, 15)) == FinancialYear(2025)


def test_calendar_year_for_month():
    financial_year = FinancialYear(2025)

    assert financial_year.calendar_year_for(4) == 2025
    assert financial_year.calendar_year_for(12) == 2025
    assert financial_year.calendar_year_for(1) == 2026
    assert financial_year.calendar_year_for(3) == 2026


def test_contains():
    financial_year = FinancialYear(2025)

    assert financial_year.contains(date(2025, 4, 1))
    assert financial_year.contains(date(2026, 3, 31))
    assert not financial_year.contains(date(2025, 3, 31))


def test_months_in_financial_year_order():
    months = FinancialYear(2025).months()

    assert len(months) == 12
    assert months[0] == (4, 2025)
    assert months[8] == (12, 2025)
    assert months[9] == (1, 2026)
    assert months[-1] == (3, 2026)


def test_fy_month_index():
    assert fy_month_index(4) == 0
    assert fy_month_index(1) == 9
    assert fy_month_index(3) == 11
    with pytest.raises(ValueError):
        fy_month_index(13)


def test_financial_year_options():
    options = financial_year_options(date(2025, 6, 16))

    assert [option.start for option in options] == [2023, 2024, 2025, 2026]


def test_month_bounds_handles_leap_years():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2025, 2) == (date(2025, 2, 1), date(2025, 2, 28))


def test_last_completed_months_window():
    assert last_completed_months_window(date(2025, 6, 16)) == (date(2024, 6, 1), date(2025, 5, 31))
    assert last_completed_months_window(date(2025, 1, 3), months=3) == (date(2024, 10, 1), date(2024, 12, 31))


def test_month_year_pairs_between():
    pairs = month_year_pairs_between(date(2025, 11, 20), date(2026, 2, 3))

    assert pairs == [(11, 2025), (12, 2025), (1, 2026), (2, 2026)]
