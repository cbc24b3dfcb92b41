from datetime import date

import pytest

from utils.date_helpers import (
    add_months,
    add_years,
    friendly_month,
    month_bounds,
    parse_date,
    shift_date,
)


def test_parse_date_accepts_common_separators():
    assert parse_date("2025-01-31") == date(2025, 1, 31)
    assert parse_date("2025/01/31") == date(2025, 1, 31)
    assert parse_date("31-01-2025") is None
    assert parse_date("") is None


def test_month_bounds_cover_every_month_length():
    assert month_bounds(2025, 2) == (date(2025, 2, 1), date(2025, 2, 28))
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(2025, 4)[1] == date(2025, 4, 30)
    assert month_bounds(2025, 12)[1] == date(2025, 12, 31)
    with pytest.raises(ValueError):
        month_bounds(2025, 0)


def test_add_months_clamps_and_goes_backwards():
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2025, 3, 31), -1) == date(2025, 2, 28)
    assert add_months(date(2025, 11, 15), 3) == date(2026, 2, 15)
    assert add_years(date(2024, 2, 29), 1) == date(2025, 2, 28)


def test_shift_date_by_frequency():
    start = date(2025, 1, 31)
    assert shift_date(start, "daily", 1) == date(2025, 2, 1)
    assert shift_date(start, "weekly", 2) == date(2025, 2, 14)
    assert shift_date(start, "monthly", 2) == date(2025, 3, 31)
    assert shift_date(start, "yearly", 1) == date(2026, 1, 31)
    with pytest.raises(ValueError):
        shift_date(start, "hourly", 1)


def test_friendly_month():
    assert friendly_month(2026, 2) == "February 2026"
