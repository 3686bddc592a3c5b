# Tests for the month window and date normalization

from datetime import date, datetime, timedelta

import pytest

from date_helpers import month_range, normalize_date
from errors import InvalidArgument


def test_normalize_date_accepts_iso_day():
    assert normalize_date("2025-11-06") == date(2025, 11, 6)


def test_normalize_date_drops_time_of_day():
    assert normalize_date("2025-11-06T23:59:59") == date(2025, 11, 6)
    assert normalize_date("2025-11-06T08:15:00Z") == date(2025, 11, 6)
    assert normalize_date(datetime(2025, 11, 6, 12, 30)) == date(2025, 11, 6)


def test_normalize_date_uses_default_for_empty_value():
    today = date(2025, 1, 1)
    assert normalize_date(None, default=today) == today
    assert normalize_date("  ", default=today) == today


@pytest.mark.parametrize("value", ["not-a-date", "2025-13-01", "2025-02-30", 20251106])
def test_normalize_date_rejects_garbage(value):
    with pytest.raises(InvalidArgument):
        normalize_date(value)


def test_normalize_date_requires_value_without_default():
    with pytest.raises(InvalidArgument):
        normalize_date(None)


@pytest.mark.parametrize("value, expected", [
    ("2025-01-15", (date(2025, 1, 1), date(2025, 1, 31))),
    ("2024-02-10", (date(2024, 2, 1), date(2024, 2, 29))),
    ("2025-02-28", (date(2025, 2, 1), date(2025, 2, 28))),
    ("2025-04-01", (date(2025, 4, 1), date(2025, 4, 30))),
    ("2025-12-31T22:00:00", (date(2025, 12, 1), date(2025, 12, 31))),
    ("2025-06", (date(2025, 6, 1), date(2025, 6, 30))),
])
def test_month_range_spans_whole_month(value, expected):
    assert month_range(value) == expected


def test_month_range_contains_day_and_ends_one_day_before_next_month():
    day = date(2023, 1, 1)
    while day < date(2025, 1, 1):
        from_date, to_date = month_range(day)
        assert from_date <= day <= to_date
        next_month = to_date + timedelta(days=1)
        assert next_month.day == 1
        assert (next_month.year, next_month.month) != (from_date.year, from_date.month)
        assert from_date.day == 1
        day += timedelta(days=7)


def test_month_range_rejects_invalid_month():
    with pytest.raises(InvalidArgument):
        month_range("2025-13")
