"""
Tests for the date helpers.
"""

from datetime import date

import pytest

from app.utils.dates import (
    add_months,
    calculate_age,
    days_between,
    format_date,
    format_time,
    get_holiday_name,
    is_expiring_soon,
    is_working_day,
    month_end,
    next_working_day,
    ranges_overlap,
    subscription_end_date,
    working_days_in_range,
)

HOLIDAYS = [
    {"date": "01-26", "name": "Republic Day", "recurring_yearly": True},
    {"date": "2025-03-14", "name": "Holi"},
]


class TestArithmetic:

    @pytest.mark.parametrize("start, months, expected", [
        (date(2025, 1, 10), 1, date(2025, 2, 10)),
        (date(2025, 1, 31), 1, date(2025, 2, 28)),
        (date(2024, 1, 31), 1, date(2024, 2, 29)),
        (date(2025, 11, 15), 3, date(2026, 2, 15)),
        (date(2025, 8, 31), 6, date(2026, 2, 28)),
    ])
    def test_subscription_end_date(self, start, months, expected):
        assert subscription_end_date(start, months) == expected

    def test_add_months_clamps_to_month_end(self):
        assert add_months(date(2025, 3, 31), 1) == date(2025, 4, 30)

    def test_days_between_is_signed(self):
        assert days_between(date(2025, 1, 10), date(2025, 1, 15)) == 5
        assert days_between(date(2025, 1, 15), date(2025, 1, 10)) == -5

    def test_ranges_overlap_is_inclusive(self):
        assert ranges_overlap(date(2025, 1, 1), date(2025, 1, 31), date(2025, 1, 31), date(2025, 2, 28))
        assert not ranges_overlap(date(2025, 1, 1), date(2025, 1, 30), date(2025, 1, 31), date(2025, 2, 28))

    def test_is_expiring_soon(self):
        today = date(2025, 1, 8)
        assert is_expiring_soon(date(2025, 1, 15), today)
        assert not is_expiring_soon(date(2025, 1, 16), today)
        assert not is_expiring_soon(date(2025, 1, 7), today)

    def test_month_end(self):
        assert month_end(date(2024, 2, 10)) == date(2024, 2, 29)

    def test_calculate_age_before_birthday(self):
        assert calculate_age(date(1990, 6, 15), today=date(2025, 6, 14)) == 34
        assert calculate_age(date(1990, 6, 15), today=date(2025, 6, 15)) == 35


class TestWorkingDays:

    def test_recurring_holiday_matches_any_year(self):
        assert get_holiday_name(date(2031, 1, 26), HOLIDAYS) == "Republic Day"

    def test_dated_holiday_matches_only_its_year(self):
        assert get_holiday_name(date(2025, 3, 14), HOLIDAYS) == "Holi"
        assert get_holiday_name(date(2026, 3, 14), HOLIDAYS) is None

    def test_weekend_is_not_a_working_day(self):
        assert not is_working_day(date(2025, 1, 11))  # Saturday
        assert is_working_day(date(2025, 1, 10))  # Friday

    def test_next_working_day_skips_weekend_and_holiday(self):
        # Friday 2025-03-14 is Holi, then the weekend
        assert next_working_day(date(2025, 3, 13), HOLIDAYS) == date(2025, 3, 17)

    def test_working_days_in_range(self):
        days = working_days_in_range(date(2025, 1, 6), date(2025, 1, 12))
        assert len(days) == 5
        assert days[0] == date(2025, 1, 6)


class TestDisplay:

    def test_format_date(self):
        assert format_date(date(2025, 2, 10)) == "10 Feb 2025"
        assert format_date(None) == ""

    @pytest.mark.parametrize("value, expected", [
        ("07:30", "7:30 AM"),
        ("12:00", "12:00 PM"),
        ("19:30", "7:30 PM"),
        ("00:15", "12:15 AM"),
    ])
    def test_format_time(self, value, expected):
        assert format_time(value) == expected
