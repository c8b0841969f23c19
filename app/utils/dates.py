"""
Date helpers.

Calendar-month arithmetic goes through ``dateutil.relativedelta`` so that
2025-01-31 + 1 month lands on 2025-02-28 instead of overflowing.
"""

from datetime import date, timedelta
from typing import Iterable, List, Mapping, Optional

from dateutil.relativedelta import relativedelta


# =============================================================================
# ARITHMETIC
# =============================================================================

def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def add_months(day: date, months: int) -> date:
    return day + relativedelta(months=months)


def subscription_end_date(start_date: date, duration_months: int) -> date:
    """
    End date of a subscription bought on ``start_date``.

    Example:
        >>> subscription_end_date(date(2025, 1, 10), 1)
        datetime.date(2025, 2, 10)
    """
    return add_months(start_date, duration_months)


def days_between(start: date, end: date) -> int:
    """Signed number of days from ``start`` to ``end``."""
    return (end - start).days


def ranges_overlap(start_a: date, end_a: date, start_b: date, end_b: date) -> bool:
    """Inclusive overlap test of two closed date ranges."""
    return start_a <= end_b and start_b <= end_a


def is_date_in_range(day: date, start: date, end: date) -> bool:
    return start <= day <= end


def is_expiring_soon(end_date: date, today: date, threshold_days: int = 7) -> bool:
    remaining = days_between(today, end_date)
    return 0 <= remaining <= threshold_days


def month_start(day: date) -> date:
    return day.replace(day=1)


def month_end(day: date) -> date:
    return month_start(day) + relativedelta(months=1, days=-1)


def calculate_age(date_of_birth: date, today: Optional[date] = None) -> int:
    today = today or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


# =============================================================================
# WORKING DAYS & HOLIDAYS
# =============================================================================
#
# Holidays come from StudioSettings.holidays:
#   {"date": "01-26", "name": "Republic Day", "recurring_yearly": true}
#   {"date": "2025-03-14", "name": "Holi"}

def _holiday_matches(holiday: Mapping, day: date) -> bool:
    value = str(holiday.get("date", ""))
    if holiday.get("recurring_yearly") or len(value) == 5:
        return value[-5:] == day.strftime("%m-%d")
    return value == day.isoformat()


def get_holiday_name(day: date, holidays: Iterable[Mapping]) -> Optional[str]:
    for holiday in holidays or []:
        if _holiday_matches(holiday, day):
            return holiday.get("name")
    return None


def is_holiday(day: date, holidays: Iterable[Mapping]) -> bool:
    return get_holiday_name(day, holidays) is not None


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def is_working_day(day: date, holidays: Iterable[Mapping] = ()) -> bool:
    """Monday to Friday, excluding studio holidays."""
    return not is_weekend(day) and not is_holiday(day, holidays)


def next_working_day(day: date, holidays: Iterable[Mapping] = ()) -> date:
    holidays = list(holidays or [])
    current = add_days(day, 1)
    while not is_working_day(current, holidays):
        current = add_days(current, 1)
    return current


def working_days_in_range(start: date, end: date, holidays: Iterable[Mapping] = ()) -> List[date]:
    holidays = list(holidays or [])
    result = []
    current = start
    while current <= end:
        if is_working_day(current, holidays):
            result.append(current)
        current = add_days(current, 1)
    return result


# =============================================================================
# DISPLAY
# =============================================================================

def format_date(day: Optional[date]) -> str:
    """
    Short display format used in messages and invoices.

    Example:
        >>> format_date(date(2025, 2, 10))
        '10 Feb 2025'
    """
    if day is None:
        return ""
    return f"{day.day} {day.strftime('%b %Y')}"


def format_time(value: str) -> str:
    """'19:30' -> '7:30 PM'"""
    hours, minutes = (int(part) for part in value.split(":")[:2])
    period = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{minutes:02d} {period}"
