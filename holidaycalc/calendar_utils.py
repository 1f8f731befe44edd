"""Gregorian calendar helpers."""

from __future__ import annotations

import calendar
from datetime import date, timedelta

# Day-of-week numbering used by holiday rules (0 = Sunday).
SUNDAY = 0
MONDAY = 1
TUESDAY = 2
WEDNESDAY = 3
THURSDAY = 4
FRIDAY = 5
SATURDAY = 6


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping the day to the end of the target month."""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(day.day, days_in_month(year, month)))


def add_years(day: date, years: int) -> date:
    """Shift by whole years; February 29 becomes February 28 in common years."""
    year = day.year + years
    return date(year, day.month, min(day.day, days_in_month(year, day.month)))


def day_of_week(day: date) -> int:
    return (day.weekday() + 1) % 7


def first_day_of_month(day: date) -> date:
    return day.replace(day=1)


def is_weekend(day: date) -> bool:
    return day_of_week(day) in (SATURDAY, SUNDAY)


def anniversary(year: int, month: int, day: int) -> date:
    """Return ``month``/``day`` in ``year``.

    Raises ``ValueError`` when the day does not exist in that year
    (February 29 outside leap years, April 31, ...).
    """
    return date(year, month, day)
