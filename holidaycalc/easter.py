"""Western (Gregorian) Easter."""

from __future__ import annotations

from datetime import date

from holidaycalc.calendar_utils import first_day_of_month


def easter_sunday(year: int) -> date:
    """Return Easter Sunday for the given year (Gregorian calendar)."""
    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = ((h + l - 7 * m + 114) % 31) + 1
    return date(year, month, day)


def next_easter_on_or_after(start: date) -> date:
    """Return the first Easter Sunday falling on or after ``start``."""
    month_start = first_day_of_month(start)
    year = month_start.year
    if month_start.month > 4:  # Easter is never later than April
        year += 1
    easter = easter_sunday(year)
    if easter < start:
        easter = easter_sunday(year + 1)
    return easter
