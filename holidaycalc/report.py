"""Reporting helpers."""

from __future__ import annotations

from datetime import date

from holidaycalc.domain import Settings
from holidaycalc.engine import HolidayReport, ResolvedHoliday


def format_date(value: date, date_format: str | None = None) -> str:
    if date_format is None:
        date_format = Settings().date_format
    return value.strftime(date_format)


def format_holiday(holiday: ResolvedHoliday, date_format: str | None = None) -> str:
    return f"{holiday.name} - {format_date(holiday.date, date_format)}"


def format_report(report: HolidayReport, date_format: str | None = None) -> str:
    lines = [
        "Here are holidays for the 12 months following "
        f"{format_date(report.start_date, date_format)}:",
        "",
    ]
    lines.extend(format_holiday(holiday, date_format) for holiday in report.holidays)
    return "\n".join(lines)


def holiday_rows(report: HolidayReport) -> list[dict[str, object]]:
    return [
        {
            "name": holiday.name,
            "date": holiday.date,
            "weekday": holiday.date.strftime("%A"),
            "days_from_start": (holiday.date - report.start_date).days,
        }
        for holiday in report.holidays
    ]


def failure_rows(report: HolidayReport) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = [
        {"name": failure.rule_name, "status": failure.status.value, "message": failure.error}
        for failure in report.failures
    ]
    rows.extend(
        {"name": name, "status": "no_date", "message": "No date in this window"}
        for name in report.skipped
    )
    return rows
