import tempfile
import unittest
from datetime import date
from pathlib import Path

import pandas as pd

from holidaycalc import engine, report
from holidaycalc.domain import DaysAfterHolidayRule, FixedDateRule
from holidaycalc.export_excel import export_holidays_excel


def _report() -> engine.HolidayReport:
    rules = [
        FixedDateRule(name="Christmas Day", month=12, day=25),
        FixedDateRule(name="Independence Day", month=7, day=4),
        DaysAfterHolidayRule(name="Orphan", holiday="Missing", days=1),
    ]
    return engine.resolve_all(rules, date(2024, 1, 1))


class FormatTests(unittest.TestCase):
    def test_format_holiday(self) -> None:
        holiday = engine.ResolvedHoliday(name="Christmas Day", date=date(2024, 12, 25))
        self.assertEqual(
            report.format_holiday(holiday), "Christmas Day - Wednesday, December 25, 2024"
        )
        self.assertEqual(report.format_holiday(holiday, "%Y-%m-%d"), "Christmas Day - 2024-12-25")

    def test_format_report(self) -> None:
        lines = report.format_report(_report()).splitlines()
        self.assertEqual(
            lines[0], "Here are holidays for the 12 months following Monday, January 01, 2024:"
        )
        self.assertEqual(lines[2], "Independence Day - Thursday, July 04, 2024")
        self.assertEqual(lines[3], "Christmas Day - Wednesday, December 25, 2024")

    def test_rows(self) -> None:
        result = _report()
        rows = report.holiday_rows(result)
        self.assertEqual(rows[0]["name"], "Independence Day")
        self.assertEqual(rows[0]["weekday"], "Thursday")
        self.assertEqual(rows[0]["days_from_start"], 185)
        problems = report.failure_rows(result)
        self.assertEqual(len(problems), 1)
        self.assertEqual(problems[0]["name"], "Orphan")
        self.assertEqual(problems[0]["status"], "failed")


class ExportExcelTests(unittest.TestCase):
    def test_export_sheets(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "holidays.xlsx"
            export_holidays_excel(path, _report())
            sheets = pd.read_excel(path, sheet_name=None)
        self.assertEqual(set(sheets), {"holidays", "problems"})
        self.assertEqual(list(sheets["holidays"]["name"]), ["Independence Day", "Christmas Day"])
        self.assertEqual(list(sheets["problems"]["name"]), ["Orphan"])

    def test_export_without_problems(self) -> None:
        result = engine.resolve_all(
            [FixedDateRule(name="Christmas Day", month=12, day=25)], date(2024, 1, 1)
        )
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "holidays.xlsx"
            export_holidays_excel(path, result)
            problems = pd.read_excel(path, sheet_name="problems")
        self.assertEqual(list(problems["status"]), ["ok"])


if __name__ == "__main__":
    unittest.main()
