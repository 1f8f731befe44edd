import unittest
from datetime import date

from holidaycalc import calendar_utils


class CalendarUtilsTests(unittest.TestCase):
    def test_days_in_month(self) -> None:
        self.assertEqual(calendar_utils.days_in_month(2024, 2), 29)
        self.assertEqual(calendar_utils.days_in_month(2023, 2), 28)
        self.assertEqual(calendar_utils.days_in_month(2024, 4), 30)
        self.assertEqual(calendar_utils.days_in_month(2024, 12), 31)

    def test_add_days_crosses_year_end(self) -> None:
        self.assertEqual(calendar_utils.add_days(date(2024, 12, 31), 1), date(2025, 1, 1))
        self.assertEqual(calendar_utils.add_days(date(2024, 3, 1), -1), date(2024, 2, 29))

    def test_add_months_clamps_to_month_end(self) -> None:
        self.assertEqual(calendar_utils.add_months(date(2024, 1, 31), 1), date(2024, 2, 29))
        self.assertEqual(calendar_utils.add_months(date(2023, 1, 31), 1), date(2023, 2, 28))
        self.assertEqual(calendar_utils.add_months(date(2024, 3, 31), -1), date(2024, 2, 29))

    def test_add_months_rolls_over_year(self) -> None:
        self.assertEqual(calendar_utils.add_months(date(2024, 12, 15), 1), date(2025, 1, 15))
        self.assertEqual(calendar_utils.add_months(date(2024, 11, 1), 14), date(2026, 1, 1))

    def test_add_years_leap_day(self) -> None:
        self.assertEqual(calendar_utils.add_years(date(2024, 2, 29), 1), date(2025, 2, 28))
        self.assertEqual(calendar_utils.add_years(date(2024, 2, 29), 4), date(2028, 2, 29))
        self.assertEqual(calendar_utils.add_years(date(2024, 7, 4), 1), date(2025, 7, 4))

    def test_day_of_week_starts_on_sunday(self) -> None:
        self.assertEqual(calendar_utils.day_of_week(date(2024, 1, 7)), calendar_utils.SUNDAY)
        self.assertEqual(calendar_utils.day_of_week(date(2024, 1, 1)), calendar_utils.MONDAY)
        self.assertEqual(calendar_utils.day_of_week(date(2024, 1, 6)), calendar_utils.SATURDAY)

    def test_first_day_of_month(self) -> None:
        self.assertEqual(calendar_utils.first_day_of_month(date(2024, 5, 17)), date(2024, 5, 1))

    def test_weekend(self) -> None:
        self.assertTrue(calendar_utils.is_weekend(date(2026, 1, 3)))  # Saturday
        self.assertTrue(calendar_utils.is_weekend(date(2026, 1, 4)))  # Sunday
        self.assertFalse(calendar_utils.is_weekend(date(2026, 1, 5)))  # Monday

    def test_anniversary_rejects_missing_day(self) -> None:
        self.assertEqual(calendar_utils.anniversary(2024, 2, 29), date(2024, 2, 29))
        with self.assertRaises(ValueError):
            calendar_utils.anniversary(2023, 2, 29)
        with self.assertRaises(ValueError):
            calendar_utils.anniversary(2024, 4, 31)


if __name__ == "__main__":
    unittest.main()
