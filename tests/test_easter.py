import unittest
from datetime import date

from holidaycalc import easter


class EasterSundayTests(unittest.TestCase):
    def test_known_dates(self) -> None:
        known = {
            1818: date(1818, 3, 22),  # earliest possible
            2000: date(2000, 4, 23),
            2008: date(2008, 3, 23),
            2019: date(2019, 4, 21),
            2024: date(2024, 3, 31),
            2025: date(2025, 4, 20),
            2026: date(2026, 4, 5),
            2027: date(2027, 3, 28),
            2038: date(2038, 4, 25),  # latest possible
        }
        for year, expected in known.items():
            with self.subTest(year=year):
                self.assertEqual(easter.easter_sunday(year), expected)

    def test_always_a_sunday_in_march_or_april(self) -> None:
        for year in range(1900, 2100):
            result = easter.easter_sunday(year)
            self.assertEqual(result.weekday(), 6)
            self.assertIn(result.month, (3, 4))


class NextEasterTests(unittest.TestCase):
    def test_start_of_year(self) -> None:
        self.assertEqual(easter.next_easter_on_or_after(date(2024, 1, 1)), date(2024, 3, 31))

    def test_start_on_easter_is_included(self) -> None:
        self.assertEqual(easter.next_easter_on_or_after(date(2024, 3, 31)), date(2024, 3, 31))

    def test_start_just_after_easter_in_april(self) -> None:
        self.assertEqual(easter.next_easter_on_or_after(date(2024, 4, 1)), date(2025, 4, 20))

    def test_start_after_april_uses_next_year(self) -> None:
        self.assertEqual(easter.next_easter_on_or_after(date(2024, 5, 10)), date(2025, 4, 20))
        self.assertEqual(easter.next_easter_on_or_after(date(2024, 12, 31)), date(2025, 4, 20))


if __name__ == "__main__":
    unittest.main()
