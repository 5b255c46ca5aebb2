"""
Unit tests for calendar arithmetic (emi_engine.dates).

Month stepping must clamp the day to shorter months without carrying the
clamped day forward, and whole-month counting must follow the calendar, not
a fixed day count.

Version: 0.2.0
Last Updated: 2026-10-17
Status: Active
"""

import datetime as dt
import unittest

from emi_engine.dates import (
    add_months,
    coerce_date,
    days_between,
    payment_date,
    whole_months_between,
)
from emi_engine.exceptions import InvalidDate, LoanValidationError


class TestAddMonths(unittest.TestCase):

    def test_plain_step(self):
        self.assertEqual(add_months(dt.date(2024, 1, 15), 1), dt.date(2024, 2, 15))
        self.assertEqual(add_months(dt.date(2024, 11, 15), 3), dt.date(2025, 2, 15))

    def test_month_end_clamps_to_shorter_month(self):
        self.assertEqual(add_months(dt.date(2024, 1, 31), 1), dt.date(2024, 2, 29))
        self.assertEqual(add_months(dt.date(2023, 1, 31), 1), dt.date(2023, 2, 28))
        self.assertEqual(add_months(dt.date(2024, 3, 31), 1), dt.date(2024, 4, 30))

    def test_negative_months(self):
        self.assertEqual(add_months(dt.date(2024, 3, 31), -1), dt.date(2024, 2, 29))


class TestPaymentDate(unittest.TestCase):

    def test_first_period_is_start_date(self):
        start = dt.date(2024, 1, 15)
        self.assertEqual(payment_date(start, 1), start)

    def test_day_of_month_recovers_after_february(self):
        """Dates are offset from the start, so the 31st comes back after Feb."""
        start = dt.date(2024, 1, 31)
        expected = [
            dt.date(2024, 1, 31),
            dt.date(2024, 2, 29),
            dt.date(2024, 3, 31),
            dt.date(2024, 4, 30),
            dt.date(2024, 5, 31),
        ]
        self.assertEqual([payment_date(start, k) for k in range(1, 6)], expected)

    def test_period_zero_is_a_programming_error(self):
        with self.assertRaises(AssertionError):
            payment_date(dt.date(2024, 1, 15), 0)


class TestWholeMonthsBetween(unittest.TestCase):

    def test_counts(self):
        start = dt.date(2024, 1, 15)
        cases = [
            (dt.date(2024, 1, 15), 0),
            (dt.date(2024, 2, 14), 0),
            (dt.date(2024, 2, 15), 1),
            (dt.date(2024, 3, 14), 1),
            (dt.date(2025, 1, 15), 12),
            (dt.date(2024, 1, 10), -1),
        ]
        for end, expected in cases:
            with self.subTest(end=end):
                self.assertEqual(whole_months_between(start, end), expected)

    def test_monotone_over_daily_sweep(self):
        for start in (dt.date(2024, 1, 1), dt.date(2024, 1, 15), dt.date(2024, 1, 31)):
            previous = None
            for offset in range(0, 800):
                end = start + dt.timedelta(days=offset)
                months = whole_months_between(start, end)
                with self.subTest(start=start, end=end):
                    if previous is not None:
                        self.assertGreaterEqual(months, previous)
                previous = months


class TestDaysBetween(unittest.TestCase):

    def test_signed(self):
        self.assertEqual(days_between(dt.date(2024, 1, 10), dt.date(2024, 1, 15)), 5)
        self.assertEqual(days_between(dt.date(2024, 1, 15), dt.date(2024, 1, 10)), -5)
        self.assertEqual(days_between(dt.date(2024, 2, 28), dt.date(2024, 3, 1)), 2)


class TestCoerceDate(unittest.TestCase):

    def test_accepts_date_datetime_and_iso_string(self):
        self.assertEqual(coerce_date(dt.date(2024, 1, 15)), dt.date(2024, 1, 15))
        self.assertEqual(coerce_date(dt.datetime(2024, 1, 15, 9, 30)), dt.date(2024, 1, 15))
        self.assertEqual(coerce_date("2024-01-15"), dt.date(2024, 1, 15))
        self.assertEqual(coerce_date("2024-01-15T00:00:00.000Z"), dt.date(2024, 1, 15))

    def test_rejects_impossible_dates(self):
        for value in ("2024-02-30", "2023-13-01", "not a date", "",
                      "2024-01-15garbage", "2024-01-15T99:99:99", "2024-01-15 extra"):
            with self.subTest(value=value):
                with self.assertRaises(InvalidDate):
                    coerce_date(value)

    def test_rejects_non_dates(self):
        for value in (20240115, 1.5, None):
            with self.subTest(value=value):
                with self.assertRaises(InvalidDate) as ctx:
                    coerce_date(value)
                self.assertIsInstance(ctx.exception, LoanValidationError)
                self.assertEqual(ctx.exception.field, "emi_start_date")


if __name__ == "__main__":
    unittest.main()
