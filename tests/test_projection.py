"""
Unit tests for loan state projection (emi_engine.projection).

Version: 0.2.0
Last Updated: 2026-10-17
Status: Active

================================================================================
TEST APPROACH:
================================================================================
Reference loans from tests.utilities are projected across a set of as-of
dates around their payment schedule. Expected values are derived by hand from
the balance formula (100,000 at 1% a month over 12 months: EMI 8,884.88,
balance after the first EMI 92,115.12).
================================================================================
"""

import datetime as dt
import unittest

from emi_engine.projection import (
    LoanState,
    due_label,
    percent_of,
    project,
    summarize_portfolio,
)
from emi_engine.scheduled_payments import balance_at_payment
from tests.utilities import amortizing_loan, generate_random_loans, gold_loan


class TestHelpers(unittest.TestCase):

    def test_due_label(self):
        self.assertEqual(due_label(-3), "Due today")
        self.assertEqual(due_label(0), "Due today")
        self.assertEqual(due_label(1), "Due tomorrow")
        self.assertEqual(due_label(5), "Due in 5 days")

    def test_percent_of_rounds_half_up(self):
        self.assertEqual(percent_of(7_884.88, 100_000), 8)
        self.assertEqual(percent_of(2.5, 100), 3)
        self.assertEqual(percent_of(2.49, 100), 2)
        self.assertEqual(percent_of(100, 100), 100)
        self.assertEqual(percent_of(10, 0), 0)


class TestProjectAmortizing(unittest.TestCase):

    def setUp(self):
        self.record = amortizing_loan()

    def test_before_first_payment(self):
        state = project(self.record, dt.date(2024, 1, 10))
        self.assertEqual(state.payments_made, 0)
        self.assertEqual(state.current_balance, 100_000.0)
        self.assertEqual(state.principal_paid, 0.0)
        self.assertEqual(state.next_payment_date, dt.date(2024, 1, 15))
        self.assertEqual(state.remaining_term_months, 12)
        self.assertEqual(state.percent_paid, 0)
        self.assertEqual(state.days_until_next_payment, 5)
        self.assertEqual(state.due_label, "Due in 5 days")
        self.assertFalse(state.is_matured)

    def test_day_before_first_payment(self):
        state = project(self.record, dt.date(2024, 1, 14))
        self.assertEqual(state.due_label, "Due tomorrow")

    def test_on_first_payment_date(self):
        state = project(self.record, dt.date(2024, 1, 15))
        self.assertEqual(state.payments_made, 1)
        self.assertAlmostEqual(state.current_balance, 92_115.12, delta=0.01)
        self.assertAlmostEqual(state.monthly_payment, 8_884.88, delta=0.01)
        self.assertEqual(state.next_payment_date, dt.date(2024, 1, 15))
        self.assertEqual(state.days_until_next_payment, 0)
        self.assertEqual(state.due_label, "Due today")
        self.assertEqual(state.remaining_term_months, 11)
        self.assertEqual(state.percent_paid, 8)

    def test_mid_tenure(self):
        state = project(self.record, dt.date(2024, 6, 20))
        self.assertEqual(state.payments_made, 6)
        self.assertEqual(state.current_balance, balance_at_payment(100_000, 12.0, 12, 6))
        self.assertEqual(state.next_payment_date, dt.date(2024, 7, 15))
        self.assertEqual(state.days_until_next_payment, 25)
        self.assertEqual(state.remaining_term_months, 6)

    def test_matured(self):
        state = project(self.record, dt.date(2025, 6, 1))
        self.assertEqual(state.payments_made, 12)
        self.assertEqual(state.current_balance, 0.0)
        self.assertEqual(state.remaining_term_months, 0)
        self.assertEqual(state.percent_paid, 100)
        self.assertEqual(state.next_payment_date, dt.date(2024, 12, 15))
        self.assertTrue(state.is_matured)

    def test_zero_rate(self):
        record = amortizing_loan(principal=120_000, annual_rate_percent=0.0,
                                 emi_start_date=dt.date(2024, 1, 1))
        state = project(record, dt.date(2024, 3, 31))
        self.assertEqual(state.payments_made, 3)
        self.assertEqual(state.current_balance, 90_000.0)
        self.assertEqual(state.monthly_payment, 10_000.0)
        self.assertEqual(state.percent_paid, 25)

    def test_datetime_as_of(self):
        self.assertEqual(
            project(self.record, dt.datetime(2024, 6, 20, 23, 59)),
            project(self.record, dt.date(2024, 6, 20)),
        )

    def test_logs_loan_id(self):
        with self.assertLogs("emi_engine.projection", level="DEBUG") as logs:
            project(self.record, dt.date(2024, 6, 20))
        self.assertEqual(logs.records[0].loan_id, self.record.id)

    def test_repeatable(self):
        as_of = dt.date(2024, 9, 1)
        first = project(self.record, as_of)
        self.assertIsInstance(first, LoanState)
        self.assertEqual(first, project(self.record, as_of))

    def test_edit_changes_projection_only_for_new_record(self):
        as_of = dt.date(2024, 6, 20)
        before = project(self.record, as_of)
        edited = self.record.replace(principal=200_000)
        self.assertAlmostEqual(project(edited, as_of).current_balance,
                               2 * before.current_balance, places=6)
        self.assertEqual(project(self.record, as_of), before)

    def test_balance_never_increases_over_time(self):
        for record in generate_random_loans(25):
            with self.subTest(loan=record.id):
                previous = record.principal
                for months in range(0, record.tenure_months + 3, 3):
                    as_of = record.emi_start_date + dt.timedelta(days=30 * months)
                    state = project(record, as_of)
                    self.assertLessEqual(state.current_balance, previous)
                    self.assertGreaterEqual(state.current_balance, 0.0)
                    self.assertGreaterEqual(state.percent_paid, 0)
                    self.assertLessEqual(state.percent_paid, 100)
                    previous = state.current_balance


class TestProjectInterestOnly(unittest.TestCase):

    def test_balance_constant(self):
        record = gold_loan()
        for offset in (-10, 0, 45, 200, 1000):
            as_of = record.emi_start_date + dt.timedelta(days=offset)
            with self.subTest(as_of=as_of):
                state = project(record, as_of)
                self.assertEqual(state.current_balance, 100_000.0)
                self.assertEqual(state.principal_paid, 0.0)
                self.assertEqual(state.percent_paid, 0)
                self.assertEqual(state.monthly_payment, 2000.0)

    def test_schedule_still_advances(self):
        state = project(gold_loan(), dt.date(2024, 3, 20))
        self.assertEqual(state.payments_made, 3)
        self.assertEqual(state.remaining_term_months, 9)
        self.assertEqual(state.next_payment_date, dt.date(2024, 4, 15))


class TestSummarizePortfolio(unittest.TestCase):

    def test_totals(self):
        home, gold = amortizing_loan(), gold_loan(emi_start_date=dt.date(2024, 1, 20))
        summary = summarize_portfolio([home, gold], dt.date(2024, 1, 15))
        self.assertEqual(summary.loan_count, 2)
        self.assertEqual(summary.total_principal, 200_000.0)
        self.assertAlmostEqual(summary.total_outstanding, 192_115.12, delta=0.01)
        self.assertAlmostEqual(summary.total_principal_paid, 7_884.88, delta=0.01)
        self.assertAlmostEqual(summary.total_monthly_payment, 10_884.88, delta=0.01)
        self.assertEqual(summary.percent_paid, 4)
        self.assertEqual(summary.next_due, (home.id, dt.date(2024, 1, 15)))

    def test_matured_loans_excluded_from_dues(self):
        old = amortizing_loan(id="old", emi_start_date=dt.date(2020, 1, 1))
        gold = gold_loan()
        summary = summarize_portfolio([old, gold], dt.date(2024, 2, 1))
        self.assertEqual(summary.total_monthly_payment, 2000.0)
        self.assertEqual(summary.next_due, (gold.id, dt.date(2024, 2, 15)))
        self.assertEqual(summary.total_outstanding, 100_000.0)

    def test_empty(self):
        summary = summarize_portfolio([], dt.date(2024, 1, 1))
        self.assertEqual(summary.loan_count, 0)
        self.assertEqual(summary.total_principal, 0.0)
        self.assertEqual(summary.percent_paid, 0)
        self.assertIsNone(summary.next_due)


if __name__ == "__main__":
    unittest.main()
