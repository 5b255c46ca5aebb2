# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
"""
Loan state projection.

Derives a loan's live state from its origination parameters and a
caller-supplied as-of date. Nothing is cached and the clock is never read, so
project(record, as_of) returns equal results every time it is called with the
same arguments.

Steps (for a record with start date S, tenure n, principal P):
    1. k        = payments_elapsed(S, as_of, n)
    2. balance  = P                                 (interest-only)
                = balance_at_payment(P, C, n, k)     (amortizing)
    3. next due = next_payment_date(S, n, as_of)
    4. term     = remaining_term_months(n, k)
    5. % paid   = round((P - balance) / P × 100)
    6. days     = days_between(as_of, next due)
"""

from __future__ import annotations

import datetime as dt
import math
from collections.abc import Iterable
from dataclasses import dataclass

from emi_engine import scheduled_payments as emi_math
from emi_engine.dates import days_between
from emi_engine.loans import LoanRecord
from emi_engine.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class LoanState:
    """Observable state of a loan on a given as-of date."""
    as_of: dt.date
    payments_made: int
    current_balance: float
    principal_paid: float
    monthly_payment: float
    next_payment_date: dt.date
    remaining_term_months: int
    percent_paid: int
    days_until_next_payment: int
    is_matured: bool

    @property
    def due_label(self) -> str:
        return due_label(self.days_until_next_payment)


@dataclass(frozen=True)
class PortfolioSummary:
    """Totals across all of an owner's loans on one as-of date."""
    as_of: dt.date
    loan_count: int
    total_principal: float
    total_outstanding: float
    total_principal_paid: float
    total_monthly_payment: float
    percent_paid: int
    next_due: tuple[str, dt.date] | None


def percent_of(part: float, whole: float) -> int:
    """Whole-number percentage, rounding halves up."""
    if whole <= 0:
        return 0
    return int(math.floor(part / whole * 100.0 + 0.5))


def due_label(days_until_due: int) -> str:
    """
    Short due-date caption for cards and alerts.

        days <= 0  -> "Due today"
        days == 1  -> "Due tomorrow"
        days > 1   -> "Due in N days"
    """
    if days_until_due <= 0:
        return "Due today"
    if days_until_due == 1:
        return "Due tomorrow"
    return f"Due in {days_until_due} days"


def project(record: LoanRecord, as_of: dt.date) -> LoanState:
    """
    Project a loan's current state as of ``as_of``.

    Interest-only loans keep their full principal outstanding (and so report
    0% paid) for the whole tenure; their next due date and remaining term
    still advance month by month.

    Args:
        record: Validated loan parameters
        as_of: The caller's "today"; a datetime is reduced to its date

    Returns:
        LoanState for that date
    """
    if isinstance(as_of, dt.datetime):
        as_of = as_of.date()
    principal = record.principal
    tenure = record.tenure_months

    payments_made = emi_math.payments_elapsed(record.emi_start_date, as_of, tenure)
    if record.is_interest_only:
        current_balance = principal
    else:
        current_balance = emi_math.balance_at_payment(
            principal, record.annual_rate_percent, tenure, payments_made
        )
    next_date = emi_math.next_payment_date(record.emi_start_date, tenure, as_of)
    principal_paid = principal - current_balance

    state = LoanState(
        as_of=as_of,
        payments_made=payments_made,
        current_balance=current_balance,
        principal_paid=principal_paid,
        monthly_payment=emi_math.monthly_payment(
            principal, record.annual_rate_percent, tenure, record.is_interest_only
        ),
        next_payment_date=next_date,
        remaining_term_months=emi_math.remaining_term_months(tenure, payments_made),
        percent_paid=percent_of(principal_paid, principal),
        days_until_next_payment=days_between(as_of, next_date),
        is_matured=payments_made >= tenure,
    )
    logger.debug(
        "Projected loan %s as of %s: paid=%d balance=%.2f next=%s",
        record.id, as_of, payments_made, current_balance, next_date,
        extra={"loan_id": record.id},
    )
    return state


def summarize_portfolio(records: Iterable[LoanRecord], as_of: dt.date) -> PortfolioSummary:
    """
    Aggregate projections for a loans dashboard.

    Percent paid is weighted by principal (total paid over total borrowed).
    next_due is the (record id, date) of the earliest upcoming payment among
    loans that have not matured, or None when every loan is matured.
    """
    if isinstance(as_of, dt.datetime):
        as_of = as_of.date()
    loan_count = 0
    total_principal = 0.0
    total_outstanding = 0.0
    total_monthly = 0.0
    next_due: tuple[str, dt.date] | None = None

    for record in records:
        state = project(record, as_of)
        loan_count += 1
        total_principal += record.principal
        total_outstanding += state.current_balance
        if state.is_matured:
            continue
        total_monthly += state.monthly_payment
        if next_due is None or state.next_payment_date < next_due[1]:
            next_due = (record.id, state.next_payment_date)

    total_paid = total_principal - total_outstanding
    return PortfolioSummary(
        as_of=as_of,
        loan_count=loan_count,
        total_principal=total_principal,
        total_outstanding=total_outstanding,
        total_principal_paid=total_paid,
        total_monthly_payment=total_monthly,
        percent_paid=percent_of(total_paid, total_principal),
        next_due=next_due,
    )
