# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import datetime as dt
import warnings
from collections.abc import Iterator
from dataclasses import dataclass

import numpy as np

from emi_engine import scheduled_payments as emi_math
from emi_engine.dates import payment_date
from emi_engine.loans import LoanRecord, tenure_from_years
from emi_engine.logging import get_logger
from emi_engine.validation import validate_principal, validate_rate, validate_tenure

logger = get_logger(__name__)

# Final-row drift above this fraction of principal is reported before clamping
DRIFT_WARNING_FRACTION = 1e-6


# =============================================================================
# Amortization Schedule Containers
# =============================================================================

@dataclass(frozen=True)
class ScheduleRow:
    """One installment of an amortization table. period is 1-indexed."""
    period: int
    payment_date: dt.date
    beginning_balance: float
    payment: float
    principal_portion: float
    interest_portion: float
    ending_balance: float
    cumulative_paid: float


@dataclass(eq=False)
class AmortizationSchedule:
    """
    Period-by-period amortization table for one loan.

    Columns are stored as parallel arrays of length tenure_months, index i
    holding period i + 1:

    - period: 1..n
    - payment_date: due date of each period
    - beginning_balance: balance before the payment
    - payment: installment (constant, except the last amortizing row may
      differ from the EMI by the rounding it absorbs)
    - principal_portion: payment - interest_portion (0 for interest-only)
    - interest_portion: beginning_balance × monthly rate
    - ending_balance: beginning_balance - principal_portion; exactly 0 on the
      last amortizing row
    - cumulative_paid: running total of payment

    Values keep full precision; round at display time.
    """
    loan_id: str
    is_interest_only: bool
    principal: float
    period: np.ndarray
    payment_date: tuple[dt.date, ...]
    beginning_balance: np.ndarray
    payment: np.ndarray
    principal_portion: np.ndarray
    interest_portion: np.ndarray
    ending_balance: np.ndarray
    cumulative_paid: np.ndarray

    def __len__(self) -> int:
        return len(self.period)

    def __getitem__(self, index: int) -> ScheduleRow:
        return ScheduleRow(
            period=int(self.period[index]),
            payment_date=self.payment_date[index],
            beginning_balance=float(self.beginning_balance[index]),
            payment=float(self.payment[index]),
            principal_portion=float(self.principal_portion[index]),
            interest_portion=float(self.interest_portion[index]),
            ending_balance=float(self.ending_balance[index]),
            cumulative_paid=float(self.cumulative_paid[index]),
        )

    def __iter__(self) -> Iterator[ScheduleRow]:
        return self.rows()

    def rows(self) -> Iterator[ScheduleRow]:
        for i in range(len(self)):
            yield self[i]

    @property
    def total_payment(self) -> float:
        return float(self.payment.sum())

    @property
    def total_interest(self) -> float:
        return float(self.interest_portion.sum())

    @property
    def total_principal(self) -> float:
        return float(self.principal_portion.sum())

    def next_row(self, as_of: dt.date) -> ScheduleRow | None:
        """First row due on or after ``as_of``; None once every row is past due."""
        for i, due in enumerate(self.payment_date):
            if due >= as_of:
                return self[i]
        return None

    def to_records(self) -> list[dict[str, object]]:
        """Rows as plain dicts for the presentation layer."""
        return [
            {
                "period": row.period,
                "payment_date": row.payment_date.isoformat(),
                "beginning_balance": row.beginning_balance,
                "payment": row.payment,
                "principal_portion": row.principal_portion,
                "interest_portion": row.interest_portion,
                "ending_balance": row.ending_balance,
                "cumulative_paid": row.cumulative_paid,
            }
            for row in self.rows()
        ]


@dataclass(frozen=True)
class LoanQuote:
    """Headline figures for the loan calculator."""
    tenure_months: int
    monthly_payment: float
    total_interest: float
    total_payment: float


# =============================================================================
# Schedule Runners
# =============================================================================

def run_amortizing_schedule(
    principal: float,
    annual_rate_percent: float,
    tenure_months: int,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Roll a level-payment loan forward one period at a time.

    For period k (1-indexed), starting from BAL(0) = P:

        INTEREST(k)  = BAL(k-1) × r
        PRINCIPAL(k) = EMI - INTEREST(k)
        BAL(k)       = BAL(k-1) - PRINCIPAL(k)

    The recursion reproduces the closed-form balance_at_payment up to
    floating-point rounding. BAL(n) is set to exactly 0.0 to absorb that
    rounding, and the last row's principal is set to BAL(n-1) with the
    payment adjusted to match, so every row satisfies
    beginning - principal == ending. Drift larger than
    DRIFT_WARNING_FRACTION of principal is reported with a warning first.

    Args:
        principal: Amount borrowed
        annual_rate_percent: Annual rate as percentage (e.g. 12.5 for 12.5%)
        tenure_months: Number of installments

    Returns:
        Tuple of (beginning_balance, payment, principal_portion,
        interest_portion, ending_balance), each of length tenure_months
    """
    n = tenure_months
    r = annual_rate_percent / 1200.0
    emi = emi_math.emi_payment(principal, annual_rate_percent, n)

    beginning_balance = np.zeros(n)
    payment = np.full(n, emi)
    principal_portion = np.zeros(n)
    interest_portion = np.zeros(n)
    ending_balance = np.zeros(n)

    balance = float(principal)
    for i in range(n):
        beginning_balance[i] = balance
        interest_portion[i] = balance * r
        principal_portion[i] = emi - interest_portion[i]
        balance = balance - principal_portion[i]
        ending_balance[i] = balance

    drift = ending_balance[-1]
    if abs(drift) > DRIFT_WARNING_FRACTION * principal:
        warnings.warn(
            f"final balance drift {drift:.6g} on principal {principal:.2f} clamped to zero",
            RuntimeWarning,
        )
    ending_balance[-1] = 0.0
    # last row retires whatever balance is left
    principal_portion[-1] = beginning_balance[-1]
    payment[-1] = principal_portion[-1] + interest_portion[-1]

    return beginning_balance, payment, principal_portion, interest_portion, ending_balance


def run_interest_only_schedule(
    principal: float,
    annual_rate_percent: float,
    tenure_months: int,
) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """
    Interest-only table over a finite horizon of tenure_months periods.

    Every row pays interest on the full principal; principal_portion is 0 and
    the balance stays at the principal, which is settled outside the schedule.
    Same return layout as run_amortizing_schedule.
    """
    n = tenure_months
    interest = emi_math.interest_only_payment(principal, annual_rate_percent)
    balance = np.full(n, float(principal))
    return (
        balance.copy(),
        np.full(n, interest),
        np.zeros(n),
        np.full(n, interest),
        balance,
    )


def generate_schedule(record: LoanRecord) -> AmortizationSchedule:
    """
    Full amortization table for a loan record.

    The table depends only on the record, so it can be regenerated at any time
    and always yields the same rows. Length is record.tenure_months for both
    payment models.
    """
    n = record.tenure_months
    runner = run_interest_only_schedule if record.is_interest_only else run_amortizing_schedule
    beginning, payment, principal_part, interest_part, ending = runner(
        record.principal, record.annual_rate_percent, n
    )
    logger.debug(
        "Generated %d-period %s schedule for loan %s",
        n, "interest-only" if record.is_interest_only else "amortizing", record.id,
        extra={"loan_id": record.id},
    )
    return AmortizationSchedule(
        loan_id=record.id,
        is_interest_only=record.is_interest_only,
        principal=record.principal,
        period=np.arange(1, n + 1),
        payment_date=tuple(payment_date(record.emi_start_date, k) for k in range(1, n + 1)),
        beginning_balance=beginning,
        payment=payment,
        principal_portion=principal_part,
        interest_portion=interest_part,
        ending_balance=ending,
        cumulative_paid=np.cumsum(payment),
    )


def quote(
    principal: float,
    annual_rate_percent: float,
    tenure_months: int | None = None,
    tenure_years: float | None = None,
    is_interest_only: bool = False,
) -> LoanQuote:
    """
    Loan calculator: monthly payment, total interest and total payable.

    Inputs are validated like a loan record (principal and rate limits, a
    positive whole-month tenure) but no record is created. Give either
    tenure_months or tenure_years.

    Raises:
        InvalidPrincipal, InvalidRate, InvalidTenure: On bad input
    """
    if tenure_months is None and tenure_years is not None:
        tenure_months = tenure_from_years(tenure_years)
    principal = validate_principal(principal)
    annual_rate_percent = validate_rate(annual_rate_percent)
    tenure_months = validate_tenure(tenure_months)

    payment = emi_math.monthly_payment(principal, annual_rate_percent, tenure_months, is_interest_only)
    interest = emi_math.total_interest(principal, annual_rate_percent, tenure_months, is_interest_only)
    total = interest + principal
    return LoanQuote(
        tenure_months=tenure_months,
        monthly_payment=payment,
        total_interest=interest,
        total_payment=total,
    )
