# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import datetime as dt

import numpy as np
from scipy.optimize import brentq

from emi_engine.config import MAX_INTEREST_RATE
from emi_engine.dates import add_months, payment_date, whole_months_between

__version__ = "0.2.0"


# =============================================================================
# Amortization Math Library
# =============================================================================
#
# Pure functions over pre-validated loan parameters. Nothing here reads the
# clock, touches storage, or raises validation errors: a LoanRecord that made
# it through emi_engine.validation can never trip the asserts below, so an
# AssertionError from this module is a caller defect.
#
# NOTATION:
#   P = principal
#   C = annual rate as percentage (e.g. 12.5 for 12.5%)
#   r = monthly rate = C / 1200
#   n = tenure in months
#   k = payments made (0 at origination, n at maturity)
# =============================================================================

def emi_payment(
        principal: float,
        annual_rate_percent: float,
        tenure_months: int
) -> float:
    """
    Equated monthly installment that amortizes ``principal`` to zero in
    ``tenure_months`` level payments.

    Formula:
        EMI = P × r × (1 + r)^n / [(1 + r)^n - 1]

    Where:
        r = C / 1200 (monthly rate)
        n = tenure in months

    This is the same annuity factor AF(n) = r / [1 - (1 + r)^-n] applied to P;
    multiplying numerator and denominator by (1 + r)^n gives the form above.

    Zero rate degenerates to straight-line repayment: EMI = P / n.

    Args:
        principal: Amount borrowed
        annual_rate_percent: Annual rate as percentage (e.g. 12.5 for 12.5%)
        tenure_months: Number of monthly installments (n > 0)

    Returns:
        Monthly installment, full precision (rounding is the caller's job)

    Example:
        >>> emi_payment(120000, 0.0, 12)
        10000.0
    """
    assert tenure_months > 0, f"tenure_months must be positive, got {tenure_months}"
    r = annual_rate_percent / 1200.0
    n = tenure_months
    if r == 0.0:
        return principal / n
    growth = (1.0 + r) ** n
    return principal * r * growth / (growth - 1.0)


def interest_only_payment(principal: float, annual_rate_percent: float) -> float:
    """Monthly interest on an unchanging principal: P × C / 1200."""
    return principal * (annual_rate_percent / 1200.0)


def monthly_payment(
        principal: float,
        annual_rate_percent: float,
        tenure_months: int,
        is_interest_only: bool = False
) -> float:
    """Installment for either payment model."""
    if is_interest_only:
        return interest_only_payment(principal, annual_rate_percent)
    return emi_payment(principal, annual_rate_percent, tenure_months)


def payments_elapsed(
        start_date: dt.date,
        as_of_date: dt.date,
        tenure_months: int | None = None
) -> int:
    """
    Number of EMIs that have fallen due on or before ``as_of_date``.

    The first EMI is due on ``start_date`` itself, so a loan observed on its
    start date has one payment made:

        months_elapsed = whole months from start_date to as_of_date (>= 0)
        payments_made  = months_elapsed + 1   if as_of_date >= start_date
                       = 0                    otherwise

    and the result is clamped to [0, tenure_months]. Whole months are counted
    on the calendar (see emi_engine.dates.whole_months_between), never as
    ``days / 30``.

    Args:
        start_date: EMI start date (due date of the first installment)
        as_of_date: Caller-supplied "today"
        tenure_months: Upper clamp; None leaves the count unbounded

    Returns:
        Payments made, an integer in [0, tenure_months]

    Example:
        >>> payments_elapsed(dt.date(2024, 1, 15), dt.date(2024, 1, 10), 12)
        0
        >>> payments_elapsed(dt.date(2024, 1, 15), dt.date(2024, 3, 15), 12)
        3
    """
    if as_of_date < start_date:
        return 0
    months_elapsed = max(0, whole_months_between(start_date, as_of_date))
    payments_made = months_elapsed + 1
    if tenure_months is not None:
        payments_made = min(payments_made, tenure_months)
    return payments_made


def balance_at_payment(
        principal: float,
        annual_rate_percent: float,
        tenure_months: int,
        payments_made: int
) -> float:
    """
    Outstanding principal of an amortizing loan after ``payments_made`` EMIs.

    Closed form (no iteration, so repeated calls never accumulate drift):

        BAL(k) = P × [(1 + r)^n - (1 + r)^k] / [(1 + r)^n - 1]

    This is the ratio of present-value annuity factors PVAF(n - k) / PVAF(n)
    scaled by P: the balance is the present value of the n - k installments
    still to come.

    Boundary conditions:
        BAL(0) = P
        BAL(k) = 0               for k >= n
        BAL(k) = P - (P / n) k   when r = 0 (straight line)

    The result is clamped to >= 0. Interest-only loans never amortize and
    should not call this; their balance is always P.

    Args:
        principal: Amount borrowed
        annual_rate_percent: Annual rate as percentage
        tenure_months: Original tenure (n > 0)
        payments_made: EMIs paid so far (k >= 0)

    Returns:
        Outstanding balance after k payments
    """
    assert tenure_months > 0, f"tenure_months must be positive, got {tenure_months}"
    assert payments_made >= 0, f"payments_made must be non-negative, got {payments_made}"
    n = tenure_months
    k = payments_made
    if k >= n:
        return 0.0
    if k == 0:
        return float(principal)
    r = annual_rate_percent / 1200.0
    if r == 0.0:
        return max(0.0, principal - (principal / n) * k)
    growth_n = (1.0 + r) ** n
    growth_k = (1.0 + r) ** k
    return max(0.0, principal * (growth_n - growth_k) / (growth_n - 1.0))


def balance_factors(annual_rate_percent: float, tenure_months: int) -> np.ndarray:
    """
    Scheduled balance as a fraction of principal at every age k = 0..n.

    Vectorized balance_at_payment(1.0, C, n, k): ``factors[0] == 1.0`` and
    ``factors[n] == 0.0``. Multiply by the principal for currency amounts.

    Returns:
        ndarray of length n + 1, indexed by payments made
    """
    assert tenure_months > 0, f"tenure_months must be positive, got {tenure_months}"
    n = tenure_months
    k = np.arange(n + 1, dtype=float)
    r = annual_rate_percent / 1200.0
    if r == 0.0:
        factors = 1.0 - k / n
    else:
        growth_n = (1.0 + r) ** n
        factors = (growth_n - np.power(1.0 + r, k)) / (growth_n - 1.0)
    factors[0] = 1.0
    factors[-1] = 0.0
    return np.maximum(factors, 0.0)


def next_payment_date(
        start_date: dt.date,
        tenure_months: int,
        as_of_date: dt.date
) -> dt.date:
    """
    First scheduled due date on or after ``as_of_date``.

    Equivalent to stepping from ``start_date`` one whole month at a time until
    the date is >= as_of_date, but computed directly: take the whole months
    elapsed m, try start + m months, and move one month further if that is
    still in the past. Dates are always offset from ``start_date`` so the
    day-of-month is preserved across short months.

    A matured loan reports its final scheduled date (period n).
    """
    assert tenure_months > 0, f"tenure_months must be positive, got {tenure_months}"
    final_date = payment_date(start_date, tenure_months)
    if as_of_date <= start_date:
        return start_date
    months = max(0, whole_months_between(start_date, as_of_date))
    candidate = add_months(start_date, months)
    if candidate < as_of_date:
        candidate = add_months(start_date, months + 1)
    return min(candidate, final_date)


def remaining_term_months(tenure_months: int, payments_made: int) -> int:
    """Installments left to pay, never negative."""
    return max(0, tenure_months - payments_made)


def total_interest(
        principal: float,
        annual_rate_percent: float,
        tenure_months: int,
        is_interest_only: bool = False
) -> float:
    """
    Interest paid over the full tenure.

    Amortizing: EMI × n - P. Interest-only: payment × n (principal is settled
    separately and is not part of the schedule).
    """
    payment = monthly_payment(principal, annual_rate_percent, tenure_months, is_interest_only)
    if is_interest_only:
        return payment * tenure_months
    return payment * tenure_months - principal


def implied_annual_rate(
        principal: float,
        payment: float,
        tenure_months: int,
        max_rate: float = MAX_INTEREST_RATE,
        tolerance: float = 1e-10,
        max_iterations: int = 200
) -> float:
    """
    Annual rate (%) at which ``payment`` amortizes ``principal`` over
    ``tenure_months``: the inverse of emi_payment.

    Lenders often quote the EMI rather than the rate. EMI is strictly
    increasing in the rate, so the root of

        f(C) = emi_payment(P, C, n) - payment

    is unique on [0, max_rate] whenever one exists. Brent's method
    (scipy.optimize.brentq) combines bisection, secant and inverse quadratic
    interpolation and converges quickly on this smooth monotone function.

    Args:
        principal: Amount borrowed
        payment: Observed monthly installment
        tenure_months: Number of installments
        max_rate: Upper bound of the search interval (annual %)
        tolerance: Absolute tolerance on the rate passed to brentq (xtol)
        max_iterations: Iteration cap passed to brentq

    Returns:
        Annual rate as percentage

    Raises:
        ValueError: If no rate in [0, max_rate] produces ``payment``

    Example:
        >>> round(implied_annual_rate(500000, emi_payment(500000, 12.5, 60), 60), 6)
        12.5
    """
    assert tenure_months > 0, f"tenure_months must be positive, got {tenure_months}"
    straight_line = principal / tenure_months
    if np.isclose(payment, straight_line, rtol=1e-12, atol=0.0):
        return 0.0
    if payment < straight_line:
        raise ValueError(
            f"payment {payment:.2f} is below the zero-interest installment "
            f"{straight_line:.2f}; it never repays the principal"
        )

    def objective(rate: float) -> float:
        return emi_payment(principal, rate, tenure_months) - payment

    try:
        return brentq(objective, 0.0, max_rate, xtol=tolerance, maxiter=max_iterations)
    except ValueError as e:
        # brentq raises ValueError when f(0) and f(max_rate) share a sign
        raise ValueError(
            f"Could not find a rate in [0, {max_rate}]% for payment {payment:.2f} "
            f"on principal {principal:.2f} over {tenure_months} months. "
            f"Original error: {e}"
        ) from e
