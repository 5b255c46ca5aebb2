# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
"""
Input validation for loan records.

Runs at record creation/edit time, before any amortization math. Every check
either accepts the value unchanged (converted to float/int/date) or raises a
typed LoanValidationError; nothing is clamped or coerced into range.

    principal            0 < P <= max_loan_amount
    annual_rate_percent  0 <= C <= max_interest_rate
    tenure_months        integer n > 0
    emi_start_date       real calendar date
"""

from __future__ import annotations

import datetime as dt
import math
import numbers
from decimal import Decimal

from emi_engine.config import EngineConfig, get_config
from emi_engine.dates import coerce_date
from emi_engine.exceptions import (
    InvalidDate,
    InvalidPrincipal,
    InvalidRate,
    InvalidTenure,
    LoanValidationError,
)
from emi_engine.logging import get_logger

logger = get_logger(__name__)


def _as_finite_float(value: object) -> float | None:
    """Float value of a real number, or None for anything else (bools, NaN, strings)."""
    if isinstance(value, bool):
        return None
    if not isinstance(value, (numbers.Real, Decimal)):
        return None
    result = float(value)
    if not math.isfinite(result):
        return None
    return result


def validate_principal(value: object, config: EngineConfig | None = None) -> float:
    """
    Check 0 < principal <= max_loan_amount.

    Raises:
        InvalidPrincipal: If the value is not a finite number in range
    """
    config = config or get_config()
    principal = _as_finite_float(value)
    if principal is None:
        raise InvalidPrincipal(f"principal must be a finite number, got {value!r}", value)
    if principal <= 0:
        raise InvalidPrincipal(f"principal must be positive, got {value!r}", value)
    if principal > config.max_loan_amount:
        raise InvalidPrincipal(
            f"principal cannot exceed {config.max_loan_amount:,.0f}, got {value!r}", value
        )
    return principal


def validate_rate(value: object, config: EngineConfig | None = None) -> float:
    """
    Check 0 <= annual_rate_percent <= max_interest_rate.

    Raises:
        InvalidRate: If the value is not a finite number in range
    """
    config = config or get_config()
    rate = _as_finite_float(value)
    if rate is None:
        raise InvalidRate(f"annual_rate_percent must be a finite number, got {value!r}", value)
    if rate < 0:
        raise InvalidRate(f"annual_rate_percent must be non-negative, got {value!r}", value)
    if rate > config.max_interest_rate:
        raise InvalidRate(
            f"annual_rate_percent cannot exceed {config.max_interest_rate}%, got {value!r}", value
        )
    return rate


def validate_tenure(value: object) -> int:
    """
    Check tenure_months is a positive integer.

    Floats are rejected even when integral (12.0): the caller converts years to
    months explicitly.

    Raises:
        InvalidTenure: If the value is not an integer > 0
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidTenure(f"tenure_months must be an integer, got {value!r}", value)
    if value <= 0:
        raise InvalidTenure(f"tenure_months must be positive, got {value!r}", value)
    return int(value)


def validate_start_date(value: object) -> dt.date:
    """
    Check emi_start_date is a real calendar date.

    Raises:
        InvalidDate: If the value cannot be read as a date
    """
    if value is None:
        raise InvalidDate("emi_start_date is required", value)
    return coerce_date(value)  # type: ignore[arg-type]


def validate_loan_fields(
        principal: object,
        annual_rate_percent: object,
        tenure_months: object,
        emi_start_date: object,
        config: EngineConfig | None = None
) -> tuple[float, float, int, dt.date]:
    """
    Validate the four numeric/date loan fields, failing on the first violation.

    Returns:
        (principal, annual_rate_percent, tenure_months, emi_start_date),
        normalized to float, float, int, date

    Raises:
        InvalidPrincipal, InvalidRate, InvalidTenure, InvalidDate
    """
    config = config or get_config()
    try:
        return (
            validate_principal(principal, config),
            validate_rate(annual_rate_percent, config),
            validate_tenure(tenure_months),
            validate_start_date(emi_start_date),
        )
    except LoanValidationError as e:
        logger.warning("Rejected loan field %s=%r: %s", e.field, e.value, e)
        raise


def collect_errors(
        principal: object,
        annual_rate_percent: object,
        tenure_months: object,
        emi_start_date: object,
        config: EngineConfig | None = None
) -> list[LoanValidationError]:
    """
    Run every check and return all violations, for form-style error display.

    An empty list means validate_loan_fields would succeed.
    """
    config = config or get_config()
    checks = (
        (validate_principal, (principal, config)),
        (validate_rate, (annual_rate_percent, config)),
        (validate_tenure, (tenure_months,)),
        (validate_start_date, (emi_start_date,)),
    )
    errors: list[LoanValidationError] = []
    for check, args in checks:
        try:
            check(*args)
        except LoanValidationError as e:
            errors.append(e)
    return errors
