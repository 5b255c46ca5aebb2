"""Exception hierarchy for emi-engine."""

from __future__ import annotations


class EmiEngineError(Exception):
    """Base exception for all emi-engine errors."""


class LoanValidationError(EmiEngineError, ValueError):
    """Raised when a loan field fails validation at creation/edit time.

    The offending field name and raw value are kept on the exception so the
    caller can attach the message to the right form input.
    """

    field: str = ""

    def __init__(self, message: str, value: object = None) -> None:
        super().__init__(message)
        self.value = value


class InvalidPrincipal(LoanValidationError):
    """Principal is not in (0, MAX_LOAN_AMOUNT]."""

    field = "principal"


class InvalidRate(LoanValidationError):
    """Annual interest rate is not in [0, MAX_INTEREST_RATE]."""

    field = "annual_rate_percent"


class InvalidTenure(LoanValidationError):
    """Tenure is not a positive whole number of months."""

    field = "tenure_months"


class InvalidDate(LoanValidationError):
    """EMI start date is not a valid calendar date."""

    field = "emi_start_date"


class ConfigurationError(EmiEngineError):
    """Raised when configuration is invalid or missing."""
