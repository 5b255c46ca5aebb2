# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
from __future__ import annotations

import dataclasses
import datetime as dt
import math
from dataclasses import dataclass
from enum import Enum

from emi_engine.config import get_config
from emi_engine.exceptions import InvalidTenure
from emi_engine.validation import validate_loan_fields


# =============================================================================
# Loan Types
# =============================================================================

class LoanType(Enum):
    """Loan categories offered in the add-loan form."""
    PERSONAL = "personal"
    HOME = "home"
    CAR = "car"
    BUSINESS = "business"
    GOLD = "gold"
    EDUCATION = "education"
    PRIVATE_LENDING = "private_lending"
    OTHER = "other"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def from_label(cls, value: "str | LoanType") -> "LoanType":
        """
        Parse an enum value ("gold") or a display label ("Gold Loan").

        The loan store keeps the display label, so both spellings are accepted,
        case-insensitively. Raises ValueError for anything else.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value, member.label.lower()):
                return member
        raise ValueError(f"unknown loan type: {value!r}")


_LABELS: dict[LoanType, str] = {
    LoanType.PERSONAL: "Personal Loan",
    LoanType.HOME: "Home Loan",
    LoanType.CAR: "Car Loan",
    LoanType.BUSINESS: "Business Loan",
    LoanType.GOLD: "Gold Loan",
    LoanType.EDUCATION: "Education Loan",
    LoanType.PRIVATE_LENDING: "Private Money Lending",
    LoanType.OTHER: "Other",
}


# =============================================================================
# Loan Record
# =============================================================================
#
# The record holds origination parameters only. Balance, payments made,
# remaining term and next due date are derived on demand by
# emi_engine.projection from these fields plus a caller-supplied as-of date,
# so there is no field to store them.
# =============================================================================

@dataclass(frozen=True)
class LoanRecord:
    """
    Immutable loan parameters as entered by the account owner.

    Required fields:
        id, name, type, lender, principal, annual_rate_percent,
        tenure_months, emi_start_date.

    Rate convention:
        annual_rate_percent is a percentage (12.5 for 12.5%), matching the
        math library. The monthly rate is annual_rate_percent / 1200.

    Payment model:
        is_interest_only is resolved at construction: true when the type is
        gold or private money lending, or when the caller passes True.

    Validation runs in __post_init__, so an invalid record can never exist.
    Edits go through replace(), which builds (and validates) a new record.
    """
    id: str
    name: str
    type: LoanType
    lender: str
    principal: float
    annual_rate_percent: float
    tenure_months: int
    emi_start_date: dt.date
    is_interest_only: bool | None = None

    def __post_init__(self) -> None:
        """Validate loan fields and derive the payment model."""
        config = get_config()
        principal, rate, tenure, start = validate_loan_fields(
            self.principal,
            self.annual_rate_percent,
            self.tenure_months,
            self.emi_start_date,
            config,
        )
        loan_type = LoanType.from_label(self.type)
        interest_only = bool(self.is_interest_only) or loan_type.value in config.interest_only_types
        object.__setattr__(self, "type", loan_type)
        object.__setattr__(self, "principal", principal)
        object.__setattr__(self, "annual_rate_percent", rate)
        object.__setattr__(self, "tenure_months", tenure)
        object.__setattr__(self, "emi_start_date", start)
        object.__setattr__(self, "is_interest_only", interest_only)

    @property
    def monthly_rate(self) -> float:
        """Monthly rate as decimal (e.g. 0.0104167 for 12.5% annual)."""
        return self.annual_rate_percent / 1200.0

    def replace(self, **changes: object) -> "LoanRecord":
        """
        Return an edited copy; the original record is unchanged.

        The interest-only flag is re-derived from the new type unless the
        caller passes is_interest_only explicitly.
        """
        if "type" in changes and "is_interest_only" not in changes:
            changes["is_interest_only"] = None
        return dataclasses.replace(self, **changes)


def tenure_from_years(years: float) -> int:
    """Convert a tenure in years to whole months, as the add-loan form does."""
    if isinstance(years, bool) or not isinstance(years, (int, float)):
        raise InvalidTenure(f"tenure_years must be a number, got {years!r}", years)
    if not math.isfinite(years):
        raise InvalidTenure(f"tenure_years must be finite, got {years!r}", years)
    return round(years * 12)


def create_loan_record(
        id: str,
        name: str,
        type: LoanType | str,
        lender: str,
        principal: float,
        annual_rate_percent: float,
        emi_start_date: dt.date | str,
        tenure_months: int | None = None,
        tenure_years: float | None = None,
        is_interest_only: bool | None = None,
) -> LoanRecord:
    """
    Build a validated LoanRecord from form input.

    Exactly one of tenure_months or tenure_years must be given; years are
    converted with round(years * 12). The start date may be an ISO string.

    Raises:
        InvalidPrincipal, InvalidRate, InvalidTenure, InvalidDate: On bad input
        ValueError: If the loan type is unknown
    """
    if (tenure_months is None) == (tenure_years is None):
        raise InvalidTenure(
            "exactly one of tenure_months or tenure_years is required",
            tenure_months if tenure_months is not None else tenure_years,
        )
    if tenure_years is not None:
        tenure_months = tenure_from_years(tenure_years)
    return LoanRecord(
        id=id,
        name=name,
        type=LoanType.from_label(type),
        lender=lender,
        principal=principal,
        annual_rate_percent=annual_rate_percent,
        tenure_months=tenure_months,
        emi_start_date=emi_start_date,
        is_interest_only=is_interest_only,
    )
