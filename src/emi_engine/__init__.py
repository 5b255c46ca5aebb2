# Requires Python 3.12+
"""
EMI Engine: loan amortization math, live loan state, and schedules.

Balances, remaining term and next due dates are always derived from a loan's
origination parameters plus a caller-supplied as-of date; nothing mutable is
stored.
"""

from __future__ import annotations

__version__ = "0.2.0"

# Date math
from emi_engine.dates import (
    add_months,
    payment_date,
    whole_months_between,
    days_between,
    coerce_date,
)

# Amortization math library
from emi_engine.scheduled_payments import (
    emi_payment,
    interest_only_payment,
    monthly_payment,
    payments_elapsed,
    balance_at_payment,
    balance_factors,
    next_payment_date,
    remaining_term_months,
    total_interest,
    implied_annual_rate,
)

# Errors and validation
from emi_engine.exceptions import (
    EmiEngineError,
    LoanValidationError,
    InvalidPrincipal,
    InvalidRate,
    InvalidTenure,
    InvalidDate,
    ConfigurationError,
)
from emi_engine.validation import (
    validate_loan_fields,
    collect_errors,
)

# Loan records
from emi_engine.loans import (
    LoanType,
    LoanRecord,
    create_loan_record,
)

# Projection and schedules
from emi_engine.projection import (
    LoanState,
    PortfolioSummary,
    project,
    summarize_portfolio,
    due_label,
)
from emi_engine.cashflows import (
    ScheduleRow,
    AmortizationSchedule,
    LoanQuote,
    generate_schedule,
    quote,
)

from emi_engine.config import EngineConfig, get_config
from emi_engine.formatting import format_currency, format_number, format_payment_date

__all__ = [
    "__version__",
    # Date math
    "add_months",
    "payment_date",
    "whole_months_between",
    "days_between",
    "coerce_date",
    # Math library
    "emi_payment",
    "interest_only_payment",
    "monthly_payment",
    "payments_elapsed",
    "balance_at_payment",
    "balance_factors",
    "next_payment_date",
    "remaining_term_months",
    "total_interest",
    "implied_annual_rate",
    # Errors and validation
    "EmiEngineError",
    "LoanValidationError",
    "InvalidPrincipal",
    "InvalidRate",
    "InvalidTenure",
    "InvalidDate",
    "ConfigurationError",
    "validate_loan_fields",
    "collect_errors",
    # Loan records
    "LoanType",
    "LoanRecord",
    "create_loan_record",
    # Projection
    "LoanState",
    "PortfolioSummary",
    "project",
    "summarize_portfolio",
    "due_label",
    # Schedules
    "ScheduleRow",
    "AmortizationSchedule",
    "LoanQuote",
    "generate_schedule",
    "quote",
    # Config and display
    "EngineConfig",
    "get_config",
    "format_currency",
    "format_number",
    "format_payment_date",
]
