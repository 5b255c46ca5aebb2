# Requires Python 3.12+
# Uses native type hints: list[x], tuple[x, y], X | None (PEP 585, PEP 604)
"""
Calendar arithmetic for EMI due dates.

Month lengths vary, so every month step goes through
``dateutil.relativedelta``, which clamps the day to the end of a shorter
month (Jan 31 + 1 month = Feb 28/29). Day-count approximations such as
``days / 30`` or ``days / 30.44`` are never used: they drift by a day or more
around month ends and silently change the number of payments counted.

PAYMENT DATE CONVENTION:
------------------------
Period k (1-indexed) is due on ``emi_start_date + (k - 1) months``. Each date
is computed directly from the start date rather than by chaining one month at
a time, so a 31st-of-month loan returns to the 31st after passing through
February instead of sticking on the 28th.
"""

from __future__ import annotations

import datetime as dt

from dateutil.relativedelta import relativedelta

from emi_engine.exceptions import InvalidDate


def add_months(d: dt.date, months: int) -> dt.date:
    """Shift ``d`` by whole calendar months, clamping the day to the month end."""
    return d + relativedelta(months=months)


def payment_date(start_date: dt.date, period: int) -> dt.date:
    """
    Due date of a 1-indexed payment period.

    Args:
        start_date: EMI start date (due date of period 1)
        period: Payment number, 1 for the first EMI

    Returns:
        ``start_date + (period - 1)`` months
    """
    assert period >= 1, f"period must be >= 1, got {period}"
    return add_months(start_date, period - 1)


def whole_months_between(start: dt.date, end: dt.date) -> int:
    """
    Number of complete months from ``start`` to ``end``.

    Counts calendar months, then drops the last one when ``end`` has not yet
    reached ``start``'s day of month. Negative when ``end`` precedes ``start``.

    Example:
        >>> whole_months_between(dt.date(2024, 1, 15), dt.date(2024, 3, 14))
        1
        >>> whole_months_between(dt.date(2024, 1, 15), dt.date(2024, 3, 15))
        2
    """
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return months


def days_between(start: dt.date, end: dt.date) -> int:
    """Signed number of calendar days from ``start`` to ``end``."""
    return (end - start).days


def coerce_date(value: dt.date | dt.datetime | str) -> dt.date:
    """
    Normalize a date-like value to ``datetime.date``.

    Accepts a ``date``, a ``datetime`` (its date part is used), an ISO
    ``YYYY-MM-DD`` string, or a full ISO timestamp such as the loan store's
    ``2024-01-15T00:00:00.000Z``. Anything else in the string is an error.

    Raises:
        InvalidDate: If the value is not a real calendar date
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            return dt.datetime.fromisoformat(value.strip()).date()
        except ValueError as e:
            raise InvalidDate(f"emi_start_date is not a valid date: {value!r}", value) from e
    raise InvalidDate(
        f"emi_start_date must be a date or ISO string, got {type(value).__name__}", value
    )
