"""
Display formatting for engine outputs.

The engine keeps full precision internally; these helpers round at the
presentation boundary. Amounts use the Indian digit grouping (last three
digits, then pairs): 1,000 | 10,000 | 1,00,000 | 10,00,000 | 1,00,00,000.
"""

from __future__ import annotations

import datetime as dt
import math

CURRENCY_SYMBOL = "₹"


def _group_indian(integer_digits: str) -> str:
    if len(integer_digits) <= 3:
        return integer_digits
    head, tail = integer_digits[:-3], integer_digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_number(amount: float | None, decimals: bool = False) -> str:
    """Indian-grouped number, rounded to 0 or 2 decimals. None/NaN/inf show as 0."""
    if amount is None or not math.isfinite(amount):
        amount = 0.0
    places = 2 if decimals else 0
    text = f"{abs(amount):.{places}f}"
    integer_digits, _, fraction = text.partition(".")
    grouped = _group_indian(integer_digits)
    if fraction:
        grouped = f"{grouped}.{fraction}"
    negative = amount < 0 and float(text) != 0.0
    return f"-{grouped}" if negative else grouped


def format_currency(amount: float | None, symbol: bool = True, decimals: bool = False) -> str:
    """
    Currency string with Indian grouping.

    Example:
        >>> format_currency(100000)
        '₹1,00,000'
        >>> format_currency(-1234.5, decimals=True)
        '-₹1,234.50'
    """
    text = format_number(amount, decimals)
    if not symbol:
        return text
    if text.startswith("-"):
        return f"-{CURRENCY_SYMBOL}{text[1:]}"
    return f"{CURRENCY_SYMBOL}{text}"


def format_payment_date(d: dt.date) -> str:
    """Compact due date, e.g. "15 Jan '24"."""
    return f"{d.day} {d.strftime('%b')} '{d.strftime('%y')}"
