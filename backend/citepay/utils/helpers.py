"""Miscellaneous helper functions."""

from __future__ import annotations

import datetime as dt
from typing import Union

_DATE_PATTERNS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d")
_DISPLAY_FORMAT = "%m/%d/%Y"


def format_receipt_date(value: Union[str, dt.date, dt.datetime, None]) -> str:
    """Format a payment date as ``MM/DD/YYYY`` for printing.

    Strings are parsed as ``YYYY-MM-DD HH:MM:SS`` or ``YYYY-MM-DD``.  Anything
    that does not parse is printed as given (uppercased) rather than failing
    the receipt.
    """
    if value is None:
        return ""
    if isinstance(value, dt.date):
        return value.strftime(_DISPLAY_FORMAT).upper()
    raw = str(value)
    for pattern in _DATE_PATTERNS:
        try:
            return dt.datetime.strptime(raw.strip(), pattern).strftime(_DISPLAY_FORMAT).upper()
        except ValueError:
            continue
    return raw.upper()


def format_money(amount, symbol: str = "") -> str:
    """``1500`` -> ``"1,500.00"`` with an optional currency prefix."""
    return f"{symbol}{amount:,.2f}"
