"""Enumeration types used throughout the citation receipt API.

Enumerations make it easier to constrain the values that can be
stored in the database or passed through the API.  Payment methods
are stored as free text in the ``payments`` table, so ``PaymentMethod``
is parsed leniently: anything unrecognised becomes ``OTHER``.
"""

from __future__ import annotations

from enum import Enum


class PaymentMethod(str, Enum):
    """How a citation fine was settled."""

    CASH = "CASH"
    GCASH = "GCASH"
    PAYMAYA = "PAYMAYA"
    BANK_TRANSFER = "BANK_TRANSFER"
    ONLINE = "ONLINE"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, value: str | None) -> "PaymentMethod":
        """Case-insensitive lookup falling back to ``OTHER``."""
        try:
            return cls((value or "").strip().upper())
        except ValueError:
            return cls.OTHER

    @property
    def category(self) -> "PaymentCategory":
        if self is PaymentMethod.CASH:
            return PaymentCategory.CASH
        if self in _ELECTRONIC_METHODS:
            return PaymentCategory.ELECTRONIC
        return PaymentCategory.NONE


class PaymentCategory(str, Enum):
    """Which checkbox the printed receipt marks."""

    CASH = "cash"
    ELECTRONIC = "electronic"
    NONE = "none"


_ELECTRONIC_METHODS = frozenset(
    {PaymentMethod.GCASH, PaymentMethod.PAYMAYA, PaymentMethod.BANK_TRANSFER, PaymentMethod.ONLINE}
)


class UserRole(str, Enum):
    """Staff roles carried in the session token."""

    ADMIN = "admin"
    CASHIER = "cashier"
    ENFORCER = "enforcer"
    VIEWER = "viewer"
