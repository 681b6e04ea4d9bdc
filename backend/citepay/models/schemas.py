"""Pydantic schemas for the receipt pipeline.

Two groups live here: the read records returned by the storage layer
(``PaymentRecord``, ``ViolationLine``) and the computed
``ReceiptDocument`` handed to the renderer.  They are intentionally
separate from the ORM models so the pipeline can be fed from any
storage collaborator, including in-memory fakes in tests.

All money fields are :class:`decimal.Decimal`.
"""

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import PaymentCategory, PaymentMethod


# ---------------------------------------------------------------------------
# Reference data and occurrences


class ViolationTypeTariff(BaseModel):
    """Fine tiers for a violation type; tier 1 is always present."""

    model_config = ConfigDict(frozen=True)

    violation_type_id: Optional[int] = None
    label: str
    fine_amount_1: Decimal
    fine_amount_2: Optional[Decimal] = None
    fine_amount_3: Optional[Decimal] = None


class ViolationOccurrence(BaseModel):
    """One violation on a citation, tagged with the driver's offense count."""

    model_config = ConfigDict(frozen=True)

    violation_id: int
    citation_id: int
    violation_type_id: int
    offense_count: int = Field(default=1, ge=1)


# ---------------------------------------------------------------------------
# Storage read records


class PaymentRecord(BaseModel):
    """A payment joined with the citation it settles."""

    model_config = ConfigDict(from_attributes=True)

    payment_id: int
    citation_id: int
    receipt_number: str
    amount_paid: Decimal
    payment_method: str
    payment_date: Union[dt.datetime, dt.date, str]
    reference_number: Optional[str] = None
    ticket_number: str
    first_name: str = ""
    last_name: str = ""
    total_fine: Optional[Decimal] = None


class ViolationLine(BaseModel):
    """A violation occurrence joined with its tariff, in fetch order."""

    label: str
    fine_amount_1: Decimal
    fine_amount_2: Optional[Decimal] = None
    fine_amount_3: Optional[Decimal] = None
    offense_count: int = 1

    @property
    def tariff(self) -> ViolationTypeTariff:
        return ViolationTypeTariff(
            label=self.label,
            fine_amount_1=self.fine_amount_1,
            fine_amount_2=self.fine_amount_2,
            fine_amount_3=self.fine_amount_3,
        )


# ---------------------------------------------------------------------------
# Computed receipt


class ReceiptLine(BaseModel):
    label: str
    amount: Decimal


class ReceiptDocument(BaseModel):
    """Render-ready projection of one payment; never persisted."""

    model_config = ConfigDict(frozen=True)

    receipt_number: str
    date: str
    payor: str
    lines: List[ReceiptLine]
    total: Decimal
    amount_in_words: str
    payment_method: PaymentMethod
    reference_number: Optional[str] = None

    @field_validator("payor", "date", mode="before")
    def uppercase_text(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @property
    def payment_category(self) -> PaymentCategory:
        return self.payment_method.category

    @property
    def filename(self) -> str:
        return receipt_filename(self.receipt_number)


def receipt_filename(receipt_number: str) -> str:
    """Deterministic download name for a receipt PDF."""
    return f"Receipt_{receipt_number}.pdf"
