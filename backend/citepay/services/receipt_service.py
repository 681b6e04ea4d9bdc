"""Assemble official receipt documents from stored payments.

``ReceiptService.build`` is a read-only projection: it looks up the
payment for a receipt number, the violations on the citation it settles,
prices each violation from its tariff and the driver's offense count,
and returns a :class:`~citepay.models.schemas.ReceiptDocument` ready for
the renderer.  Nothing is cached or written; every call reflects the
database as it is at that moment.

Failures surface as :class:`~citepay.core.errors.ReceiptError` subclasses
with fixed, user-facing messages.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import List

from citepay.core.errors import (
    BadInput,
    DATABASE_CONNECTION_FAILED,
    INVALID_RECEIPT_NUMBER,
    NO_VIOLATIONS_FOUND,
    NotFound,
    RECEIPT_NOT_FOUND,
    StorageUnavailable,
    Unavailable,
)
from citepay.models.enums import PaymentMethod
from citepay.models.schemas import ReceiptDocument, ReceiptLine, ViolationLine
from citepay.services.fine_resolver import resolve_fine
from citepay.services.number_words import amount_in_words
from citepay.services.receipt_repository import ReceiptRepository
from citepay.utils.helpers import format_receipt_date
from citepay.utils.sanitization import sanitize_receipt_number

logger = logging.getLogger(__name__)


def price_lines(rows: List[ViolationLine]) -> List[ReceiptLine]:
    """Resolve the fine for each violation row, keeping fetch order."""
    return [
        ReceiptLine(label=row.label.strip().upper(), amount=resolve_fine(row.tariff, row.offense_count))
        for row in rows
    ]


def payor_name(first_name: str | None, last_name: str | None) -> str:
    return f"{first_name or ''} {last_name or ''}".strip().upper()


class ReceiptService:
    """Build receipt documents through a storage collaborator."""

    def __init__(self, repository: ReceiptRepository):
        self.repository = repository

    async def build(self, receipt_number: str) -> ReceiptDocument:
        receipt_number = sanitize_receipt_number(receipt_number)
        if not receipt_number:
            raise BadInput(INVALID_RECEIPT_NUMBER)

        try:
            payment = await self.repository.find_payment_with_citation(receipt_number)
            if payment is None:
                raise NotFound(RECEIPT_NOT_FOUND)
            rows = await self.repository.find_violations_with_tariff(payment.citation_id)
        except StorageUnavailable as exc:
            logger.warning("Receipt %s: storage unavailable (%s)", receipt_number, exc)
            raise Unavailable(DATABASE_CONNECTION_FAILED) from exc

        if not rows:
            raise NotFound(NO_VIOLATIONS_FOUND)

        lines = price_lines(rows)
        total = sum((line.amount for line in lines), Decimal("0.00"))
        logger.info(
            "Built receipt %s: citation=%s violations=%d total=%s",
            receipt_number,
            payment.citation_id,
            len(lines),
            total,
        )
        return ReceiptDocument(
            receipt_number=receipt_number,
            date=format_receipt_date(payment.payment_date),
            payor=payor_name(payment.first_name, payment.last_name),
            lines=lines,
            total=total,
            amount_in_words=amount_in_words(total),
            payment_method=PaymentMethod.parse(payment.payment_method),
            reference_number=payment.reference_number,
        )
