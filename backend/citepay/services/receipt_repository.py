"""Read access to payments and violations for receipt generation.

``ReceiptRepository`` is the storage contract the receipt service depends
on; ``SqlReceiptRepository`` implements it over an async SQLAlchemy
session.  Both reads translate connectivity and driver failures into
:class:`~citepay.core.errors.StorageUnavailable` so callers can tell
"database down" apart from "no such row".
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from citepay.core.errors import StorageUnavailable
from citepay.models.schemas import PaymentRecord, ViolationLine
from citepay.models.tables import Citation, Payment, Violation, ViolationType

logger = logging.getLogger(__name__)


class ReceiptRepository(Protocol):
    async def find_payment_with_citation(self, receipt_number: str) -> Optional[PaymentRecord]:
        ...

    async def find_violations_with_tariff(self, citation_id: int) -> List[ViolationLine]:
        ...


class SqlReceiptRepository:
    """Repository backed by the citation office database."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_payment_with_citation(self, receipt_number: str) -> Optional[PaymentRecord]:
        stmt = (
            select(
                Payment.id.label("payment_id"),
                Payment.citation_id,
                Payment.receipt_number,
                Payment.amount_paid,
                Payment.payment_method,
                Payment.payment_date,
                Payment.reference_number,
                Citation.ticket_number,
                Citation.first_name,
                Citation.last_name,
                Citation.total_fine,
            )
            .join(Citation, Payment.citation_id == Citation.id)
            .where(Payment.receipt_number == receipt_number)
        )
        try:
            result = await self.session.execute(stmt)
            row = result.mappings().first()
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Payment lookup failed for receipt %s: %s", receipt_number, exc)
            raise StorageUnavailable(str(exc)) from exc
        if row is None:
            return None
        return PaymentRecord.model_validate(dict(row))

    async def find_violations_with_tariff(self, citation_id: int) -> List[ViolationLine]:
        stmt = (
            select(
                ViolationType.violation_type.label("label"),
                ViolationType.fine_amount_1,
                ViolationType.fine_amount_2,
                ViolationType.fine_amount_3,
                Violation.offense_count,
            )
            .join(ViolationType, Violation.violation_type_id == ViolationType.id)
            .where(Violation.citation_id == citation_id)
            .order_by(Violation.id)
        )
        try:
            result = await self.session.execute(stmt)
            rows = result.mappings().all()
        except (SQLAlchemyError, OSError) as exc:
            logger.error("Violation lookup failed for citation %s: %s", citation_id, exc)
            raise StorageUnavailable(str(exc)) from exc
        return [ViolationLine.model_validate(dict(r)) for r in rows]
