from __future__ import annotations

import asyncio
import datetime as dt
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from citepay.core.database import Base
from citepay.core.errors import StorageUnavailable
from citepay.models.tables import Citation, Payment, Violation, ViolationType
from citepay.services.receipt_repository import SqlReceiptRepository
from citepay.services.receipt_service import ReceiptService


async def _seed(session):
    helmet = ViolationType(id=1, violation_type="No helmet", fine_amount_1=Decimal("500.00"),
                           fine_amount_2=Decimal("1000.00"), fine_amount_3=Decimal("1500.00"))
    license_ = ViolationType(id=2, violation_type="No license", fine_amount_1=Decimal("3000.00"))
    citation = Citation(id=7, ticket_number="TCT-7", first_name="Ana", last_name="Reyes", total_fine=Decimal("4000.00"))
    empty = Citation(id=8, ticket_number="TCT-8", first_name="Ben", last_name="Cruz")
    session.add_all([helmet, license_, citation, empty])
    await session.flush()
    session.add_all(
        [
            Violation(id=1, citation_id=7, violation_type_id=1, offense_count=2),
            Violation(id=2, citation_id=7, violation_type_id=2, offense_count=3),
            Payment(id=1, citation_id=7, receipt_number="OR-2025-000001", amount_paid=Decimal("4000.00"),
                    payment_method="gcash", payment_date=dt.datetime(2025, 6, 1, 14, 5), reference_number="GC123"),
            Payment(id=2, citation_id=8, receipt_number="OR-2025-000002", amount_paid=Decimal("0.00"),
                    payment_method="CASH", payment_date=dt.datetime(2025, 6, 2)),
        ]
    )
    await session.commit()


def run_with_repository(fn):
    async def runner():
        engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        session_factory = async_sessionmaker(engine, expire_on_commit=False)
        try:
            async with session_factory() as session:
                await _seed(session)
                return await fn(SqlReceiptRepository(session))
        finally:
            await engine.dispose()

    return asyncio.run(runner())


def test_find_payment_with_citation():
    async def check(repo):
        return await repo.find_payment_with_citation("OR-2025-000001")

    record = run_with_repository(check)
    assert record.citation_id == 7
    assert record.ticket_number == "TCT-7"
    assert record.first_name == "Ana"
    assert record.payment_method == "gcash"
    assert record.reference_number == "GC123"
    assert record.amount_paid == Decimal("4000.00")


def test_find_payment_missing_returns_none():
    async def check(repo):
        return await repo.find_payment_with_citation("OR-NOPE")

    assert run_with_repository(check) is None


def test_find_violations_with_tariff_in_fetch_order():
    async def check(repo):
        return await repo.find_violations_with_tariff(7)

    rows = run_with_repository(check)
    assert [(r.label, r.offense_count) for r in rows] == [("No helmet", 2), ("No license", 3)]
    assert rows[1].fine_amount_2 is None


def test_build_from_database():
    async def check(repo):
        return await ReceiptService(repo).build("OR-2025-000001")

    doc = run_with_repository(check)
    assert [line.amount for line in doc.lines] == [Decimal("1000.00"), Decimal("3000.00")]
    assert doc.total == Decimal("4000.00")
    assert doc.amount_in_words == "FOUR THOUSAND PESOS ONLY"
    assert doc.payor == "ANA REYES"
    assert doc.date == "06/01/2025"


def test_citation_without_violations_returns_empty_list():
    async def check(repo):
        return await repo.find_violations_with_tariff(8)

    assert run_with_repository(check) == []


class BrokenSession:
    async def execute(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("Can't connect to MySQL server"))


@pytest.mark.parametrize("call", ["payment", "violations"])
def test_driver_errors_become_storage_unavailable(call):
    repo = SqlReceiptRepository(BrokenSession())

    async def go():
        if call == "payment":
            await repo.find_payment_with_citation("OR-1")
        else:
            await repo.find_violations_with_tariff(1)

    with pytest.raises(StorageUnavailable):
        asyncio.run(go())
