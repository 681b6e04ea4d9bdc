"""Common dependencies for FastAPI routes.

This module defines shared dependency functions: database access, the
receipt pipeline collaborators and the payment-viewer capability check.
Routes depend on these rather than constructing services themselves so
tests can swap any of them through ``app.dependency_overrides``.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from citepay.core.config import settings
from citepay.core.database import get_db
from citepay.core.security import get_principal, require_payment_viewer
from citepay.services.receipt_renderer import ReceiptRenderer
from citepay.services.receipt_repository import ReceiptRepository, SqlReceiptRepository
from citepay.services.receipt_service import ReceiptService


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Alias for `get_db` to be imported in routers."""
    async for session in get_db():
        yield session


def get_current_principal(request: Request) -> SimpleNamespace:
    return get_principal(request)


def get_payment_viewer(principal: SimpleNamespace = Depends(get_current_principal)) -> SimpleNamespace:
    """Return the caller if they may view payments; raises ``Forbidden`` otherwise."""
    return require_payment_viewer(principal)


def get_receipt_repository(db: AsyncSession = Depends(get_db_session)) -> ReceiptRepository:
    return SqlReceiptRepository(db)


def get_receipt_service(repository: ReceiptRepository = Depends(get_receipt_repository)) -> ReceiptService:
    return ReceiptService(repository)


def get_receipt_renderer() -> ReceiptRenderer:
    return ReceiptRenderer(
        template_path=settings.RECEIPT_TEMPLATE_PATH,
        font_path=settings.RECEIPT_FONT_PATH,
        currency_symbol=settings.RECEIPT_CURRENCY_SYMBOL,
    )
