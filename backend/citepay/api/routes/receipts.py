"""API routes for printing official receipts."""

from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from citepay.api.dependencies import get_payment_viewer, get_receipt_renderer, get_receipt_service
from citepay.core.observability import receipt_breadcrumb, tag_receipt_request
from citepay.services.receipt_renderer import ReceiptRenderer
from citepay.services.receipt_service import ReceiptService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["receipts"])


def content_disposition(filename: str, download: bool) -> str:
    """Build a Content-Disposition value the way starlette's FileResponse does.

    Names that are not plain ASCII are sent percent-encoded as ``filename*``.
    """
    disposition = "attachment" if download else "inline"
    quoted = quote(filename)
    if quoted != filename:
        return f"{disposition}; filename*=utf-8''{quoted}"
    return f'{disposition}; filename="{filename}"'


async def _receipt_response(
    receipt_number: Optional[str],
    download: bool,
    principal: SimpleNamespace,
    service: ReceiptService,
    renderer: ReceiptRenderer,
) -> Response:
    tag_receipt_request(receipt_number, principal.sub)
    doc = await service.build(receipt_number or "")
    # PyMuPDF work is CPU-bound; keep it off the event loop (the renderer serialises it)
    pdf = await run_in_threadpool(renderer.render, doc)
    receipt_breadcrumb("receipt.rendered", lines=len(doc.lines), method=doc.payment_method.value, bytes=len(pdf))
    logger.info("User %s printed receipt %s", principal.sub, doc.receipt_number)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": content_disposition(doc.filename, download)},
    )


@router.get("/receipts/{receipt_number}/pdf")
async def get_receipt_pdf(
    receipt_number: str,
    download: bool = Query(False),
    principal: SimpleNamespace = Depends(get_payment_viewer),
    service: ReceiptService = Depends(get_receipt_service),
    renderer: ReceiptRenderer = Depends(get_receipt_renderer),
) -> Response:
    """Render the official receipt for ``receipt_number`` as a PDF."""
    return await _receipt_response(receipt_number, download, principal, service, renderer)


@router.get("/receipt")
async def get_receipt_by_query(
    receipt: Optional[str] = Query(None),
    download: bool = Query(False),
    principal: SimpleNamespace = Depends(get_payment_viewer),
    service: ReceiptService = Depends(get_receipt_service),
    renderer: ReceiptRenderer = Depends(get_receipt_renderer),
) -> Response:
    """Query-string form used by the cashier pages (``/receipt?receipt=OR-...``)."""
    return await _receipt_response(receipt, download, principal, service, renderer)
