"""
Custom exception handlers for FastAPI.

Receipt failures are answered with a small HTML page because the receipt
URL is opened directly in a browser tab; everything else stays JSON.
"""

import html
import logging

from fastapi import Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.exception_handlers import RequestValidationError
from starlette.status import HTTP_422_UNPROCESSABLE_ENTITY, HTTP_500_INTERNAL_SERVER_ERROR

from citepay.core.errors import ReceiptError, Unavailable
from citepay.core.observability import receipt_breadcrumb, sentry_capture

logger = logging.getLogger(__name__)

_ERROR_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Receipt Error</title>
    <style>
        body {{ display: flex; align-items: center; justify-content: center; min-height: 100vh;
               background-color: #f8f9fa; font-family: sans-serif; padding: 20px; }}
        .error-container {{ text-align: center; max-width: 500px; }}
        .alert {{ color: #842029; background: #f8d7da; border: 1px solid #f5c2c7; padding: 12px; border-radius: 6px; }}
        .hint {{ color: #6c757d; }}
    </style>
</head>
<body>
    <div class="error-container">
        <h2>Receipt Error</h2>
        <div class="alert"><strong>Error:</strong> {message}</div>
        {hint}
    </div>
</body>
</html>
"""

_DATABASE_HINT = (
    '<p class="hint">The database server is not responding. '
    "Please ensure MySQL is running and try again.</p>"
)


def render_error_page(exc: ReceiptError) -> str:
    hint = _DATABASE_HINT if isinstance(exc, Unavailable) else ""
    return _ERROR_PAGE.format(message=html.escape(exc.message), hint=hint)


def receipt_exception_handler(request: Request, exc: ReceiptError):
    logger.info("Receipt request %s failed: %s", request.url.path, exc.message)
    receipt_breadcrumb("receipt.failed", level="warning", kind=exc.kind, status=exc.status_code)
    sentry_capture(exc)
    return HTMLResponse(content=render_error_page(exc), status_code=exc.status_code)


def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation error",
            "details": exc.errors(),
        },
    )


def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    sentry_capture(exc)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
        },
    )
