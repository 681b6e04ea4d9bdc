"""Failure kinds raised while producing a receipt.

Every failure that can stop a receipt request is one of the
``ReceiptError`` subclasses below.  Each carries a plain-text,
user-facing message and the HTTP status the API layer answers with;
raw driver or library error text never ends up in ``message``.
"""

from __future__ import annotations


class ReceiptError(Exception):
    """Base class for receipt pipeline failures."""

    status_code: int = 500
    kind: str = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class BadInput(ReceiptError):
    status_code = 400
    kind = "bad_input"


class Forbidden(ReceiptError):
    status_code = 403
    kind = "forbidden"


class NotFound(ReceiptError):
    status_code = 404
    kind = "not_found"


class Unavailable(ReceiptError):
    status_code = 500
    kind = "unavailable"


class RenderFailed(ReceiptError):
    status_code = 500
    kind = "render_failed"


class StorageUnavailable(Exception):
    """Raised by repositories when the database cannot be reached."""


RECEIPT_NOT_FOUND = "RECEIPT NOT FOUND"
NO_VIOLATIONS_FOUND = "NO VIOLATIONS FOUND"
DATABASE_CONNECTION_FAILED = "DATABASE CONNECTION FAILED"
INVALID_RECEIPT_NUMBER = "INVALID RECEIPT NUMBER"
ACCESS_DENIED = "ACCESS DENIED"

__all__ = [
    "ReceiptError",
    "BadInput",
    "Forbidden",
    "NotFound",
    "Unavailable",
    "RenderFailed",
    "StorageUnavailable",
    "RECEIPT_NOT_FOUND",
    "NO_VIOLATIONS_FOUND",
    "DATABASE_CONNECTION_FAILED",
    "INVALID_RECEIPT_NUMBER",
    "ACCESS_DENIED",
]
