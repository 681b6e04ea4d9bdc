"""Sentry wiring for the receipt service.

Everything here is a no-op until ``SENTRY_DSN`` is set.  Only server-side
receipt failures (storage outage, render failure) and unexpected
exceptions reach Sentry; a missing receipt or a denied request is
ordinary traffic and is dropped in ``_before_send``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from citepay.core.config import settings
from citepay.core.errors import ReceiptError

_SCRUBBED_HEADERS = ("authorization", "cookie", "set-cookie")


def _enabled() -> bool:
	return bool(settings.SENTRY_DSN)


def _before_send(event: Dict[str, Any], hint: Optional[Dict[str, Any]] = None):
	"""Filter and scrub an event before it leaves the process.

	- Client-side receipt failures (4xx) are discarded
	- Server-side ones are tagged ``receipt.failure=<kind>``
	- Staff session tokens and cookies are removed, as is any request body
	"""
	exc_info = (hint or {}).get("exc_info")
	exc = exc_info[1] if exc_info else None
	if isinstance(exc, ReceiptError):
		if exc.status_code < 500:
			return None
		event.setdefault("tags", {})["receipt.failure"] = exc.kind
	req = event.get("request")
	if req:
		headers = req.get("headers") or {}
		for k in list(headers.keys()):
			if k.lower() in _SCRUBBED_HEADERS:
				headers.pop(k, None)
		req.pop("data", None)
	return event


def init_sentry(service: str) -> bool:
	"""Initialise Sentry once for a given process.

	Returns True if Sentry was initialised; False otherwise.
	"""
	if not _enabled():
		return False
	if getattr(init_sentry, "_done", False):  # prevent duplicate init in same process
		return True
	sentry_sdk.init(
		dsn=settings.SENTRY_DSN,
		integrations=[FastApiIntegration(), SqlalchemyIntegration()],
		traces_sample_rate=float(settings.SENTRY_TRACES_SAMPLE_RATE or 0),
		profiles_sample_rate=float(settings.SENTRY_PROFILES_SAMPLE_RATE or 0),
		environment=settings.ENVIRONMENT,
		release=settings.SENTRY_RELEASE,
		before_send=_before_send,
	)
	sentry_sdk.set_tag("service", service)
	init_sentry._done = True  # type: ignore[attr-defined]
	return True


def tag_receipt_request(receipt_number: Optional[str], staff_sub: Optional[str]) -> None:
	"""Tag the current request with the receipt being printed and who asked."""
	if not _enabled():
		return
	sentry_sdk.set_tag("receipt.number", (receipt_number or "")[:128])
	sentry_sdk.set_tag("staff.sub", str(staff_sub or "")[:128])


def receipt_breadcrumb(message: str, level: str = "info", **data: Any) -> None:
	if not _enabled():
		return
	sentry_sdk.add_breadcrumb(category="receipt", message=message, level=level, data=data)


def sentry_capture(exc: BaseException) -> None:
	"""Report an exception; receipt failures are filtered by ``_before_send``."""
	if not _enabled():
		return
	sentry_sdk.capture_exception(exc)


__all__ = ["init_sentry", "tag_receipt_request", "receipt_breadcrumb", "sentry_capture"]
