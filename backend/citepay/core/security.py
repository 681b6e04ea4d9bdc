"""Security and authentication utilities.

Staff sessions are carried as signed JWTs (HS256 by default, keyed by
``SECRET_KEY``) issued by the front office login.  The token's ``sub`` claim
identifies the staff member and its ``roles`` claim lists what they may do.
Only roles listed in ``PAYMENT_VIEWER_ROLES`` may open payment records and
print receipts.
"""

from __future__ import annotations

import logging
from types import SimpleNamespace
from typing import Dict, Iterable

from fastapi import HTTPException, Request, status
from jose import JWTError, jwt

from citepay.core.config import settings
from citepay.core.errors import ACCESS_DENIED, Forbidden
from citepay.models.enums import UserRole

logger = logging.getLogger(__name__)


def decode_access_token(token: str) -> Dict:
    """Decode and verify a staff session token.

    Raises:
        HTTPException: 401 if the token is malformed, expired or unsigned.
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=f"Invalid session token: {exc}") from exc


def create_access_token(sub: str, roles: Iterable[str], **claims) -> str:
    """Issue a session token; used by the login flow and by tests."""
    payload = {"sub": sub, "roles": list(roles), **claims}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def get_principal(request: Request) -> SimpleNamespace:
    """Return a simple object representing the calling staff member."""
    if settings.DEV_AUTH_BYPASS:
        # In dev mode we return a fake principal with minimal claims
        return SimpleNamespace(sub="dev_user", name="Dev User", roles=[UserRole.ADMIN.value])
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing session token")
    payload = decode_access_token(auth_header.split(" ", 1)[1])
    if not payload.get("sub"):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid session token: no sub claim")
    return SimpleNamespace(
        sub=payload.get("sub"),
        name=payload.get("name"),
        roles=list(payload.get("roles") or []),
    )


def can_view_payments(principal: SimpleNamespace) -> bool:
    allowed = {r.lower() for r in settings.PAYMENT_VIEWER_ROLES}
    return any(str(r).lower() in allowed for r in getattr(principal, "roles", []))


def require_payment_viewer(principal: SimpleNamespace) -> SimpleNamespace:
    """Ensure the caller may view payment records."""
    if not can_view_payments(principal):
        logger.info("Denied receipt access for %s (roles=%s)", principal.sub, principal.roles)
        raise Forbidden(ACCESS_DENIED)
    return principal
