# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""CSRF token handling for the verify endpoint.

Double-submit scheme: the scanner page sets a random token in a cookie
and repeats it in a ``<meta name="csrf-token">`` tag. Clients read the
meta tag and send the value back in the ``X-CSRF-TOKEN`` header, which
must match the cookie.
"""

import logging
import secrets
from typing import Optional

from fastapi import Header, HTTPException, Request

logger = logging.getLogger(__name__)

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "X-CSRF-TOKEN"

# Status used for an expired or mismatched token
CSRF_FAILURE_STATUS = 419


def generate_token() -> str:
    """Generate a fresh CSRF token."""
    return secrets.token_urlsafe(32)


def get_or_create_token(request: Request) -> str:
    """Return the token from the request cookie, or a new one."""
    return request.cookies.get(CSRF_COOKIE_NAME) or generate_token()


def tokens_match(cookie_token: Optional[str], header_token: Optional[str]) -> bool:
    """Compare cookie and header tokens in constant time."""
    if not cookie_token or not header_token:
        return False
    return secrets.compare_digest(cookie_token, header_token)


async def require_csrf_token(
    request: Request,
    x_csrf_token: Optional[str] = Header(default=None, alias=CSRF_HEADER_NAME),
) -> None:
    """FastAPI dependency rejecting requests without a matching CSRF token.

    Disabled when server.csrf_enabled is false.
    """
    settings = request.app.state.settings
    if not settings.server.csrf_enabled:
        return

    if not tokens_match(request.cookies.get(CSRF_COOKIE_NAME), x_csrf_token):
        logger.warning(f"CSRF token mismatch from {request.client.host if request.client else 'unknown'}")
        raise HTTPException(status_code=CSRF_FAILURE_STATUS, detail="CSRF token mismatch.")
