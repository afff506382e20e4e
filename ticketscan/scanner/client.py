# =============================================================================
# DISCLAIMER: This software is NOT a ticketing or access-control system and is
# NOT intended for admitting people to real events. This is a proof of concept
# for educational purposes only. Do not rely on it to validate real tickets.
# =============================================================================
"""HTTP client for the ticket verification service.

Reads the CSRF token from the scanner page metadata and posts decoded
payloads to the verify endpoint.
"""

import asyncio
import logging
import re
from typing import Optional

import aiohttp

from ticketscan.api.csrf import CSRF_HEADER_NAME
from ticketscan.models.ticket import ScanResult

logger = logging.getLogger(__name__)

_META_TAG_RE = re.compile(r"<meta\b[^>]*>", re.IGNORECASE)
_ATTR_RE = re.compile(r"""([\w-]+)\s*=\s*["']([^"']*)["']""")


class VerificationError(Exception):
    """Verification call failed (network, HTTP status or bad response)."""


def parse_csrf_token(html: str) -> Optional[str]:
    """Extract the csrf-token meta value from a page.

    Attributes may appear in any order.
    """
    for tag in _META_TAG_RE.findall(html):
        attrs = {name.lower(): value for name, value in _ATTR_RE.findall(tag)}
        if attrs.get("name", "").lower() == "csrf-token":
            return attrs.get("content")
    return None


class VerificationClient:
    """Client for the verify endpoint.

    Usage:
        async with VerificationClient("http://localhost:8000") as client:
            result = await client.verify("VALID-123")
            print(result.message)
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        verify_path: str = "/api/verify",
        timeout_seconds: Optional[float] = None,
        csrf_token: Optional[str] = None,
    ):
        """Initialize verification client.

        Args:
            base_url: Service URL (e.g., http://localhost:8000)
            verify_path: Path of the verify endpoint
            timeout_seconds: Total request timeout (None = no timeout)
            csrf_token: Token to send; fetched from the scanner page if not given
        """
        self.base_url = base_url.rstrip("/")
        self.verify_path = verify_path
        self.timeout_seconds = timeout_seconds
        self._csrf_token = csrf_token
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def verify_url(self) -> str:
        return f"{self.base_url}{self.verify_path}"

    @property
    def csrf_token(self) -> Optional[str]:
        return self._csrf_token

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
            # unsafe=True keeps the CSRF cookie for IP-address hosts
            self._session = aiohttp.ClientSession(
                timeout=timeout,
                cookie_jar=aiohttp.CookieJar(unsafe=True),
            )
        return self._session

    async def close(self) -> None:
        """Close the client and cleanup resources."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "VerificationClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def fetch_csrf_token(self) -> Optional[str]:
        """Load the scanner page and read its csrf-token meta tag.

        Raises:
            VerificationError: If the page cannot be loaded
        """
        try:
            session = await self._get_session()
            async with session.get(f"{self.base_url}/") as resp:
                if resp.status != 200:
                    raise VerificationError(f"Scanner page returned HTTP {resp.status}")
                html = await resp.text()
        except asyncio.TimeoutError as e:
            raise VerificationError("Connection timeout") from e
        except aiohttp.ClientError as e:
            raise VerificationError(f"Connection error: {e}") from e

        token = parse_csrf_token(html)
        if token is None:
            logger.warning("Scanner page has no csrf-token meta tag")
        self._csrf_token = token
        return token

    async def verify(self, payload: str) -> ScanResult:
        """Post a payload to the verify endpoint.

        Args:
            payload: Decoded QR payload or manually entered text

        Returns:
            ScanResult from the service

        Raises:
            VerificationError: On network failure, non-2xx status or bad body
        """
        if self._csrf_token is None:
            await self.fetch_csrf_token()

        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            CSRF_HEADER_NAME: self._csrf_token or "",
        }

        try:
            session = await self._get_session()
            async with session.post(self.verify_url, json={"qrcode": payload}, headers=headers) as resp:
                if resp.status >= 400:
                    raise VerificationError(f"HTTP {resp.status}")
                data = await resp.json()
        except asyncio.TimeoutError as e:
            raise VerificationError("Connection timeout") from e
        except aiohttp.ClientError as e:
            raise VerificationError(f"Connection error: {e}") from e
        except ValueError as e:
            raise VerificationError(f"Invalid JSON in verify response: {e}") from e

        try:
            return ScanResult.from_dict(data)
        except (AttributeError, TypeError, ValueError) as e:
            raise VerificationError(f"Malformed verify response: {e}") from e
