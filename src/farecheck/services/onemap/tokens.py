"""Routing token providers.

The router only needs "a token string or None". Providers own the rest of the
lifecycle: caching, expiry checks and refreshing. Concurrent callers may race
to refresh; the worst case is a redundant token request.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Protocol

from ...errors import FarecheckError
from .client import OneMapClient

logger = logging.getLogger(__name__)


class TokenProvider(Protocol):
    async def get(self) -> str | None: ...

    async def refresh(self) -> str | None: ...


class StaticTokenProvider:
    """Returns a fixed token (or None for estimate-only routing)."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token or None

    async def get(self) -> str | None:
        return self._token

    async def refresh(self) -> str | None:
        return self._token


def parse_expiry(value: str | int | float | None) -> datetime | None:
    """Parse OneMap's expiry (epoch seconds or ISO-8601) into an aware datetime."""
    if value is None or value == "":
        return None
    try:
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        pass
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


class OneMapTokenProvider:
    """Fetches routing tokens with account credentials and caches them until expiry."""

    def __init__(
        self,
        client: OneMapClient,
        email: str | None,
        password: str | None,
        *,
        initial_token: str | None = None,
        initial_expiry: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._email = email
        self._password = password
        self._token = initial_token or None
        self._expiry = parse_expiry(initial_expiry)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def has_credentials(self) -> bool:
        return bool(self._email and self._password)

    def is_expired(self) -> bool:
        if self._expiry is None:
            return True
        return self._clock() >= self._expiry

    async def get(self) -> str | None:
        if self._token and not self.is_expired():
            return self._token
        fresh = await self.refresh()
        if fresh:
            return fresh
        # An expired token may still be accepted; let the routing call decide.
        return self._token

    async def refresh(self) -> str | None:
        if not self.has_credentials:
            return None
        try:
            issued = await self._client.fetch_token(self._email, self._password)
        except FarecheckError as exc:
            logger.warning(f"Failed to fetch OneMap token: {exc}")
            return None
        self._token = issued.access_token
        self._expiry = parse_expiry(issued.expiry_timestamp)
        logger.info(f"OneMap token refreshed (expires: {issued.expiry_timestamp})")
        return self._token
