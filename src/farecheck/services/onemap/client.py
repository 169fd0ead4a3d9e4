"""HTTP client for interacting with OneMap services."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ...config import settings
from ...errors import AuthError, NetworkError, NotFoundError

logger = logging.getLogger(__name__)

SEARCH_PATH = "/common/elastic/search"
REVERSE_GEOCODE_PATH = "/public/revgeocodexy"
ROUTE_PATH = "/public/routingsvc/route"
TOKEN_PATH = "/auth/post/getToken"

REVERSE_BUFFER_METERS = 50


@dataclass(frozen=True, slots=True)
class RouteSummary:
    distance_meters: float
    travel_time_seconds: float


@dataclass(frozen=True, slots=True)
class IssuedToken:
    access_token: str
    expiry_timestamp: str | None


class OneMapClient:
    """Async adapter for the OneMap search, reverse-geocode, routing and auth endpoints.

    A single attempt is made per call; failures surface as :class:`NetworkError`
    (or :class:`AuthError` for a rejected routing token) and callers decide
    whether to degrade.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.onemap_base_url).rstrip("/")
        if not self.base_url:
            raise ValueError("OneMap base URL is not configured.")
        self.timeout = timeout if timeout is not None else settings.onemap_timeout_seconds
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=transport,
        )

    async def __aenter__(self) -> "OneMapClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_json(
        self,
        path: str,
        params: dict[str, str],
        *,
        headers: dict[str, str] | None = None,
        action: str,
    ) -> Any:
        try:
            response = await self._client.get(path, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise NetworkError(f"Network error: {exc}") from exc

        if response.status_code == 401:
            raise AuthError()
        if response.is_error:
            raise NetworkError(
                f"{action} failed: {response.reason_phrase or response.status_code}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError(f"{action} returned an unreadable response") from exc

    async def search(self, search_value: str) -> list[dict[str, Any]]:
        """Search for an address, postal code or building name.

        Returns the ranked candidates; an empty list is a valid answer.
        No authentication required.
        """
        logger.debug(f"OneMap search: {search_value!r}")
        data = await self._get_json(
            SEARCH_PATH,
            {"searchVal": search_value, "returnGeom": "Y", "getAddrDetails": "Y"},
            action="Search request",
        )
        results = data.get("results") if isinstance(data, dict) else None
        return list(results or [])

    async def reverse_geocode(self, lat: float, lng: float) -> dict[str, Any]:
        """Closest address record for a point."""
        data = await self._get_json(
            REVERSE_GEOCODE_PATH,
            {
                "location": f"{lat},{lng}",
                "buffer": str(REVERSE_BUFFER_METERS),
                "addressType": "all",
                "otherFeatures": "Y",
            },
            action="Reverse geocode",
        )
        info = data.get("GeocodeInfo") if isinstance(data, dict) else None
        if not isinstance(info, list) or not info or not isinstance(info[0], dict):
            raise NotFoundError("No address found for this location")
        return info[0]

    async def route(
        self,
        start: tuple[float, float],
        end: tuple[float, float],
        token: str | None,
    ) -> RouteSummary:
        """Driving distance and time between two (lat, lng) points."""
        headers = {"Authorization": token} if token else None
        data = await self._get_json(
            ROUTE_PATH,
            {
                "start": f"{start[0]},{start[1]}",
                "end": f"{end[0]},{end[1]}",
                "routeType": "drive",
            },
            headers=headers,
            action="Routing request",
        )
        summary = data.get("route_summary") if isinstance(data, dict) else None
        if not summary:
            raise NetworkError("Invalid routing response")
        try:
            return RouteSummary(
                distance_meters=float(summary["total_distance"]),
                travel_time_seconds=float(summary["total_time"]),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise NetworkError("Invalid routing response") from exc

    async def fetch_token(self, email: str, password: str) -> IssuedToken:
        """Exchange account credentials for a routing token."""
        try:
            response = await self._client.post(TOKEN_PATH, json={"email": email, "password": password})
        except httpx.HTTPError as exc:
            raise NetworkError(f"Network error: {exc}") from exc
        if response.status_code in (401, 403):
            raise AuthError("OneMap rejected the configured credentials.")
        if response.is_error:
            raise NetworkError(f"Token request failed: {response.status_code}", status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            raise NetworkError("Token request returned an unreadable response") from exc
        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not access_token:
            raise NetworkError("Token response did not include an access token")
        return IssuedToken(access_token=access_token, expiry_timestamp=data.get("expiry_timestamp"))


async def check_health(client: OneMapClient) -> bool:
    """Check OneMap reachability with a cheap, unauthenticated search."""
    try:
        results = await client.search("018989")
    except NetworkError:
        return False
    return isinstance(results, list)
