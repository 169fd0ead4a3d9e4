"""Multi-leg routing with per-leg fallback estimation."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Protocol, Sequence

from ...config import settings
from ...errors import AuthError, FarecheckError, InvalidInputError
from ...models.domain import Location
from ..geospatial import haversine_km
from ..onemap.client import RouteSummary
from ..onemap.tokens import StaticTokenProvider, TokenProvider
from .models import Route, RouteEfficiency, RouteLeg
from .traffic import detect_traffic_condition, traffic_speed

logger = logging.getLogger(__name__)


class RoutingService(Protocol):
    async def route(
        self,
        start: tuple[float, float],
        end: tuple[float, float],
        token: str | None,
    ) -> RouteSummary: ...


def estimate_leg(
    start: Location,
    end: Location,
    traffic_condition: str | None,
    *,
    road_factor: float | None = None,
) -> RouteLeg:
    """Straight-line distance scaled to road distance, timed at the traffic speed.

    Pure function of the coordinates and traffic condition.
    """
    factor = road_factor if road_factor is not None else settings.road_factor
    distance_km = haversine_km(start.latitude, start.longitude, end.latitude, end.longitude) * factor
    time_minutes = distance_km / traffic_speed(traffic_condition) * 60.0
    return RouteLeg(
        from_address=start.formatted_address,
        to_address=end.formatted_address,
        distance_km=distance_km,
        time_minutes=time_minutes,
        is_estimate=True,
    )


def leg_from_summary(
    start: Location,
    end: Location,
    summary: RouteSummary,
    traffic_condition: str | None,
    *,
    reference_speed: float | None = None,
) -> RouteLeg:
    """Convert a routing service answer, scaling its time to the traffic condition."""
    baseline = reference_speed if reference_speed is not None else settings.average_speed_kmh
    service_minutes = summary.travel_time_seconds / 60.0
    return RouteLeg(
        from_address=start.formatted_address,
        to_address=end.formatted_address,
        distance_km=summary.distance_meters / 1000.0,
        time_minutes=service_minutes * (baseline / traffic_speed(traffic_condition)),
        is_estimate=False,
    )


class Router:
    """Computes routes across ordered points.

    Legs are requested one at a time to stay inside the routing service's rate
    limits. A failed leg is replaced by an estimate and never aborts the route.
    """

    def __init__(
        self,
        service: RoutingService | None,
        tokens: TokenProvider | None = None,
        *,
        road_factor: float | None = None,
        reference_speed: float | None = None,
    ) -> None:
        self.service = service
        self.tokens = tokens or StaticTokenProvider(None)
        self.road_factor = road_factor if road_factor is not None else settings.road_factor
        self.reference_speed = reference_speed if reference_speed is not None else settings.average_speed_kmh

    async def try_live_leg(
        self,
        start: Location,
        end: Location,
        token: str | None,
        traffic_condition: str,
    ) -> RouteLeg | None:
        """Single attempt against the routing service; None when it is unavailable."""
        if self.service is None or not token:
            return None
        summary = await self.service.route(
            (start.latitude, start.longitude),
            (end.latitude, end.longitude),
            token,
        )
        return leg_from_summary(start, end, summary, traffic_condition, reference_speed=self.reference_speed)

    async def _token(self, fetch: Callable[[], Awaitable[str | None]]) -> str | None:
        # A broken token provider degrades to estimate-only routing.
        try:
            return await fetch()
        except Exception as exc:
            logger.warning(f"Routing token unavailable, estimating remaining legs: {exc}")
            return None

    async def compute_route(
        self,
        points: Sequence[Location],
        traffic_condition: str | None = None,
    ) -> Route:
        if len(points) < 2:
            raise InvalidInputError("Need at least 2 points for a route")

        traffic = traffic_condition or detect_traffic_condition()
        token = await self._token(self.tokens.get)
        if not token:
            logger.info("No routing token available, estimating all legs")

        legs: list[RouteLeg] = []
        for index, (start, end) in enumerate(zip(points, points[1:]), start=1):
            leg: RouteLeg | None = None
            try:
                leg = await self.try_live_leg(start, end, token, traffic)
            except AuthError as exc:
                logger.warning(f"Routing token rejected on leg {index}, using estimate: {exc}")
                token = await self._token(self.tokens.refresh)
            except FarecheckError as exc:
                logger.warning(f"Route API failed for leg {index}, using estimate: {exc}")
            except Exception as exc:
                logger.error(f"Unexpected routing failure on leg {index}, using estimate: {exc}")
            if leg is None:
                leg = estimate_leg(start, end, traffic, road_factor=self.road_factor)
            legs.append(leg)

        route = Route(
            legs=tuple(legs),
            total_distance_km=sum(leg.distance_km for leg in legs),
            total_travel_minutes=sum(leg.time_minutes for leg in legs),
            has_estimates=any(leg.is_estimate for leg in legs),
            traffic_condition=traffic,
        )
        logger.info(
            f"Route computed: {len(legs)} legs, {route.total_distance_km:.2f} km, "
            f"{route.total_travel_minutes:.1f} min, traffic={traffic}, estimates={route.has_estimates}"
        )
        return route


def analyze_route_efficiency(route: Route, start: Location, end: Location) -> RouteEfficiency:
    """Compare the travelled distance against the straight line from start to end."""
    direct = haversine_km(start.latitude, start.longitude, end.latitude, end.longitude)
    ratio = direct / route.total_distance_km if route.total_distance_km > 0 else 0.0

    if ratio > 0.8:
        analysis = "Very efficient route"
    elif ratio > 0.6:
        analysis = "Reasonably efficient"
    elif ratio > 0.4:
        analysis = "Some backtracking"
    else:
        analysis = "Significant detours - consider if worth it"

    return RouteEfficiency(
        direct_distance_km=direct,
        actual_distance_km=route.total_distance_km,
        efficiency_ratio=ratio,
        is_efficient=ratio > 0.6,
        analysis=analysis,
    )
