"""Order analysis orchestration service."""

from __future__ import annotations

import logging

from ...config import settings
from ...errors import CalculationInProgressError, InvalidConfigurationError
from ...schemas.analysis import AnalysisRequest
from .. import fuel as fuel_service
from .. import wait_time as wait_time_service
from ..geocoding import Geocoder
from ..onemap.client import OneMapClient
from ..onemap.tokens import OneMapTokenProvider, StaticTokenProvider, TokenProvider
from ..pricing.profitability import ProfitabilityEngine
from ..routing.service import Router, analyze_route_efficiency
from .models import AnalysisInputs, AnalysisReport, ResolvedLocations

logger = logging.getLogger(__name__)


def resolve_efficiency(bike_model: str | None, custom_efficiency: float | None) -> float:
    """Catalogue efficiency for ``bike_model``, else the custom value."""
    efficiency = fuel_service.bike_efficiency(bike_model)
    if efficiency is None:
        efficiency = custom_efficiency
    if not efficiency or efficiency <= 0:
        raise InvalidConfigurationError(
            "Invalid fuel efficiency. Please select a bike model or enter a custom value."
        )
    return efficiency


class OrderAnalyzer:
    """Runs the full profitability pipeline for one order at a time.

    A second call while one is running is rejected with
    :class:`CalculationInProgressError`; nothing is queued or cancelled.
    """

    def __init__(
        self,
        geocoder: Geocoder,
        router: Router,
        profitability: ProfitabilityEngine | None = None,
        *,
        pickup_wait_minutes: float | None = None,
    ) -> None:
        self.geocoder = geocoder
        self.router = router
        self.profitability = profitability or ProfitabilityEngine()
        self.pickup_wait_minutes = (
            pickup_wait_minutes if pickup_wait_minutes is not None else settings.pickup_wait_minutes
        )
        self._in_flight = False
        self.last_result: AnalysisReport | None = None

    @property
    def is_calculating(self) -> bool:
        return self._in_flight

    async def analyze(self, payload: AnalysisRequest) -> AnalysisReport:
        if self._in_flight:
            raise CalculationInProgressError("Calculation already in progress")
        self._in_flight = True
        try:
            report = await self._run(payload)
        finally:
            self._in_flight = False
        self.last_result = report
        return report

    async def _run(self, payload: AnalysisRequest) -> AnalysisReport:
        # Configuration problems must fail before any lookups are spent.
        efficiency = resolve_efficiency(payload.bike_model, payload.custom_efficiency)

        locations = await self.geocoder.resolve_all(
            [payload.current_location, payload.pickup, *payload.stops]
        )
        current, pickup, *stops = locations

        route = await self.router.compute_route(locations, payload.traffic_condition)

        fuel = fuel_service.cost(route.total_distance_km, efficiency, payload.petrol_price)

        wait_time = wait_time_service.estimate_all(
            stops,
            payload.wait_overrides,
            self.pickup_wait_minutes,
        )

        profitability = self.profitability.evaluate(
            fare=payload.fare,
            fuel_cost=fuel.cost,
            travel_minutes=route.total_travel_minutes,
            wait_minutes=wait_time.total,
            pickup_wait_minutes=wait_time.pickup_wait,
        )
        logger.info(
            f"Order analysed: fare=${payload.fare:.2f}, net profit=${profitability.net_profit:.2f}, "
            f"${profitability.profit_per_hour:.2f}/hr ({profitability.rating.value})"
        )

        return AnalysisReport(
            locations=ResolvedLocations(current=current, pickup=pickup, stops=tuple(stops)),
            route=route,
            route_efficiency=analyze_route_efficiency(route, current, stops[-1]),
            fuel=fuel,
            wait_time=wait_time,
            profitability=profitability,
            insights=self.profitability.insights(profitability),
            inputs=AnalysisInputs(
                fare=payload.fare,
                efficiency=efficiency,
                petrol_price=payload.petrol_price,
            ),
        )


def build_token_provider(client: OneMapClient) -> TokenProvider:
    if settings.onemap_email and settings.onemap_password:
        return OneMapTokenProvider(
            client,
            settings.onemap_email,
            settings.onemap_password,
            initial_token=settings.onemap_token,
        )
    return StaticTokenProvider(settings.onemap_token)


def build_analyzer(client: OneMapClient, tokens: TokenProvider | None = None) -> OrderAnalyzer:
    """Wire the pipeline against a OneMap client using the configured settings."""
    return OrderAnalyzer(
        geocoder=Geocoder(client),
        router=Router(client, tokens or build_token_provider(client)),
    )
