"""Analysis report models."""

from __future__ import annotations

from dataclasses import dataclass

from ...models.domain import Location
from ..fuel import FuelCost
from ..pricing.models import Insights, ProfitabilityResult
from ..routing.models import Route, RouteEfficiency
from ..wait_time import WaitTimeSummary


@dataclass(frozen=True, slots=True)
class ResolvedLocations:
    current: Location
    pickup: Location
    stops: tuple[Location, ...]


@dataclass(frozen=True, slots=True)
class AnalysisInputs:
    fare: float
    efficiency: float
    petrol_price: float


@dataclass(frozen=True, slots=True)
class AnalysisReport:
    locations: ResolvedLocations
    route: Route
    route_efficiency: RouteEfficiency
    fuel: FuelCost
    wait_time: WaitTimeSummary
    profitability: ProfitabilityResult
    insights: Insights
    inputs: AnalysisInputs
