"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class RouteLeg:
    from_address: str
    to_address: str
    distance_km: float
    time_minutes: float
    is_estimate: bool


@dataclass(frozen=True, slots=True)
class Route:
    legs: Tuple[RouteLeg, ...]
    total_distance_km: float
    total_travel_minutes: float
    has_estimates: bool
    traffic_condition: str


@dataclass(frozen=True, slots=True)
class RouteEfficiency:
    direct_distance_km: float
    actual_distance_km: float
    efficiency_ratio: float
    is_efficient: bool
    analysis: str
