"""Pricing domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Rating(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    OKAY = "okay"
    POOR = "poor"


@dataclass(frozen=True, slots=True)
class FareBreakdown:
    gross_fare: float
    base_fare: float
    commission: float
    vat: float
    cpf_withholding: float
    platform_fee: float
    total_deductions: float
    net_fare: float


@dataclass(frozen=True, slots=True)
class TimeBreakdown:
    travel_minutes: float
    wait_minutes: float
    pickup_wait_minutes: float
    fuel_cost_percentage: float


@dataclass(frozen=True, slots=True)
class ProfitabilityResult:
    fare: float
    net_fare: float
    fare_breakdown: FareBreakdown
    fuel_cost: float
    net_profit: float
    total_time_minutes: float
    profit_per_hour: float
    rating: Rating
    breakdown: TimeBreakdown


@dataclass(frozen=True, slots=True)
class Insight:
    type: str
    message: str


@dataclass(frozen=True, slots=True)
class Insights:
    insights: tuple[Insight, ...]
    recommendations: tuple[str, ...]
    minimum_fare_for_good: float


@dataclass(frozen=True, slots=True)
class OrderComparison:
    better_order: int
    profit_per_hour_difference: float
    time_difference: float
    recommendation: str
