"""Profitability rating and recommendations for a single order."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from ...config import settings
from .fares import FareDeductionEngine
from .models import (
    Insight,
    Insights,
    OrderComparison,
    ProfitabilityResult,
    Rating,
    TimeBreakdown,
)

# Hourly profit thresholds in $/hour, highest first; lower bounds are inclusive.
# "poor" sits below the okay band and is roughly under minimum wage.
PROFIT_THRESHOLDS: tuple[tuple[Rating, float], ...] = (
    (Rating.EXCELLENT, 20.0),
    (Rating.GOOD, 15.0),
    (Rating.OKAY, 10.0),
)

RATING_LABELS: dict[Rating, str] = {
    Rating.EXCELLENT: "Excellent",
    Rating.GOOD: "Good",
    Rating.OKAY: "Okay",
    Rating.POOR: "Poor",
}

GOOD_THRESHOLD = dict(PROFIT_THRESHOLDS)[Rating.GOOD]
HIGH_FUEL_SHARE_PERCENT = 20.0


def rate(profit_per_hour: float) -> Rating:
    for rating, minimum in PROFIT_THRESHOLDS:
        if profit_per_hour >= minimum:
            return rating
    return Rating.POOR


def minimum_fare(fuel_cost: float, total_time_minutes: float, target_hourly_rate: float) -> float:
    """Fare needed to cover fuel and earn ``target_hourly_rate`` over the order."""
    return fuel_cost + target_hourly_rate * (total_time_minutes / 60.0)


class ProfitabilityEngine:
    def __init__(self, fares: FareDeductionEngine | None = None) -> None:
        self.fares = fares or FareDeductionEngine()

    def evaluate(
        self,
        *,
        fare: float,
        fuel_cost: float,
        travel_minutes: float,
        wait_minutes: float,
        pickup_wait_minutes: float | None = None,
    ) -> ProfitabilityResult:
        if pickup_wait_minutes is None:
            pickup_wait_minutes = settings.pickup_wait_minutes

        fare_breakdown = self.fares.breakdown(fare)
        net_fare = fare_breakdown.net_fare
        net_profit = net_fare - fuel_cost

        total_time_minutes = travel_minutes + wait_minutes + pickup_wait_minutes
        profit_per_hour = net_profit / (total_time_minutes / 60.0) if total_time_minutes > 0 else 0.0

        return ProfitabilityResult(
            fare=fare,
            net_fare=net_fare,
            fare_breakdown=fare_breakdown,
            fuel_cost=fuel_cost,
            net_profit=net_profit,
            total_time_minutes=total_time_minutes,
            profit_per_hour=profit_per_hour,
            rating=rate(profit_per_hour),
            breakdown=TimeBreakdown(
                travel_minutes=travel_minutes,
                wait_minutes=wait_minutes,
                pickup_wait_minutes=pickup_wait_minutes,
                fuel_cost_percentage=(fuel_cost / net_fare) * 100 if net_fare > 0 else 0.0,
            ),
        )

    def insights(self, result: ProfitabilityResult) -> Insights:
        """Informational notes and recommendations; never changes the rating."""
        insights: list[Insight] = []
        recommendations: list[str] = []
        breakdown = result.breakdown

        if breakdown.fuel_cost_percentage > HIGH_FUEL_SHARE_PERCENT:
            insights.append(
                Insight("warning", f"Fuel cost is {breakdown.fuel_cost_percentage:.1f}% of fare - quite high")
            )
            recommendations.append("Consider avoiding long-distance, low-fare orders")

        if breakdown.wait_minutes > breakdown.travel_minutes:
            insights.append(Insight("info", "Wait time exceeds travel time - multiple stops or slow handovers"))
            recommendations.append("Wait times are eating into your earnings")

        if result.rating is Rating.POOR:
            insights.append(
                Insight("warning", f"At ${result.profit_per_hour:.2f}/hr, this is below minimum wage")
            )
            recommendations.append("Consider declining unless it positions you well for better orders")
        elif result.rating is Rating.EXCELLENT:
            insights.append(Insight("success", "Excellent hourly rate - prioritize this order"))

        min_fare_for_good = minimum_fare(result.fuel_cost, result.total_time_minutes, GOOD_THRESHOLD)
        if result.fare < min_fare_for_good and result.rating not in (Rating.EXCELLENT, Rating.GOOD):
            recommendations.append(f'Fare would need to be ${min_fare_for_good:.2f} for a "Good" rating')

        return Insights(
            insights=tuple(insights),
            recommendations=tuple(recommendations),
            minimum_fare_for_good=min_fare_for_good,
        )

    def fare_scenarios(
        self,
        base_params: Mapping[str, Any],
        fare_options: Iterable[float],
    ) -> list[tuple[float, ProfitabilityResult]]:
        """Re-evaluate the same order at several fares."""
        params = {key: value for key, value in base_params.items() if key != "fare"}
        return [(fare, self.evaluate(fare=fare, **params)) for fare in fare_options]


def compare_orders(first: ProfitabilityResult, second: ProfitabilityResult) -> OrderComparison:
    profit_diff = first.profit_per_hour - second.profit_per_hour

    if profit_diff > 5:
        recommendation = "Strong preference for order 1"
    elif profit_diff > 2:
        recommendation = "Slight preference for order 1"
    elif profit_diff > -2:
        recommendation = "Similar profitability"
    elif profit_diff > -5:
        recommendation = "Slight preference for order 2"
    else:
        recommendation = "Strong preference for order 2"

    return OrderComparison(
        better_order=1 if profit_diff >= 0 else 2,
        profit_per_hour_difference=abs(profit_diff),
        time_difference=first.total_time_minutes - second.total_time_minutes,
        recommendation=recommendation,
    )
