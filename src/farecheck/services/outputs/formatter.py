"""Serializers for analysis outputs."""

from __future__ import annotations

import csv
import io
import math
from dataclasses import asdict

from ...models.domain import Location
from ..analysis.models import AnalysisReport
from ..pricing.models import OrderComparison, ProfitabilityResult
from ..routing.models import Route


def _finite(value: float) -> float | None:
    # JSON has no NaN/Infinity; zero-distance routes produce a NaN cost per km.
    return value if math.isfinite(value) else None


def location_to_json(location: Location) -> dict:
    return {
        "latitude": location.latitude,
        "longitude": location.longitude,
        "formatted_address": location.formatted_address,
        "postal_code": location.postal_code,
        "building_type": location.building_type.value,
        "building_name": location.building_name,
    }


def route_to_json(route: Route) -> dict:
    return {
        "legs": [asdict(leg) for leg in route.legs],
        "total_distance_km": route.total_distance_km,
        "total_travel_minutes": route.total_travel_minutes,
        "has_estimates": route.has_estimates,
        "traffic_condition": route.traffic_condition,
    }


def profitability_to_json(result: ProfitabilityResult) -> dict:
    return {
        "fare": result.fare,
        "net_fare": result.net_fare,
        "fare_breakdown": asdict(result.fare_breakdown),
        "fuel_cost": result.fuel_cost,
        "net_profit": result.net_profit,
        "total_time_minutes": result.total_time_minutes,
        "profit_per_hour": result.profit_per_hour,
        "rating": result.rating.value,
        "breakdown": asdict(result.breakdown),
    }


def report_to_json(report: AnalysisReport) -> dict:
    return {
        "locations": {
            "current": location_to_json(report.locations.current),
            "pickup": location_to_json(report.locations.pickup),
            "stops": [location_to_json(stop) for stop in report.locations.stops],
        },
        "route": route_to_json(report.route),
        "route_efficiency": asdict(report.route_efficiency),
        "fuel": {
            "litres_used": report.fuel.litres_used,
            "cost": report.fuel.cost,
            "cost_per_km": _finite(report.fuel.cost_per_km),
        },
        "wait_time": {
            "total": report.wait_time.total,
            "pickup_wait": report.wait_time.pickup_wait,
            "per_stop": [
                {**asdict(item), "building_type": item.building_type.value}
                for item in report.wait_time.per_stop
            ],
        },
        "profitability": profitability_to_json(report.profitability),
        "insights": {
            "insights": [asdict(item) for item in report.insights.insights],
            "recommendations": list(report.insights.recommendations),
            "minimum_fare_for_good": report.insights.minimum_fare_for_good,
        },
        "inputs": asdict(report.inputs),
    }


def comparison_to_json(comparison: OrderComparison, first: AnalysisReport, second: AnalysisReport) -> dict:
    return {
        **asdict(comparison),
        "orders": [
            profitability_to_json(first.profitability),
            profitability_to_json(second.profitability),
        ],
    }


def scenarios_to_json(scenarios: list[tuple[float, ProfitabilityResult]]) -> list[dict]:
    return [profitability_to_json(result) for _, result in scenarios]


def route_to_csv(route: Route) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "sequence",
        "from_address",
        "to_address",
        "distance_km",
        "time_minutes",
        "is_estimate",
        "traffic_condition",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for sequence, leg in enumerate(route.legs, start=1):
        writer.writerow(
            {
                "sequence": sequence,
                "from_address": leg.from_address,
                "to_address": leg.to_address,
                "distance_km": round(leg.distance_km, 3),
                "time_minutes": round(leg.time_minutes, 1),
                "is_estimate": leg.is_estimate,
                "traffic_condition": route.traffic_condition,
            }
        )
    return buffer.getvalue()
