"""Reference data used by clients to build the order form."""

from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from ...config import settings
from ...services import fuel as fuel_service
from ...services.fuel import BIKE_MODELS, MAX_EFFICIENCY_KM_PER_L
from ...services.pricing.profitability import PROFIT_THRESHOLDS, RATING_LABELS
from ...services.routing.traffic import TRAFFIC_CONDITIONS, detect_traffic_condition
from ...services.wait_time import CONFIDENCE_LEVELS, WAIT_TIMES, adjust_for_time_of_day, estimate

router = APIRouter(prefix="/reference", tags=["reference"])


@router.get("/bikes", status_code=status.HTTP_200_OK)
def bikes() -> list[dict]:
    return [asdict(bike) for bike in BIKE_MODELS]


@router.get("/wait-times", status_code=status.HTTP_200_OK)
def wait_times(hour: Optional[int] = Query(default=None, ge=0, le=23)) -> dict:
    """Wait table per building type; with ``hour``, includes the peak-hour adjusted estimate."""
    table = {}
    for building_type, profile in WAIT_TIMES.items():
        entry = {**asdict(profile), "confidence": asdict(CONFIDENCE_LEVELS[building_type])}
        if hour is not None:
            adjusted = adjust_for_time_of_day(estimate(building_type), hour)
            entry["adjusted"] = {"minutes": adjusted.minutes, "description": adjusted.description}
        table[building_type.value] = entry
    return table


@router.get("/fuel-costs", status_code=status.HTTP_200_OK)
def fuel_costs(
    bike_model: Optional[str] = Query(default=None),
    efficiency: Optional[float] = Query(default=None, gt=0, le=MAX_EFFICIENCY_KM_PER_L),
    petrol_price: Optional[float] = Query(default=None, gt=0, le=10),
    distance_km: Optional[float] = Query(default=None, ge=0, le=500),
    margin_percent: float = Query(default=0, ge=0, le=500),
) -> dict:
    """Fuel cost at reference distances, plus a break-even fare when ``distance_km`` is given."""
    km_per_litre = fuel_service.bike_efficiency(bike_model.strip().lower() if bike_model else None) or efficiency
    if km_per_litre is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Select a catalogue bike model or provide a custom efficiency.",
        )
    price = petrol_price if petrol_price is not None else settings.default_petrol_price
    payload = {
        "efficiency": km_per_litre,
        "petrol_price": price,
        "estimates": fuel_service.cost_estimates(km_per_litre, price),
    }
    if distance_km is not None:
        payload["break_even_fare"] = fuel_service.break_even_fare(distance_km, km_per_litre, price, margin_percent)
    return payload


@router.get("/traffic", status_code=status.HTTP_200_OK)
def traffic() -> dict:
    return {
        "current": detect_traffic_condition(),
        "reference_speed_kmh": settings.average_speed_kmh,
        "conditions": {key: asdict(condition) for key, condition in TRAFFIC_CONDITIONS.items()},
    }


@router.get("/thresholds", status_code=status.HTTP_200_OK)
def thresholds() -> dict:
    bands = {rating.value: {"min": minimum, "label": RATING_LABELS[rating]} for rating, minimum in PROFIT_THRESHOLDS}
    return {**bands, "poor": {"min": 0.0, "label": "Poor"}}
