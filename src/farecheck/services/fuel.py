"""Fuel cost calculation and bike efficiency lookups."""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..errors import InvalidParameterError

MAX_EFFICIENCY_KM_PER_L = 100.0
REFERENCE_DISTANCES_KM = (5, 10, 15, 20, 30, 50)


@dataclass(frozen=True, slots=True)
class BikeModel:
    id: str
    name: str
    efficiency: float | None


@dataclass(frozen=True, slots=True)
class FuelCost:
    litres_used: float
    cost: float
    cost_per_km: float


# Popular delivery bikes in Singapore, efficiency in km/L.
BIKE_MODELS: tuple[BikeModel, ...] = (
    BikeModel("ybr125", "Yamaha YBR125", 45),
    BikeModel("wave125", "Honda Wave 125", 50),
    BikeModel("cb125f", "Honda CB125F", 47),
    BikeModel("pcx160", "Honda PCX160", 40),
    BikeModel("nmax155", "Yamaha NMAX 155", 38),
    BikeModel("y15zr", "Yamaha Y15ZR", 40),
    BikeModel("raider150", "Suzuki Raider 150", 38),
    BikeModel("cbf150", "Honda CBF150", 40),
    BikeModel("kriss110", "Modenas Kriss 110", 55),
    BikeModel("ex5", "Honda EX5", 55),
    BikeModel("custom", "Custom / Other", None),
)


def is_valid_efficiency(efficiency: float | None) -> bool:
    return (
        isinstance(efficiency, (int, float))
        and not isinstance(efficiency, bool)
        and 0 < efficiency <= MAX_EFFICIENCY_KM_PER_L
    )


def cost(distance_km: float, efficiency_km_per_l: float, price_per_litre: float) -> FuelCost:
    """Fuel cost for ``distance_km``.

    ``cost_per_km`` is NaN for a zero distance; callers format it for display.
    """
    if not is_valid_efficiency(efficiency_km_per_l):
        raise InvalidParameterError(f"Invalid fuel efficiency: {efficiency_km_per_l}")
    if price_per_litre <= 0:
        raise InvalidParameterError(f"Invalid petrol price: {price_per_litre}")

    litres_used = distance_km / efficiency_km_per_l
    total = litres_used * price_per_litre
    cost_per_km = total / distance_km if distance_km else math.nan
    return FuelCost(litres_used=litres_used, cost=total, cost_per_km=cost_per_km)


def get_bike_model(bike_id: str | None) -> BikeModel | None:
    for bike in BIKE_MODELS:
        if bike.id == bike_id:
            return bike
    return None


def bike_efficiency(bike_id: str | None) -> float | None:
    """Efficiency for a catalogue bike; None for unknown ids and ``custom``."""
    bike = get_bike_model(bike_id)
    return bike.efficiency if bike else None


def break_even_fare(
    distance_km: float,
    efficiency_km_per_l: float,
    price_per_litre: float,
    margin_percent: float = 0,
) -> float:
    """Minimum fare that covers fuel plus an optional margin."""
    fuel = cost(distance_km, efficiency_km_per_l, price_per_litre)
    return fuel.cost * (1 + margin_percent / 100)


def cost_estimates(efficiency_km_per_l: float, price_per_litre: float) -> dict[str, float]:
    return {
        f"{km}km": cost(km, efficiency_km_per_l, price_per_litre).cost
        for km in REFERENCE_DISTANCES_KM
    }
