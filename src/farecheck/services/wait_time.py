"""Wait time estimation based on building types."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Mapping, Sequence

from ..models.domain import BuildingType, Location


@dataclass(frozen=True, slots=True)
class WaitProfile:
    minutes: float
    label: str
    description: str


@dataclass(frozen=True, slots=True)
class WaitEstimate:
    minutes: float
    building_type: BuildingType
    label: str
    description: str
    is_override: bool = False


@dataclass(frozen=True, slots=True)
class WaitTimeSummary:
    total: float
    per_stop: tuple[WaitEstimate, ...]
    pickup_wait: float


@dataclass(frozen=True, slots=True)
class EstimateConfidence:
    level: str
    percentage: int
    reason: str


# Typical Singapore handovers: HDB at the void deck, condos through security,
# offices via reception and lifts, malls by finding the unit.
WAIT_TIMES: dict[BuildingType, WaitProfile] = {
    BuildingType.HDB: WaitProfile(3, "HDB", "Meet at void deck"),
    BuildingType.CONDO: WaitProfile(7, "Condo", "Security + lift wait"),
    BuildingType.OFFICE: WaitProfile(10, "Office", "Reception + lift + navigation"),
    BuildingType.MALL: WaitProfile(8, "Mall", "Navigate to unit"),
    BuildingType.LANDED: WaitProfile(2, "Landed", "Direct handover"),
    BuildingType.INDUSTRIAL: WaitProfile(5, "Industrial", "Loading bay access"),
    BuildingType.UNKNOWN: WaitProfile(5, "Unknown", "Default estimate"),
}

CONFIDENCE_LEVELS: dict[BuildingType, EstimateConfidence] = {
    BuildingType.HDB: EstimateConfidence("high", 85, "HDB void deck handovers are predictable"),
    BuildingType.LANDED: EstimateConfidence("high", 90, "Direct handover at gate"),
    BuildingType.CONDO: EstimateConfidence("medium", 70, "Security procedures vary"),
    BuildingType.OFFICE: EstimateConfidence("low", 55, "Highly variable - depends on floor, security"),
    BuildingType.MALL: EstimateConfidence("low", 50, "Navigation time varies greatly"),
    BuildingType.INDUSTRIAL: EstimateConfidence("medium", 65, "Loading bay access varies"),
    BuildingType.UNKNOWN: EstimateConfidence("low", 50, "Unknown location type"),
}


def _coerce(building_type: BuildingType | str) -> BuildingType:
    try:
        return BuildingType(building_type)
    except ValueError:
        return BuildingType.UNKNOWN


def wait_profile(building_type: BuildingType | str) -> WaitProfile:
    return WAIT_TIMES[_coerce(building_type)]


def estimate(building_type: BuildingType | str) -> WaitEstimate:
    """Estimate the handover wait for a single stop."""
    kind = _coerce(building_type)
    profile = WAIT_TIMES[kind]
    return WaitEstimate(
        minutes=profile.minutes,
        building_type=kind,
        label=profile.label,
        description=profile.description,
    )


def estimate_all(
    stops: Sequence[Location],
    overrides: Mapping[int, float | None] | None = None,
    pickup_wait_minutes: float = 5,
) -> WaitTimeSummary:
    """Estimate waits for every delivery stop.

    A non-None entry in ``overrides`` (keyed by stop index) replaces the table
    value verbatim. The pickup wait is carried alongside and is not part of
    ``total``.
    """
    overrides = overrides or {}
    per_stop: list[WaitEstimate] = []
    for index, stop in enumerate(stops):
        override = overrides.get(index)
        if override is not None:
            profile = wait_profile(stop.building_type)
            per_stop.append(
                WaitEstimate(
                    minutes=override,
                    building_type=_coerce(stop.building_type),
                    label=profile.label,
                    description="Manual override",
                    is_override=True,
                )
            )
        else:
            per_stop.append(estimate(stop.building_type))

    return WaitTimeSummary(
        total=sum(item.minutes for item in per_stop),
        per_stop=tuple(per_stop),
        pickup_wait=pickup_wait_minutes,
    )


def confidence(building_type: BuildingType | str) -> EstimateConfidence:
    return CONFIDENCE_LEVELS[_coerce(building_type)]


def adjust_for_time_of_day(wait: WaitEstimate, hour: int) -> WaitEstimate:
    """Add peak-hour padding to an estimate; returns ``wait`` unchanged off-peak."""
    lunch_rush = 11 <= hour <= 13
    dinner_rush = 17 <= hour <= 20
    office_rush = 17 <= hour <= 18

    if wait.building_type is BuildingType.OFFICE and office_rush:
        adjustment, reason = 3, "Office rush hour - busy lifts"
    elif wait.building_type is BuildingType.MALL and (lunch_rush or dinner_rush):
        adjustment, reason = 2, "Peak dining hours"
    elif wait.building_type is BuildingType.CONDO and dinner_rush:
        adjustment, reason = 2, "Residents returning home"
    else:
        return wait

    return replace(
        wait,
        minutes=wait.minutes + adjustment,
        description=f"{wait.description} (+{adjustment} min: {reason})",
    )
