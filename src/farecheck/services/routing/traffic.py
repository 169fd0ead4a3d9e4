"""Static time-of-day traffic model for Singapore roads."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal
from zoneinfo import ZoneInfo

from ...config import settings

TrafficConditionName = Literal["light", "normal", "heavy"]

SINGAPORE_TZ = ZoneInfo("Asia/Singapore")


@dataclass(frozen=True, slots=True)
class TrafficCondition:
    key: str
    label: str
    speed_kmh: float


TRAFFIC_CONDITIONS: dict[str, TrafficCondition] = {
    "light": TrafficCondition("light", "Light Traffic", 35),
    "normal": TrafficCondition("normal", "Normal Traffic", 25),
    "heavy": TrafficCondition("heavy", "Heavy Traffic", 15),
}

# Half-open [start, end) hour windows in Singapore local time.
PEAK_HOURS = ((7, 10), (17, 20))
MODERATE_HOURS = ((11, 14), (14, 17))


def _in_windows(hour: int, windows: tuple[tuple[int, int], ...]) -> bool:
    return any(start <= hour < end for start, end in windows)


def condition_for_hour(hour: int) -> str:
    if _in_windows(hour, PEAK_HOURS):
        return "heavy"
    if _in_windows(hour, MODERATE_HOURS):
        return "normal"
    return "light"


def detect_traffic_condition(now: datetime | None = None) -> str:
    """Traffic condition for the current (or given) moment in Singapore."""
    moment = now or datetime.now(SINGAPORE_TZ)
    if moment.tzinfo is not None:
        moment = moment.astimezone(SINGAPORE_TZ)
    return condition_for_hour(moment.hour)


def traffic_speed(condition: str | None) -> float:
    """Average speed for ``condition``; unknown conditions use the reference speed."""
    found = TRAFFIC_CONDITIONS.get(condition or "")
    return found.speed_kmh if found else settings.average_speed_kmh
