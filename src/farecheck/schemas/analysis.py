"""Order analysis request schemas."""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, FiniteFloat, field_validator, model_validator

from ..config import settings
from ..services.fuel import MAX_EFFICIENCY_KM_PER_L, get_bike_model

MIN_ADDRESS_LENGTH = 2
MAX_ADDRESS_LENGTH = 200
MAX_PETROL_PRICE = 10.0
MAX_WAIT_MINUTES = 60.0


def _validate_address(value: str, field_name: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValueError(f"{field_name} is required")
    if len(cleaned) < MIN_ADDRESS_LENGTH:
        raise ValueError(f"{field_name} is too short")
    if len(cleaned) > MAX_ADDRESS_LENGTH:
        raise ValueError(f"{field_name} is too long")
    return cleaned


class AnalysisRequest(BaseModel):
    current_location: str = Field(..., description="Address, postal code or 'lat,lng' of the courier.")
    pickup: str = Field(..., description="Pickup address or postal code.")
    stops: List[str] = Field(..., description="Delivery stops in visiting order.")
    fare: float = Field(
        ...,
        allow_inf_nan=False,
        description="Offered fare in SGD, including any multi-stop bonus.",
    )
    bike_model: Optional[str] = Field(default=None, description="Bike catalogue id, or 'custom'.")
    custom_efficiency: Optional[FiniteFloat] = Field(default=None, description="Fuel efficiency in km/L.")
    petrol_price: float = Field(default_factory=lambda: settings.default_petrol_price, allow_inf_nan=False)
    wait_overrides: Dict[int, Optional[FiniteFloat]] = Field(
        default_factory=dict,
        description="Manual wait minutes keyed by stop index (0-based).",
    )
    traffic_condition: Optional[Literal["light", "normal", "heavy"]] = Field(
        default=None,
        description="Override the time-of-day traffic detection.",
    )

    @field_validator("current_location")
    @classmethod
    def _check_current_location(cls, value: str) -> str:
        return _validate_address(value, "Current location")

    @field_validator("pickup")
    @classmethod
    def _check_pickup(cls, value: str) -> str:
        return _validate_address(value, "Pickup")

    @field_validator("stops")
    @classmethod
    def _check_stops(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("At least one delivery stop is required")
        if len(value) > settings.max_stops:
            raise ValueError(f"At most {settings.max_stops} delivery stops are supported")
        return [_validate_address(stop, f"Stop {index + 1}") for index, stop in enumerate(value)]

    @field_validator("fare")
    @classmethod
    def _check_fare(cls, value: float) -> float:
        if value < settings.min_fare:
            raise ValueError("Fare cannot be negative")
        if value > settings.max_fare:
            raise ValueError(f"Fare seems too high (max {settings.max_fare:g})")
        return value

    @field_validator("petrol_price")
    @classmethod
    def _check_petrol_price(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Price must be positive")
        if value > MAX_PETROL_PRICE:
            raise ValueError(f"Price seems unrealistic (max ${MAX_PETROL_PRICE:g}/L)")
        return value

    @field_validator("custom_efficiency")
    @classmethod
    def _check_efficiency(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            return value
        if value <= 0:
            raise ValueError("Efficiency must be positive")
        if value > MAX_EFFICIENCY_KM_PER_L:
            raise ValueError(f"Efficiency seems unrealistic (max {MAX_EFFICIENCY_KM_PER_L:g} km/L)")
        return value

    @field_validator("bike_model")
    @classmethod
    def _check_bike_model(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        cleaned = value.strip().lower()
        if get_bike_model(cleaned) is None:
            raise ValueError(f"Unknown bike model '{value}'")
        return cleaned

    @model_validator(mode="after")
    def _check_wait_overrides(self) -> "AnalysisRequest":
        for index, minutes in self.wait_overrides.items():
            if index < 0 or index >= len(self.stops):
                raise ValueError(f"Wait override refers to unknown stop index {index}")
            if minutes is None:
                continue
            if minutes < 0:
                raise ValueError("Wait time cannot be negative")
            if minutes > MAX_WAIT_MINUTES:
                raise ValueError(f"Wait time seems too long (max {MAX_WAIT_MINUTES:g} min)")
        return self


class CompareRequest(BaseModel):
    first: AnalysisRequest
    second: AnalysisRequest


class MinimumFareRequest(BaseModel):
    fuel_cost: float = Field(..., ge=0, allow_inf_nan=False)
    total_time_minutes: float = Field(..., ge=0, allow_inf_nan=False)
    target_hourly_rate: float = Field(default=15.0, ge=0, allow_inf_nan=False)


class FareScenarioRequest(BaseModel):
    order: AnalysisRequest
    fares: List[FiniteFloat] = Field(..., min_length=1, max_length=10, description="Alternative fares to evaluate.")

    @field_validator("fares")
    @classmethod
    def _check_fares(cls, value: List[float]) -> List[float]:
        for fare in value:
            if fare < settings.min_fare or fare > settings.max_fare:
                raise ValueError(f"Scenario fares must be between {settings.min_fare:g} and {settings.max_fare:g}")
        return value
