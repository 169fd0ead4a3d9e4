"""Application configuration and settings management."""

from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FARECHECK_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Farecheck Order Profitability API"
    api_prefix: str = "/api"

    # OneMap configuration
    onemap_base_url: str = Field(
        default="https://www.onemap.gov.sg/api",
        description="Base URL for the OneMap search, reverse-geocode and routing services.",
    )
    onemap_email: Optional[str] = Field(
        default=None,
        description="OneMap account email used to fetch routing tokens.",
    )
    onemap_password: Optional[str] = Field(
        default=None,
        description="OneMap account password used to fetch routing tokens.",
    )
    onemap_token: Optional[str] = Field(
        default=None,
        description="Pre-issued OneMap routing token. Used as-is when no credentials are set.",
    )
    onemap_timeout_seconds: float = Field(default=15.0, gt=0.0)

    default_petrol_price: float = Field(default=2.87, gt=0.0, description="Petrol price in $/L.")
    pickup_wait_minutes: float = Field(default=6.0, ge=0.0)
    average_speed_kmh: float = Field(
        default=25.0,
        gt=0.0,
        description="Reference speed the routing service's travel times are assumed to reflect.",
    )
    road_factor: float = Field(
        default=1.4,
        gt=0.0,
        description="Multiplier from straight-line to road distance for estimated legs.",
    )
    max_stops: int = Field(default=10, ge=1)
    min_fare: float = Field(default=0.0, ge=0.0)
    max_fare: float = Field(default=500.0, gt=0.0)

    # Fare deductions applied by the platform
    commission_rate: float = Field(default=0.15, ge=0.0, le=1.0)
    vat_rate: float = Field(default=0.09, ge=0.0, le=1.0)
    cpf_withholding_rate: float = Field(default=0.0, ge=0.0, le=1.0)
    platform_fee_offset: float = Field(default=0.50, ge=0.0)

    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()


settings = Settings()
