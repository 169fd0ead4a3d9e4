"""Domain models for resolved locations."""

from dataclasses import dataclass
from enum import Enum


class BuildingType(str, Enum):
    """Building categories that drive wait-time assumptions."""

    HDB = "hdb"
    CONDO = "condo"
    OFFICE = "office"
    MALL = "mall"
    INDUSTRIAL = "industrial"
    LANDED = "landed"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class Location:
    """A geocoded address enriched with its building classification."""

    latitude: float
    longitude: float
    formatted_address: str
    postal_code: str
    building_type: BuildingType
    building_name: str
