"""Geospatial helper functions."""

from __future__ import annotations

import math

EARTH_RADIUS_KM = 6371.0

# Singapore bounding box used to recognise raw coordinate input.
SG_LAT_RANGE = (1.1, 1.5)
SG_LON_RANGE = (103.6, 104.1)


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def within_singapore(lat: float, lon: float) -> bool:
    return SG_LAT_RANGE[0] <= lat <= SG_LAT_RANGE[1] and SG_LON_RANGE[0] <= lon <= SG_LON_RANGE[1]
