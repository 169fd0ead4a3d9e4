"""Address and coordinate resolution with building type detection."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Mapping, Protocol, Sequence

from ..errors import FarecheckError, NotFoundError
from ..models.domain import BuildingType, Location
from .buildings import BuildingClassifier, default_classifier
from .geospatial import within_singapore

logger = logging.getLogger(__name__)

COORDINATE_PATTERN = re.compile(r"^(-?\d+\.?\d*)\s*,\s*(-?\d+\.?\d*)$")


class AddressService(Protocol):
    async def search(self, search_value: str) -> list[dict[str, Any]]: ...

    async def reverse_geocode(self, lat: float, lng: float) -> dict[str, Any]: ...


def parse_coordinates(text: str) -> tuple[float, float] | None:
    """Return (lat, lng) when ``text`` is a coordinate pair inside Singapore."""
    match = COORDINATE_PATTERN.match(text.strip())
    if not match:
        return None
    lat, lng = float(match.group(1)), float(match.group(2))
    if not within_singapore(lat, lng):
        return None
    return lat, lng


def _field(record: Mapping[str, Any], key: str) -> str:
    value = str(record.get(key) or "").strip()
    return "" if value.upper() == "NIL" else value


def format_reverse_address(record: Mapping[str, Any]) -> str:
    parts: list[str] = []
    if building := _field(record, "BUILDINGNAME"):
        parts.append(building)
    if block := _field(record, "BLOCK"):
        parts.append(f"Blk {block}")
    if road := _field(record, "ROAD"):
        parts.append(road)
    if postal := _field(record, "POSTALCODE"):
        parts.append(f"Singapore {postal}")
    if parts:
        return ", ".join(parts)
    return _field(record, "ADDRESS") or "Unknown Location"


def _coordinate_location(lat: float, lng: float) -> Location:
    return Location(
        latitude=lat,
        longitude=lng,
        formatted_address=f"{lat:.6f}, {lng:.6f}",
        postal_code="",
        building_type=BuildingType.UNKNOWN,
        building_name="",
    )


class Geocoder:
    """Resolves free-text addresses or raw coordinates into :class:`Location` objects."""

    def __init__(self, service: AddressService, classifier: BuildingClassifier | None = None) -> None:
        self.service = service
        self.classifier = classifier or default_classifier

    async def resolve(self, text: str) -> Location:
        coordinates = parse_coordinates(text)
        if coordinates is not None:
            return await self._resolve_coordinates(*coordinates)

        query = text.strip()
        results = await self.service.search(query)
        if not results:
            raise NotFoundError(f'No results found for "{query}"')

        best = results[0]
        try:
            lat, lng = float(best["LATITUDE"]), float(best["LONGITUDE"])
        except (KeyError, TypeError, ValueError) as exc:
            raise NotFoundError(f'No usable coordinates returned for "{query}"') from exc

        return Location(
            latitude=lat,
            longitude=lng,
            formatted_address=_field(best, "ADDRESS") or _field(best, "SEARCHVAL") or query,
            postal_code=_field(best, "POSTAL"),
            building_type=self.classifier.classify_search_result(best),
            building_name=_field(best, "BUILDING"),
        )

    async def _resolve_coordinates(self, lat: float, lng: float) -> Location:
        try:
            record = await self.service.reverse_geocode(lat, lng)
        except FarecheckError as exc:
            logger.warning(f"Reverse geocode failed for {lat},{lng}, using coordinates: {exc}")
            return _coordinate_location(lat, lng)
        if not isinstance(record, Mapping):
            logger.warning(f"Reverse geocode returned no address record for {lat},{lng}, using coordinates")
            return _coordinate_location(lat, lng)

        return Location(
            latitude=lat,
            longitude=lng,
            formatted_address=format_reverse_address(record),
            postal_code=_field(record, "POSTALCODE"),
            building_type=self.classifier.classify_reverse_result(record),
            building_name=_field(record, "BUILDINGNAME"),
        )

    async def resolve_all(self, texts: Sequence[str]) -> list[Location]:
        """Resolve every input concurrently; any failure fails the batch."""
        logger.info(f"Geocoding {len(texts)} locations")
        return list(await asyncio.gather(*(self.resolve(text) for text in texts)))
