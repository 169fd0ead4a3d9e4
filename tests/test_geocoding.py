import asyncio

import pytest

from farecheck.errors import NetworkError, NotFoundError
from farecheck.models.domain import BuildingType
from farecheck.services.geocoding import Geocoder, format_reverse_address, parse_coordinates


class DummyAddressService:
    def __init__(self, results=None, reverse=None, delays=None):
        self.results = results or {}
        self.reverse = reverse
        self.delays = delays or {}
        self.searches = []
        self.reverse_calls = []

    async def search(self, search_value):
        self.searches.append(search_value)
        await asyncio.sleep(self.delays.get(search_value, 0))
        outcome = self.results.get(search_value, [])
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def reverse_geocode(self, lat, lng):
        self.reverse_calls.append((lat, lng))
        if isinstance(self.reverse, Exception):
            raise self.reverse
        return self.reverse


def _hit(lat, lng, building="NIL", search_value="", address="", postal=""):
    return {
        "LATITUDE": str(lat),
        "LONGITUDE": str(lng),
        "BUILDING": building,
        "SEARCHVAL": search_value,
        "ADDRESS": address,
        "POSTAL": postal,
    }


def test_parse_coordinates():
    assert parse_coordinates(" 1.3000 , 103.8000 ") == (1.3, 103.8)
    assert parse_coordinates("40.7128,-74.0060") is None
    assert parse_coordinates("Blk 1, Road") is None


def test_resolve_forward_search_uses_first_result():
    service = DummyAddressService(
        results={
            "238801": [
                _hit(1.3006, 103.8457, "PARAGON", "PARAGON", "290 ORCHARD ROAD PARAGON SINGAPORE 238859", "238859"),
                _hit(1.0, 103.0, "OTHER"),
            ]
        }
    )

    location = asyncio.run(Geocoder(service).resolve("  238801 "))

    assert service.searches == ["238801"]
    assert location.latitude == pytest.approx(1.3006)
    assert location.longitude == pytest.approx(103.8457)
    assert location.formatted_address == "290 ORCHARD ROAD PARAGON SINGAPORE 238859"
    assert location.postal_code == "238859"
    assert location.building_name == "PARAGON"
    assert location.building_type is BuildingType.UNKNOWN


def test_resolve_forward_search_classifies_hdb():
    service = DummyAddressService(
        results={"blk 123": [_hit(1.35, 103.85, search_value="BLK 123 ANG MO KIO AVENUE 3")]}
    )

    location = asyncio.run(Geocoder(service).resolve("blk 123"))

    assert location.building_type is BuildingType.HDB
    assert location.building_name == ""
    assert location.formatted_address == "BLK 123 ANG MO KIO AVENUE 3"


def test_resolve_without_results_raises_not_found():
    with pytest.raises(NotFoundError):
        asyncio.run(Geocoder(DummyAddressService()).resolve("nowhere"))


def test_resolve_propagates_network_errors():
    service = DummyAddressService(results={"x y": NetworkError("Network error: boom")})

    with pytest.raises(NetworkError):
        asyncio.run(Geocoder(service).resolve("x y"))


def test_coordinate_input_uses_reverse_geocode():
    service = DummyAddressService(
        reverse={"BUILDINGNAME": "NIL", "BLOCK": "406", "ROAD": "SIN MING AVENUE", "POSTALCODE": "570406"}
    )

    location = asyncio.run(Geocoder(service).resolve("1.3621,103.8353"))

    assert service.searches == []
    assert service.reverse_calls == [(1.3621, 103.8353)]
    assert location.formatted_address == "Blk 406, SIN MING AVENUE, Singapore 570406"
    assert location.postal_code == "570406"
    assert location.building_type is BuildingType.HDB


def test_coordinate_input_degrades_when_reverse_fails():
    service = DummyAddressService(reverse=NotFoundError("No address found for this location"))

    location = asyncio.run(Geocoder(service).resolve("1.3000,103.8000"))

    assert location.latitude == 1.3
    assert location.longitude == 103.8
    assert location.formatted_address == "1.300000, 103.800000"
    assert location.building_type is BuildingType.UNKNOWN
    assert location.postal_code == ""


@pytest.mark.parametrize("record", ["BLK 406 ANG MO KIO", None, ["BLK 406"]])
def test_coordinate_input_degrades_on_unusable_reverse_record(record):
    service = DummyAddressService(reverse=record)

    location = asyncio.run(Geocoder(service).resolve("1.3000,103.8000"))

    assert service.reverse_calls == [(1.3, 103.8)]
    assert location.formatted_address == "1.300000, 103.800000"
    assert location.building_type is BuildingType.UNKNOWN


def test_format_reverse_address_fallbacks():
    assert format_reverse_address({"BUILDINGNAME": "NIL", "ROAD": "NIL", "ADDRESS": "SOMEWHERE"}) == "SOMEWHERE"
    assert format_reverse_address({}) == "Unknown Location"


def test_resolve_all_preserves_order():
    service = DummyAddressService(
        results={
            "first": [_hit(1.31, 103.81, address="FIRST")],
            "second": [_hit(1.32, 103.82, address="SECOND")],
            "third": [_hit(1.33, 103.83, address="THIRD")],
        },
        delays={"first": 0.03, "second": 0.0, "third": 0.01},
    )

    locations = asyncio.run(Geocoder(service).resolve_all(["first", "second", "third"]))

    assert [location.formatted_address for location in locations] == ["FIRST", "SECOND", "THIRD"]


def test_resolve_all_fails_whole_batch():
    service = DummyAddressService(results={"good": [_hit(1.31, 103.81, address="GOOD")]})

    with pytest.raises(NotFoundError):
        asyncio.run(Geocoder(service).resolve_all(["good", "missing"]))
