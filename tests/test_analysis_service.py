import asyncio
import math

import pytest

from farecheck.errors import CalculationInProgressError, InvalidConfigurationError, NetworkError, NotFoundError
from farecheck.models.domain import BuildingType
from farecheck.schemas.analysis import AnalysisRequest
from farecheck.services.analysis.service import OrderAnalyzer, resolve_efficiency
from farecheck.services.geocoding import Geocoder
from farecheck.services.geospatial import haversine_km
from farecheck.services.onemap.tokens import StaticTokenProvider
from farecheck.services.outputs.formatter import report_to_json, route_to_csv
from farecheck.services.pricing import FareDeductionEngine, rate
from farecheck.services.routing.service import Router

PICKUP = (1.3400, 103.8500)
OFFICE = (1.2840, 103.8510)


class DummyOneMap:
    """Stands in for both the address and routing services."""

    def __init__(self, search_results=None, gate=None):
        self.search_results = search_results or {}
        self.gate = gate
        self.searches = []
        self.route_calls = 0

    async def search(self, search_value):
        self.searches.append(search_value)
        if self.gate is not None:
            await self.gate.wait()
        return self.search_results.get(search_value, [])

    async def reverse_geocode(self, lat, lng):
        raise NetworkError("Network error: reverse geocode unavailable")

    async def route(self, start, end, token):
        self.route_calls += 1
        raise NetworkError("Network error: routing unavailable")


def _results():
    return {
        "Blk 123 Ang Mo Kio": [
            {
                "LATITUDE": str(PICKUP[0]),
                "LONGITUDE": str(PICKUP[1]),
                "BUILDING": "NIL",
                "SEARCHVAL": "BLK 123 ANG MO KIO AVENUE 3",
                "ADDRESS": "123 ANG MO KIO AVENUE 3 SINGAPORE 560123",
                "POSTAL": "560123",
            }
        ],
        "One Raffles Place": [
            {
                "LATITUDE": str(OFFICE[0]),
                "LONGITUDE": str(OFFICE[1]),
                "BUILDING": "ONE RAFFLES PLACE",
                "SEARCHVAL": "ONE RAFFLES PLACE",
                "ADDRESS": "1 RAFFLES PLACE ONE RAFFLES PLACE SINGAPORE 048616",
                "POSTAL": "048616",
            }
        ],
    }


def _analyzer(service: DummyOneMap, token: str | None = "token-123") -> OrderAnalyzer:
    return OrderAnalyzer(
        geocoder=Geocoder(service),
        router=Router(service, StaticTokenProvider(token)),
        pickup_wait_minutes=6,
    )


def _request(**overrides) -> AnalysisRequest:
    data = {
        "current_location": "1.3000,103.8000",
        "pickup": "Blk 123 Ang Mo Kio",
        "stops": ["One Raffles Place"],
        "fare": 10.0,
        "bike_model": "ybr125",
        "petrol_price": 2.87,
        "traffic_condition": "normal",
    }
    data.update(overrides)
    return AnalysisRequest(**data)


def test_end_to_end_with_routing_unavailable():
    service = DummyOneMap(_results())

    report = asyncio.run(_analyzer(service).analyze(_request()))

    assert report.locations.current.formatted_address == "1.300000, 103.800000"
    assert report.locations.pickup.building_type is BuildingType.HDB
    assert report.locations.stops[0].building_type is BuildingType.OFFICE

    assert service.route_calls == 2
    assert len(report.route.legs) == 2
    assert all(leg.is_estimate for leg in report.route.legs)
    assert report.route.has_estimates is True

    first = haversine_km(1.3, 103.8, *PICKUP) * 1.4
    second = haversine_km(*PICKUP, *OFFICE) * 1.4
    distance = first + second
    travel = distance / 25 * 60
    assert report.route.total_distance_km == pytest.approx(distance)
    assert report.route.total_travel_minutes == pytest.approx(travel)

    assert report.wait_time.total == 10
    assert report.wait_time.pickup_wait == 6

    fuel_cost = distance / 45 * 2.87
    assert report.fuel.cost == pytest.approx(fuel_cost)

    net_fare = FareDeductionEngine().breakdown(10.0).net_fare
    expected_rate = (net_fare - fuel_cost) / ((travel + 10 + 6) / 60)
    profitability = report.profitability
    assert profitability.net_fare == pytest.approx(7.22)
    assert profitability.net_profit == pytest.approx(net_fare - fuel_cost)
    assert profitability.total_time_minutes == pytest.approx(travel + 16)
    assert profitability.profit_per_hour == pytest.approx(expected_rate)
    assert profitability.rating is rate(expected_rate)

    assert report.inputs.efficiency == 45
    assert report.inputs.petrol_price == 2.87

    efficiency = report.route_efficiency
    assert efficiency.direct_distance_km == pytest.approx(haversine_km(1.3, 103.8, *OFFICE))
    assert efficiency.actual_distance_km == pytest.approx(distance)


def test_each_analysis_produces_a_fresh_report():
    analyzer = _analyzer(DummyOneMap(_results()))

    first = asyncio.run(analyzer.analyze(_request()))
    second = asyncio.run(analyzer.analyze(_request(fare=20.0)))

    assert first is not second
    assert first.profitability.fare == 10.0
    assert second.profitability.fare == 20.0
    assert analyzer.last_result is second


def test_wait_overrides_are_applied():
    report = asyncio.run(_analyzer(DummyOneMap(_results())).analyze(_request(wait_overrides={0: 2})))

    assert report.wait_time.total == 2
    assert report.wait_time.per_stop[0].is_override is True


def test_custom_efficiency_is_used():
    report = asyncio.run(
        _analyzer(DummyOneMap(_results())).analyze(_request(bike_model="custom", custom_efficiency=30))
    )

    assert report.inputs.efficiency == 30


def test_missing_efficiency_fails_before_network_calls():
    service = DummyOneMap(_results())

    with pytest.raises(InvalidConfigurationError):
        asyncio.run(_analyzer(service).analyze(_request(bike_model="custom")))

    assert service.searches == []
    assert service.route_calls == 0


def test_resolve_efficiency_prefers_catalogue():
    assert resolve_efficiency("wave125", 20) == 50
    assert resolve_efficiency(None, 33.5) == 33.5
    with pytest.raises(InvalidConfigurationError):
        resolve_efficiency(None, None)


def test_geocoding_failure_aborts_analysis():
    service = DummyOneMap(_results())
    analyzer = _analyzer(service)

    with pytest.raises(NotFoundError):
        asyncio.run(analyzer.analyze(_request(stops=["Nowhere Street"])))

    assert service.route_calls == 0
    assert analyzer.last_result is None
    assert analyzer.is_calculating is False


def test_second_calculation_is_rejected_while_one_is_running():
    async def scenario():
        gate = asyncio.Event()
        analyzer = _analyzer(DummyOneMap(_results(), gate=gate), token=None)
        running = asyncio.create_task(analyzer.analyze(_request()))
        await asyncio.sleep(0)

        assert analyzer.is_calculating is True
        with pytest.raises(CalculationInProgressError):
            await analyzer.analyze(_request())

        gate.set()
        report = await running
        assert analyzer.is_calculating is False
        return report

    report = asyncio.run(scenario())

    assert report.route.has_estimates is True


def test_zero_distance_order_serializes():
    results = {
        "Orchid": [
            {
                "LATITUDE": "1.3",
                "LONGITUDE": "103.8",
                "BUILDING": "NIL",
                "SEARCHVAL": "ORCHID",
                "ADDRESS": "ORCHID",
                "POSTAL": "",
            }
        ]
    }
    analyzer = _analyzer(DummyOneMap(results), token=None)

    report = asyncio.run(analyzer.analyze(_request(pickup="Orchid", stops=["Orchid"])))

    assert report.route.total_distance_km == 0
    assert report.fuel.cost == 0
    assert math.isnan(report.fuel.cost_per_km)

    payload = report_to_json(report)
    assert payload["fuel"]["cost_per_km"] is None
    assert payload["profitability"]["rating"] == report.profitability.rating.value
    assert payload["locations"]["stops"][0]["building_type"] == "unknown"


def test_route_csv_lists_each_leg():
    report = asyncio.run(_analyzer(DummyOneMap(_results())).analyze(_request()))

    lines = route_to_csv(report.route).strip().splitlines()

    assert lines[0] == "sequence,from_address,to_address,distance_km,time_minutes,is_estimate,traffic_condition"
    assert len(lines) == 3
    assert lines[1].startswith("1,\"1.300000, 103.800000\",123 ANG MO KIO AVENUE 3 SINGAPORE 560123,")
    assert lines[1].endswith(",True,normal")
