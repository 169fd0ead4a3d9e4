import pytest

from farecheck.services.pricing import (
    DeductionRates,
    FareDeductionEngine,
    ProfitabilityEngine,
    Rating,
    compare_orders,
    minimum_fare,
    rate,
)


def test_fare_breakdown_example():
    breakdown = FareDeductionEngine().breakdown(10.0)

    assert breakdown.base_fare == pytest.approx(9.5)
    assert breakdown.commission == pytest.approx(1.425)
    assert breakdown.vat == pytest.approx(0.855)
    assert breakdown.cpf_withholding == 0
    assert breakdown.platform_fee == pytest.approx(0.5)
    assert breakdown.net_fare == pytest.approx(7.22)
    assert breakdown.total_deductions == pytest.approx(
        breakdown.commission + breakdown.vat + breakdown.cpf_withholding + breakdown.platform_fee
    )


@pytest.mark.parametrize("gross", [0.0, 0.5, 7.3, 42.0, 500.0])
def test_fare_breakdown_formula(gross):
    breakdown = FareDeductionEngine().breakdown(gross)

    expected = gross - 0.15 * (gross - 0.5) - 0.09 * (gross - 0.5) - 0.5
    assert breakdown.net_fare == pytest.approx(expected)
    assert breakdown.net_fare == pytest.approx(breakdown.gross_fare - breakdown.total_deductions)


def test_fare_breakdown_with_cpf_withholding():
    engine = FareDeductionEngine(DeductionRates(0.15, 0.09, 0.10, 0.5))

    breakdown = engine.breakdown(10.0)

    assert breakdown.cpf_withholding == pytest.approx(0.95)
    assert breakdown.net_fare == pytest.approx(7.22 - 0.95)


def test_negative_fare_is_not_rejected():
    assert FareDeductionEngine().breakdown(-2.0).net_fare < 0


@pytest.mark.parametrize(
    "profit_per_hour,expected",
    [
        (20.00, Rating.EXCELLENT),
        (19.99, Rating.GOOD),
        (15.00, Rating.GOOD),
        (14.99, Rating.OKAY),
        (10.00, Rating.OKAY),
        (9.99, Rating.POOR),
        (-3.0, Rating.POOR),
    ],
)
def test_rating_boundaries(profit_per_hour, expected):
    assert rate(profit_per_hour) is expected


def test_evaluate_combines_fare_fuel_and_time():
    result = ProfitabilityEngine().evaluate(
        fare=10.0,
        fuel_cost=0.72,
        travel_minutes=14,
        wait_minutes=10,
        pickup_wait_minutes=6,
    )

    assert result.net_fare == pytest.approx(7.22)
    assert result.net_profit == pytest.approx(6.5)
    assert result.total_time_minutes == 30
    assert result.profit_per_hour == pytest.approx(13.0)
    assert result.rating is Rating.OKAY
    assert result.breakdown.fuel_cost_percentage == pytest.approx(0.72 / 7.22 * 100)


def test_evaluate_zero_time_yields_zero_rate():
    result = ProfitabilityEngine().evaluate(
        fare=10.0, fuel_cost=0, travel_minutes=0, wait_minutes=0, pickup_wait_minutes=0
    )

    assert result.profit_per_hour == 0
    assert result.rating is Rating.POOR


def test_evaluate_non_positive_net_fare_has_zero_fuel_share():
    result = ProfitabilityEngine().evaluate(
        fare=0.5, fuel_cost=1.0, travel_minutes=10, wait_minutes=5, pickup_wait_minutes=6
    )

    assert result.net_fare == pytest.approx(0.0)
    assert result.breakdown.fuel_cost_percentage == 0


def test_insights_for_poor_order():
    engine = ProfitabilityEngine()
    result = engine.evaluate(fare=5.0, fuel_cost=1.0, travel_minutes=10, wait_minutes=20, pickup_wait_minutes=6)

    insights = engine.insights(result)
    messages = [item.message for item in insights.insights]

    assert result.rating is Rating.POOR
    assert any("Fuel cost is" in message for message in messages)
    assert any("Wait time exceeds travel time" in message for message in messages)
    assert any("below minimum wage" in message for message in messages)
    assert insights.minimum_fare_for_good == pytest.approx(1.0 + 15 * 36 / 60)
    assert insights.recommendations[-1] == 'Fare would need to be $10.00 for a "Good" rating'


def test_insights_for_excellent_order():
    engine = ProfitabilityEngine()
    result = engine.evaluate(fare=30.0, fuel_cost=0.5, travel_minutes=20, wait_minutes=5, pickup_wait_minutes=6)

    insights = engine.insights(result)

    assert result.rating is Rating.EXCELLENT
    assert [item.type for item in insights.insights] == ["success"]
    assert insights.recommendations == ()


def test_minimum_fare():
    assert minimum_fare(1.2, 30, 20) == pytest.approx(11.2)


def test_compare_orders():
    engine = ProfitabilityEngine()
    strong = engine.evaluate(fare=30.0, fuel_cost=0.5, travel_minutes=20, wait_minutes=5, pickup_wait_minutes=6)
    weak = engine.evaluate(fare=8.0, fuel_cost=0.5, travel_minutes=20, wait_minutes=5, pickup_wait_minutes=6)

    comparison = compare_orders(weak, strong)

    assert comparison.better_order == 2
    assert comparison.recommendation == "Strong preference for order 2"
    assert comparison.profit_per_hour_difference == pytest.approx(strong.profit_per_hour - weak.profit_per_hour)
    assert compare_orders(strong, strong).recommendation == "Similar profitability"


def test_fare_scenarios():
    engine = ProfitabilityEngine()
    base = {"fare": 1.0, "fuel_cost": 0.5, "travel_minutes": 20, "wait_minutes": 5, "pickup_wait_minutes": 5}

    scenarios = engine.fare_scenarios(base, [8.0, 12.0])

    assert [fare for fare, _ in scenarios] == [8.0, 12.0]
    assert scenarios[1][1].profit_per_hour > scenarios[0][1].profit_per_hour
