"""Order analysis endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ...errors import (
    USER_HINTS,
    CalculationInProgressError,
    FarecheckError,
    InvalidConfigurationError,
    InvalidInputError,
    InvalidParameterError,
    NetworkError,
    NotFoundError,
)
from ...schemas.analysis import AnalysisRequest, CompareRequest, FareScenarioRequest, MinimumFareRequest
from ...services.analysis.service import OrderAnalyzer
from ...services.outputs.formatter import comparison_to_json, report_to_json, route_to_csv, scenarios_to_json
from ...services.pricing.profitability import compare_orders, minimum_fare
from ..dependencies import get_analyzer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])

_STATUS_BY_ERROR: tuple[tuple[type[FarecheckError], int], ...] = (
    (CalculationInProgressError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (NetworkError, status.HTTP_502_BAD_GATEWAY),
    (InvalidInputError, status.HTTP_400_BAD_REQUEST),
    (InvalidConfigurationError, status.HTTP_400_BAD_REQUEST),
    (InvalidParameterError, status.HTTP_400_BAD_REQUEST),
)


def _http_error(exc: FarecheckError) -> HTTPException:
    status_code = next(
        (code for error_type, code in _STATUS_BY_ERROR if isinstance(exc, error_type)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    return HTTPException(status_code=status_code, detail={"message": str(exc), "hints": list(USER_HINTS)})


@router.post("/analyze", status_code=status.HTTP_200_OK)
async def analyze(payload: AnalysisRequest, analyzer: OrderAnalyzer = Depends(get_analyzer)) -> dict:
    try:
        report = await analyzer.analyze(payload)
    except FarecheckError as exc:
        logger.warning(f"Order analysis failed: {exc}")
        raise _http_error(exc) from exc
    return report_to_json(report)


@router.post("/analyze.csv", status_code=status.HTTP_200_OK)
async def analyze_csv(payload: AnalysisRequest, analyzer: OrderAnalyzer = Depends(get_analyzer)) -> Response:
    try:
        report = await analyzer.analyze(payload)
    except FarecheckError as exc:
        logger.warning(f"Order analysis failed: {exc}")
        raise _http_error(exc) from exc
    return Response(content=route_to_csv(report.route), media_type="text/csv")


@router.post("/compare", status_code=status.HTTP_200_OK)
async def compare(payload: CompareRequest, analyzer: OrderAnalyzer = Depends(get_analyzer)) -> dict:
    """Analyse two candidate orders back to back and say which pays better per hour."""
    try:
        first = await analyzer.analyze(payload.first)
        second = await analyzer.analyze(payload.second)
    except FarecheckError as exc:
        logger.warning(f"Order comparison failed: {exc}")
        raise _http_error(exc) from exc
    comparison = compare_orders(first.profitability, second.profitability)
    return comparison_to_json(comparison, first, second)


@router.post("/fare-scenarios", status_code=status.HTTP_200_OK)
async def fare_scenarios(payload: FareScenarioRequest, analyzer: OrderAnalyzer = Depends(get_analyzer)) -> dict:
    """Re-price one analysed order at several alternative fares."""
    try:
        report = await analyzer.analyze(payload.order)
    except FarecheckError as exc:
        logger.warning(f"Fare scenario analysis failed: {exc}")
        raise _http_error(exc) from exc
    breakdown = report.profitability.breakdown
    base_params = {
        "fuel_cost": report.profitability.fuel_cost,
        "travel_minutes": breakdown.travel_minutes,
        "wait_minutes": breakdown.wait_minutes,
        "pickup_wait_minutes": breakdown.pickup_wait_minutes,
    }
    scenarios = analyzer.profitability.fare_scenarios(base_params, payload.fares)
    return {"base": report_to_json(report), "scenarios": scenarios_to_json(scenarios)}


@router.post("/minimum-fare", status_code=status.HTTP_200_OK)
def minimum_fare_for_rate(payload: MinimumFareRequest) -> dict:
    return {
        "minimum_fare": minimum_fare(payload.fuel_cost, payload.total_time_minutes, payload.target_hourly_rate),
        "target_hourly_rate": payload.target_hourly_rate,
    }
