"""Fare deductions and profitability rating."""

from .fares import DeductionRates, FareDeductionEngine
from .models import FareBreakdown, Insight, Insights, OrderComparison, ProfitabilityResult, Rating
from .profitability import PROFIT_THRESHOLDS, ProfitabilityEngine, compare_orders, minimum_fare, rate

__all__ = [
    "DeductionRates",
    "FareBreakdown",
    "FareDeductionEngine",
    "Insight",
    "Insights",
    "OrderComparison",
    "PROFIT_THRESHOLDS",
    "ProfitabilityEngine",
    "ProfitabilityResult",
    "Rating",
    "compare_orders",
    "minimum_fare",
    "rate",
]
