"""OneMap client and routing token providers."""

from .client import IssuedToken, OneMapClient, RouteSummary, check_health
from .tokens import OneMapTokenProvider, StaticTokenProvider, TokenProvider

__all__ = [
    "IssuedToken",
    "OneMapClient",
    "OneMapTokenProvider",
    "RouteSummary",
    "StaticTokenProvider",
    "TokenProvider",
    "check_health",
]
