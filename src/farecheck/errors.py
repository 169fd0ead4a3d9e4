"""Error taxonomy shared by the profitability pipeline."""

from __future__ import annotations

USER_HINTS: tuple[str, ...] = (
    "Check that all addresses are valid Singapore addresses or postal codes",
    "Make sure you have an internet connection",
    "Try adding your OneMap API token in settings for better accuracy",
)


class FarecheckError(Exception):
    """Base class for all pipeline errors."""


class NotFoundError(FarecheckError):
    """An address or coordinate pair resolved to nothing."""


class NetworkError(FarecheckError):
    """Transport-level failure talking to an external service."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthError(NetworkError):
    """The routing service rejected the token."""

    def __init__(self, message: str = "Invalid or expired API token. Please update your token.") -> None:
        super().__init__(message, status_code=401)


class InvalidInputError(FarecheckError):
    """Malformed or insufficient input, e.g. fewer than two route points."""


class InvalidConfigurationError(FarecheckError):
    """No usable fuel efficiency could be determined."""


class InvalidParameterError(FarecheckError):
    """Fuel cost inputs are out of range."""


class CalculationInProgressError(FarecheckError):
    """A calculation is already running on this analyzer."""
