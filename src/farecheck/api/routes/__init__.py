"""Route group exports."""

from . import health, orders, reference

__all__ = ["health", "orders", "reference"]
