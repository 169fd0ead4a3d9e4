"""Delivery order profitability analysis for motorcycle couriers."""

__version__ = "0.1.0"
