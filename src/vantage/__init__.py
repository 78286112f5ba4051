"""Vantage - evidence-weighted compliance scoring and entitlement engine."""

__version__ = "1.0.0"
