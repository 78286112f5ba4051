"""Subscription data models."""

from __future__ import annotations

from enum import Enum

from .base import WireModel


class Plan(str, Enum):
    FREE = "FREE"
    PREMIUM = "PREMIUM"
    ENTERPRISE = "ENTERPRISE"


class Subscription(WireModel):
    organization_id: str
    plan: Plan = Plan.FREE
