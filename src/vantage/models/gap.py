"""Gap and vendor data models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .base import WireModel


class Severity(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class Priority(str, Enum):
    IMMEDIATE = "IMMEDIATE"
    SHORT_TERM = "SHORT_TERM"
    MEDIUM_TERM = "MEDIUM_TERM"
    LONG_TERM = "LONG_TERM"


class Effort(str, Enum):
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    LARGE = "LARGE"


class CostRange(str, Enum):
    UNDER_10K = "UNDER_10K"
    RANGE_10K_50K = "RANGE_10K_50K"
    RANGE_50K_100K = "RANGE_50K_100K"
    RANGE_100K_250K = "RANGE_100K_250K"
    OVER_250K = "OVER_250K"


# Euro bounds per cost range; None marks an open upper bound.
COST_RANGE_BOUNDS: dict[CostRange, tuple[int, Optional[int]]] = {
    CostRange.UNDER_10K: (0, 10_000),
    CostRange.RANGE_10K_50K: (10_000, 50_000),
    CostRange.RANGE_50K_100K: (50_000, 100_000),
    CostRange.RANGE_100K_250K: (100_000, 250_000),
    CostRange.OVER_250K: (250_000, None),
}


class Gap(WireModel):
    id: str
    assessment_id: str
    question_id: Optional[str] = None
    category: str
    title: str
    description: str
    severity: Severity
    priority: Priority
    priority_score: Optional[int] = None
    estimated_cost: Optional[CostRange] = None
    estimated_effort: Optional[Effort] = None
    suggested_vendors: list[str] = []
    is_restricted: bool = False


class Vendor(WireModel):
    id: str
    name: str
    categories: list[str] = []

    def covers(self, category: str) -> bool:
        folded = category.casefold()
        return any(c.casefold() == folded for c in self.categories)
