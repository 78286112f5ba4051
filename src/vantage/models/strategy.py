"""Strategy matrix data models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from .base import WireModel
from .gap import Severity, Vendor


class EffortDistribution(BaseModel):
    SMALL: int = 0
    MEDIUM: int = 0
    LARGE: int = 0


class VendorRecommendation(WireModel):
    vendor: Vendor
    gaps_covered: int
    covered_gap_ids: list[str] = []


class StrategyItem(WireModel):
    gap_id: str
    title: str
    severity: Severity
    description: str


class TimelineBucket(WireModel):
    timeline: str
    gap_count: int = 0
    effort_distribution: EffortDistribution = EffortDistribution()
    estimated_cost_range: str = "No gaps"
    top_vendors: list[VendorRecommendation] = []
    items: list[StrategyItem] = []
    empty_state: Optional[str] = None


class StrategyMatrix(WireModel):
    assessment_id: str
    immediate: TimelineBucket
    near_term: TimelineBucket
    strategic: TimelineBucket
    is_restricted: bool = False
    summary: str = ""

    def buckets(self) -> list[TimelineBucket]:
        return [self.immediate, self.near_term, self.strategic]
