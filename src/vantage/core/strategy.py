"""Strategy matrix: timeline buckets of outstanding gaps.

Priority maps to a fixed timeline: IMMEDIATE -> 0-6 months, SHORT_TERM and
MEDIUM_TERM -> 6-18 months, LONG_TERM -> 18+ months. All three buckets are
always present.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..models.gap import COST_RANGE_BOUNDS, Effort, Gap, Priority, Vendor
from ..models.strategy import (
    EffortDistribution,
    StrategyItem,
    StrategyMatrix,
    TimelineBucket,
    VendorRecommendation,
)
from .entitlement import CapabilityCheck

logger = logging.getLogger(__name__)

REDACTION_MARKER = "[DETAILS HIDDEN]"
EMPTY_BUCKET_STATE = "No gaps in this timeframe"
NO_GAPS_COST = "No gaps"
NOT_ESTIMATED_COST = "Not estimated"
ALL_MET_SUMMARY = "All requirements met"
RESTRICTED_SUMMARY = "Upgrade to Premium to see personalized strategy recommendations"
DEFAULT_TOP_VENDORS = 3

IMMEDIATE = "immediate"
NEAR_TERM = "near_term"
STRATEGIC = "strategic"

TIMELINES: dict[str, str] = {
    IMMEDIATE: "0-6 months",
    NEAR_TERM: "6-18 months",
    STRATEGIC: "18+ months",
}

PRIORITY_BUCKETS: dict[Priority, str] = {
    Priority.IMMEDIATE: IMMEDIATE,
    Priority.SHORT_TERM: NEAR_TERM,
    Priority.MEDIUM_TERM: NEAR_TERM,
    Priority.LONG_TERM: STRATEGIC,
}


def _format_thousands(amount: int) -> str:
    return f"€{round(amount / 1000)}K"


def sum_cost_ranges(gaps: Sequence[Gap]) -> str:
    """Aggregate each gap's cost range into one low-high estimate."""
    if not gaps:
        return NO_GAPS_COST

    costed = [g for g in gaps if g.estimated_cost is not None]
    if not costed:
        return REDACTION_MARKER if all(g.is_restricted for g in gaps) else NOT_ESTIMATED_COST

    low = 0
    high: Optional[int] = 0
    for gap in costed:
        gap_low, gap_high = COST_RANGE_BOUNDS[gap.estimated_cost]
        low += gap_low
        high = None if high is None or gap_high is None else high + gap_high

    if high is None:
        return f"{_format_thousands(low)}+"
    return f"{_format_thousands(low)}-{_format_thousands(high)}"


def effort_distribution(gaps: Sequence[Gap]) -> EffortDistribution:
    return EffortDistribution(
        SMALL=sum(1 for g in gaps if g.estimated_effort == Effort.SMALL),
        MEDIUM=sum(1 for g in gaps if g.estimated_effort == Effort.MEDIUM),
        LARGE=sum(1 for g in gaps if g.estimated_effort == Effort.LARGE),
    )


def rank_vendors(gaps: Sequence[Gap], vendors: Sequence[Vendor], limit: int = DEFAULT_TOP_VENDORS) -> list[VendorRecommendation]:
    """Vendors ordered by how many of the gaps they cover; vendors covering none are left out."""
    if not gaps:
        return []

    ranked: list[VendorRecommendation] = []
    for vendor in vendors:
        covered = [
            g.id for g in gaps
            if not g.is_restricted and (vendor.id in g.suggested_vendors or vendor.covers(g.category))
        ]
        if covered:
            ranked.append(VendorRecommendation(vendor=vendor, gaps_covered=len(covered), covered_gap_ids=covered))

    ranked.sort(key=lambda r: (-r.gaps_covered, r.vendor.name, r.vendor.id))
    return ranked[:limit]


class StrategyMatrixBuilder:
    """Builds the three-bucket roadmap view from a gap set."""

    def __init__(self, can_access_full_analysis: Optional[CapabilityCheck] = None, top_vendors: int = DEFAULT_TOP_VENDORS):
        self.can_access_full_analysis = can_access_full_analysis
        self.top_vendors = top_vendors

    def _build_bucket(self, timeline: str, gaps: list[Gap], vendors: Sequence[Vendor], redact: bool) -> TimelineBucket:
        if not gaps:
            return TimelineBucket(timeline=timeline, empty_state=EMPTY_BUCKET_STATE)

        items = []
        for g in gaps:
            hidden = redact or g.is_restricted
            items.append(StrategyItem(
                gap_id=g.id,
                title=REDACTION_MARKER if hidden else g.title,
                severity=g.severity,
                description=REDACTION_MARKER if hidden else g.description,
            ))
        return TimelineBucket(
            timeline=timeline,
            gap_count=len(gaps),
            effort_distribution=effort_distribution(gaps),
            estimated_cost_range=REDACTION_MARKER if redact else sum_cost_ranges(gaps),
            top_vendors=[] if redact else rank_vendors(gaps, vendors, self.top_vendors),
            items=items,
        )

    def build_matrix(
        self,
        assessment_id: str,
        gaps: Sequence[Gap],
        vendors: Sequence[Vendor] = (),
        redact: bool = False,
    ) -> StrategyMatrix:
        partitions: dict[str, list[Gap]] = {key: [] for key in TIMELINES}
        for gap in gaps:
            partitions[PRIORITY_BUCKETS[gap.priority]].append(gap)

        buckets = {
            key: self._build_bucket(TIMELINES[key], partitions[key], vendors, redact)
            for key in TIMELINES
        }
        restricted = redact or any(g.is_restricted for g in gaps)

        if not gaps:
            summary = ALL_MET_SUMMARY
        elif restricted:
            summary = RESTRICTED_SUMMARY
        else:
            summary = (
                f"{len(partitions[IMMEDIATE])} immediate, "
                f"{len(partitions[NEAR_TERM])} near-term and "
                f"{len(partitions[STRATEGIC])} strategic gaps"
            )

        logger.debug("Strategy matrix for %s: %s", assessment_id, summary)
        return StrategyMatrix(
            assessment_id=assessment_id,
            immediate=buckets[IMMEDIATE],
            near_term=buckets[NEAR_TERM],
            strategic=buckets[STRATEGIC],
            is_restricted=restricted,
            summary=summary,
        )

    def build_for_organization(
        self,
        assessment_id: str,
        organization_id: str,
        gaps: Sequence[Gap],
        vendors: Sequence[Vendor] = (),
    ) -> StrategyMatrix:
        """Build the matrix, redacting details unless the organization is entitled."""
        entitled = self.can_access_full_analysis is not None and self.can_access_full_analysis(organization_id)
        return self.build_matrix(assessment_id, gaps, vendors, redact=not entitled)
