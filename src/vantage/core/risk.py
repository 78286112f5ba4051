"""Risk and confidence classification.

The score measures compliance strength: a higher score means lower risk.
"""

from __future__ import annotations

import math

from pydantic import BaseModel

from ..models.assessment import ConfidenceLevel, EvidenceDistribution, RiskLevel

# Lower bound (inclusive) of each band, highest first.
RISK_BANDS: list[tuple[float, RiskLevel]] = [
    (80.0, RiskLevel.LOW),
    (60.0, RiskLevel.MEDIUM),
    (30.0, RiskLevel.HIGH),
    (0.0, RiskLevel.CRITICAL),
]

RISK_MESSAGES: dict[RiskLevel, str] = {
    RiskLevel.CRITICAL: (
        "Critical compliance exposure. Foundational controls are missing or unverified; "
        "immediate remediation is required."
    ),
    RiskLevel.HIGH: (
        "High compliance risk. Significant gaps exist in key control areas and should be "
        "addressed in the short term."
    ),
    RiskLevel.MEDIUM: (
        "Moderate compliance risk. Core controls are in place but several areas need "
        "strengthening."
    ),
    RiskLevel.LOW: (
        "Low compliance risk. Controls are well established; maintain and evidence them "
        "through regular review."
    ),
}

HIGH_CONFIDENCE_TIER2 = 60.0
MEDIUM_CONFIDENCE_TIER2 = 30.0


class RiskClassification(BaseModel):
    level: RiskLevel
    message: str


def classify_risk(score: float) -> RiskClassification:
    """Map a 0..100 score to a risk level; band boundaries belong to the higher band."""
    if math.isnan(score) or score < 0 or score > 100:
        raise ValueError(f"Score {score} is outside 0..100")
    for lower, level in RISK_BANDS:
        if score >= lower:
            return RiskClassification(level=level, message=RISK_MESSAGES[level])
    raise AssertionError("unreachable")


def classify_confidence(distribution: EvidenceDistribution) -> ConfidenceLevel:
    """Confidence falls as the share of document-extracted answers falls."""
    if distribution.total > 0:
        tier2 = distribution.tier2 / distribution.total * 100
    else:
        tier2 = distribution.tier2_percentage
    if tier2 >= HIGH_CONFIDENCE_TIER2:
        return ConfidenceLevel.HIGH
    if tier2 >= MEDIUM_CONFIDENCE_TIER2:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW
