"""Evidence tier policy.

Platform-wide evidentiary-trust constants: self-declared answers are scored at
60%, referenced evidence at 80%, document-extracted values in full. These are
not configurable per template.
"""

from __future__ import annotations

from ..models.assessment import ConfidenceLevel, EvidenceTier

TIER_MULTIPLIERS: dict[EvidenceTier, float] = {
    EvidenceTier.TIER_0: 0.6,
    EvidenceTier.TIER_1: 0.8,
    EvidenceTier.TIER_2: 1.0,
}

TIER_CONFIDENCE: dict[EvidenceTier, ConfidenceLevel] = {
    EvidenceTier.TIER_0: ConfidenceLevel.LOW,
    EvidenceTier.TIER_1: ConfidenceLevel.MEDIUM,
    EvidenceTier.TIER_2: ConfidenceLevel.HIGH,
}

TIER_LABELS: dict[EvidenceTier, str] = {
    EvidenceTier.TIER_0: "Self-Declared",
    EvidenceTier.TIER_1: "Referenced Evidence",
    EvidenceTier.TIER_2: "Document-Extracted",
}


def _coerce(tier: EvidenceTier | str | None) -> EvidenceTier:
    if isinstance(tier, EvidenceTier):
        return tier
    try:
        return EvidenceTier(tier)
    except ValueError:
        return EvidenceTier.TIER_0


def multiplier_for(tier: EvidenceTier | str | None) -> float:
    """Scoring multiplier for a tier; unknown or missing tiers count as TIER_0."""
    return TIER_MULTIPLIERS[_coerce(tier)]


def confidence_contribution_for(tier: EvidenceTier | str | None) -> ConfidenceLevel:
    return TIER_CONFIDENCE[_coerce(tier)]

