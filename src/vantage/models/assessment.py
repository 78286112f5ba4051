"""Assessment, answer and score snapshot data models."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator

from .base import WireModel


class EvidenceTier(str, Enum):
    TIER_0 = "TIER_0"  # self-declared
    TIER_1 = "TIER_1"  # referenced, not machine-verified
    TIER_2 = "TIER_2"  # extracted from an authoritative document


class ConfidenceLevel(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class RiskLevel(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class Answer(WireModel):
    question_id: str
    value: Any = None
    evidence_tier: EvidenceTier = EvidenceTier.TIER_0
    source_document_id: Optional[str] = None
    extraction_confidence: Optional[float] = Field(default=None, ge=0, le=1)
    revision: int = 0

    @field_validator("evidence_tier", mode="before")
    @classmethod
    def _missing_tier_is_self_declared(cls, v):
        return EvidenceTier.TIER_0 if v is None else v

    @property
    def is_empty(self) -> bool:
        if self.value is None:
            return True
        if isinstance(self.value, str):
            return not self.value.strip()
        if isinstance(self.value, (list, tuple, set)):
            return len(self.value) == 0
        return False


class Assessment(WireModel):
    id: str
    organization_id: str
    template_id: str
    answers: list[Answer] = []

    def current_answers(self) -> dict[str, Answer]:
        """Latest answer per question; higher revision wins, ties go to the later entry."""
        current: dict[str, Answer] = {}
        for answer in self.answers:
            existing = current.get(answer.question_id)
            if existing is None or answer.revision >= existing.revision:
                current[answer.question_id] = answer
        return current


class QuestionScore(WireModel):
    question_id: str
    answered: bool
    raw_score: float = 0.0
    evidence_tier: Optional[EvidenceTier] = None
    multiplier: float = 0.0
    score: float = 0.0
    weight: float = 0.0
    error: Optional[str] = None


class SectionScore(WireModel):
    section_id: str
    section_title: str
    weight: float
    score: float
    answered_count: int = 0
    question_count: int = 0
    question_scores: list[QuestionScore] = []


class EvidenceDistribution(WireModel):
    tier0: int = 0
    tier1: int = 0
    tier2: int = 0
    total: int = 0
    tier0_percentage: float = 0.0
    tier1_percentage: float = 0.0
    tier2_percentage: float = 0.0


class ScoreResult(WireModel):
    assessment_id: str
    template_id: str
    overall_score: float
    section_breakdown: list[SectionScore] = []
    evidence_distribution: EvidenceDistribution = EvidenceDistribution()


class ScoreReport(ScoreResult):
    """Score snapshot plus its derived risk and confidence classification."""

    risk_level: RiskLevel
    risk_message: str
    confidence_level: ConfidenceLevel
