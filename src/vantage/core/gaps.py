"""Gap analysis: real prioritized gaps for entitled callers, a restricted mock otherwise.

Real gaps are derived from the score snapshot. On the 0-5 scale
(question score / 20):

  severity:  <1.5 CRITICAL, <2.5 HIGH, <3.5 MEDIUM, else LOW
  priority:  (5 - s) * 2, +2 if foundational, + section weight * 5, clamped 1-10
             >=9 IMMEDIATE, >=6 SHORT_TERM, >=3 MEDIUM_TERM, else LONG_TERM
  effort:    LARGE if section weight > 0.25 and foundational and s < 2.0,
             MEDIUM if 0.15 <= section weight <= 0.25 or foundational, else SMALL
"""

from __future__ import annotations

import hashlib
import logging
import math
from typing import Callable, Sequence

from ..models.assessment import EvidenceTier, QuestionScore, ScoreResult
from ..models.gap import CostRange, Effort, Gap, Priority, Severity, Vendor
from ..models.template import NormalizedSection, NormalizedTemplate
from .entitlement import CapabilityCheck

logger = logging.getLogger(__name__)

UPSELL_MARKER = "[UNLOCK PREMIUM TO SEE DETAILS]"
HIDDEN_CATEGORY = "HIDDEN_ANALYSIS"
DEFAULT_GAP_THRESHOLD = 80.0

MOCK_TITLES = [
    "Risk Area",
    "Compliance Gap",
    "Control Weakness",
    "Process Deficiency",
    "Documentation Gap",
]

MOCK_TEASERS = [
    "A control area in this assessment needs attention.",
    "Part of your programme falls short of the expected standard.",
    "We identified a weakness that affects your overall score.",
    "A process gap may expose you to regulatory findings.",
    "Supporting documentation for a requirement appears incomplete.",
]

MOCK_SEVERITIES = [Severity.HIGH, Severity.MEDIUM, Severity.LOW]

SEVERITY_ORDER = {Severity.CRITICAL: 0, Severity.HIGH: 1, Severity.MEDIUM: 2, Severity.LOW: 3}


def calculate_gap_severity(score: float) -> Severity:
    """Severity from a 0-5 question score."""
    if score < 1.5:
        return Severity.CRITICAL
    if score < 2.5:
        return Severity.HIGH
    if score < 3.5:
        return Severity.MEDIUM
    return Severity.LOW


def calculate_priority_score(score: float, is_foundational: bool, section_weight: float) -> int:
    priority = (5 - score) * 2
    if is_foundational:
        priority += 2
    priority += section_weight * 5
    return max(1, min(10, math.floor(priority + 0.5)))


def score_to_priority(priority_score: int) -> Priority:
    if priority_score >= 9:
        return Priority.IMMEDIATE
    if priority_score >= 6:
        return Priority.SHORT_TERM
    if priority_score >= 3:
        return Priority.MEDIUM_TERM
    return Priority.LONG_TERM


def estimate_effort(section_weight: float, is_foundational: bool, score: float) -> Effort:
    if section_weight > 0.25 and is_foundational and score < 2.0:
        return Effort.LARGE
    if 0.15 <= section_weight <= 0.25:
        return Effort.MEDIUM
    if is_foundational:
        return Effort.MEDIUM
    return Effort.SMALL


def estimate_cost(effort: Effort, severity: Severity, section_weight: float, is_foundational: bool) -> CostRange:
    if effort == Effort.LARGE and severity == Severity.CRITICAL and section_weight > 0.20:
        return CostRange.OVER_250K
    if effort == Effort.LARGE and severity == Severity.CRITICAL:
        return CostRange.RANGE_100K_250K
    if effort == Effort.LARGE or (effort == Effort.MEDIUM and is_foundational):
        return CostRange.RANGE_50K_100K
    if effort == Effort.MEDIUM or (effort == Effort.SMALL and is_foundational):
        return CostRange.RANGE_10K_50K
    return CostRange.UNDER_10K


def _describe(section: NormalizedSection, qs: QuestionScore) -> str:
    if not qs.answered:
        return f"{section.title}: no answer provided. Unanswered questions score zero."
    parts = [f"{section.title}: scored {qs.score:.0f}/100."]
    if qs.error:
        parts.append("The answer could not be evaluated against the scoring rules.")
    if qs.evidence_tier == EvidenceTier.TIER_0:
        parts.append("Answer is self-declared; supporting evidence would raise the score.")
    return " ".join(parts)


class GapAnalysisGenerator:
    """Produces the gap list, real or mocked depending on the injected capability check."""

    def __init__(self, can_access_full_analysis: CapabilityCheck, threshold: float = DEFAULT_GAP_THRESHOLD):
        self.can_access_full_analysis = can_access_full_analysis
        self.threshold = threshold

    def generate_gap_analysis(
        self,
        score: ScoreResult,
        template: NormalizedTemplate,
        vendors: Sequence[Vendor] = (),
    ) -> list[Gap]:
        """One gap per question scoring below the threshold, highest priority first.

        Unanswered optional questions still score 0 but are not reported as gaps.
        """
        index = template.question_index()
        gaps: list[Gap] = []

        for section_score in score.section_breakdown:
            for qs in section_score.question_scores:
                if qs.score >= self.threshold:
                    continue
                entry = index.get(qs.question_id)
                if entry is None:
                    continue
                section, question = entry
                if not qs.answered and not question.required:
                    continue

                s = qs.score / 20
                severity = calculate_gap_severity(s)
                priority_score = calculate_priority_score(s, question.is_foundational, section.weight)
                effort = estimate_effort(section.weight, question.is_foundational, s)
                gaps.append(Gap(
                    id=f"gap-{score.assessment_id}-{question.id}",
                    assessment_id=score.assessment_id,
                    question_id=question.id,
                    category=section.category,
                    title=question.text,
                    description=_describe(section, qs),
                    severity=severity,
                    priority=score_to_priority(priority_score),
                    priority_score=priority_score,
                    estimated_cost=estimate_cost(effort, severity, section.weight, question.is_foundational),
                    estimated_effort=effort,
                    suggested_vendors=[v.id for v in vendors if v.covers(section.category)],
                    is_restricted=False,
                ))

        gaps.sort(key=lambda g: (-(g.priority_score or 0), SEVERITY_ORDER[g.severity], g.id))
        logger.info("Generated %d gaps for assessment %s", len(gaps), score.assessment_id)
        return gaps

    def generate_mocked_gap_analysis(self, assessment_id: str) -> list[Gap]:
        """3-5 restricted placeholder gaps. Pure local computation, no analysis backend."""
        digest = hashlib.sha256(assessment_id.encode("utf-8")).digest()
        count = 3 + digest[0] % 3
        title_offset = digest[1] % len(MOCK_TITLES)
        severity_offset = digest[2] % len(MOCK_SEVERITIES)

        gaps: list[Gap] = []
        for i in range(count):
            slot = (title_offset + i) % len(MOCK_TITLES)
            gaps.append(Gap(
                id=f"mock-gap-{assessment_id}-{i + 1}",
                assessment_id=assessment_id,
                category=HIDDEN_CATEGORY,
                title=f"{MOCK_TITLES[slot]} {i + 1}",
                description=f"{MOCK_TEASERS[slot]} {UPSELL_MARKER}",
                severity=MOCK_SEVERITIES[(severity_offset + i) % len(MOCK_SEVERITIES)],
                priority=Priority.MEDIUM_TERM,
                priority_score=None,
                estimated_cost=None,
                estimated_effort=None,
                suggested_vendors=[],
                is_restricted=True,
            ))

        logger.info("Generated %d mocked gaps for assessment %s", len(gaps), assessment_id)
        return gaps

    def get_gap_analysis(
        self,
        assessment_id: str,
        organization_id: str,
        load_score: Callable[[], tuple[ScoreResult, NormalizedTemplate]],
        vendors: Sequence[Vendor] = (),
    ) -> list[Gap]:
        """Real gaps for entitled organizations; the score is only computed for them."""
        if not self.can_access_full_analysis(organization_id):
            return self.generate_mocked_gap_analysis(assessment_id)
        score, template = load_score()
        return self.generate_gap_analysis(score, template, vendors)
