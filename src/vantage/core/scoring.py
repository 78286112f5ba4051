"""Evidence-weighted scoring engine.

Per question: raw rule score (0..100) x evidence tier multiplier. Per section:
weighted sum over all questions, unanswered ones contributing 0. Overall:
weighted sum over sections.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import RuleEvaluationError
from ..models.assessment import (
    Answer,
    Assessment,
    EvidenceDistribution,
    EvidenceTier,
    QuestionScore,
    ScoreResult,
    SectionScore,
)
from ..models.template import NormalizedQuestion, NormalizedSection, NormalizedTemplate
from .evidence import multiplier_for
from .rules import DefaultKeywordScorer, KeywordScorer, evaluate_rule

logger = logging.getLogger(__name__)


def _percentage(count: int, total: int) -> float:
    return round(count / total * 100, 1) if total > 0 else 0.0


def build_evidence_distribution(tiers: list[EvidenceTier]) -> EvidenceDistribution:
    """Tier counts and percentages over answered questions."""
    total = len(tiers)
    tier0 = sum(1 for t in tiers if t == EvidenceTier.TIER_0)
    tier1 = sum(1 for t in tiers if t == EvidenceTier.TIER_1)
    tier2 = sum(1 for t in tiers if t == EvidenceTier.TIER_2)
    return EvidenceDistribution(
        tier0=tier0,
        tier1=tier1,
        tier2=tier2,
        total=total,
        tier0_percentage=_percentage(tier0, total),
        tier1_percentage=_percentage(tier1, total),
        tier2_percentage=_percentage(tier2, total),
    )


class ScoringEngine:
    """Computes score snapshots. Holds no per-assessment state."""

    def __init__(self, keyword_scorer: Optional[KeywordScorer] = None):
        self.keyword_scorer = keyword_scorer or DefaultKeywordScorer()

    def score_question(
        self,
        question: NormalizedQuestion,
        answer: Optional[Answer],
        assessment_id: str = "",
    ) -> QuestionScore:
        if answer is None or answer.is_empty:
            return QuestionScore(question_id=question.id, answered=False, weight=question.weight)

        multiplier = multiplier_for(answer.evidence_tier)
        error: Optional[str] = None
        try:
            raw = evaluate_rule(question.scoring_rule, answer.value, self.keyword_scorer)
        except RuleEvaluationError as e:
            logger.warning(
                "Scoring question %s in assessment %s failed, counting as 0: %s",
                question.id, assessment_id or "?", e,
            )
            raw = 0.0
            error = str(e)

        return QuestionScore(
            question_id=question.id,
            answered=True,
            raw_score=raw,
            evidence_tier=answer.evidence_tier,
            multiplier=multiplier,
            score=raw * multiplier,
            weight=question.weight,
            error=error,
        )

    def score_section(
        self,
        section: NormalizedSection,
        answers: dict[str, Answer],
        assessment_id: str = "",
    ) -> SectionScore:
        question_scores = [
            self.score_question(q, answers.get(q.id), assessment_id) for q in section.questions
        ]
        score = sum(qs.weight * qs.score for qs in question_scores)
        answered = sum(1 for qs in question_scores if qs.answered)
        logger.debug(
            "Section %s: score=%.2f answered=%d/%d",
            section.id, score, answered, len(question_scores),
        )
        return SectionScore(
            section_id=section.id,
            section_title=section.title,
            weight=section.weight,
            score=score,
            answered_count=answered,
            question_count=len(question_scores),
            question_scores=question_scores,
        )

    def score(self, assessment: Assessment, template: NormalizedTemplate) -> ScoreResult:
        """Compute the full score snapshot for an assessment."""
        if assessment.template_id != template.id:
            raise ValueError(
                f"Assessment {assessment.id} uses template {assessment.template_id}, not {template.id}"
            )

        answers = assessment.current_answers()
        known = {q.id for s in template.sections for q in s.questions}
        for question_id in answers:
            if question_id not in known:
                logger.debug("Ignoring answer to unknown question %s in %s", question_id, assessment.id)

        sections = [self.score_section(s, answers, assessment.id) for s in template.sections]
        overall = sum(s.weight * s.score for s in sections)
        overall = round(max(0.0, min(100.0, overall)), 2)

        tiers = [
            qs.evidence_tier
            for s in sections
            for qs in s.question_scores
            if qs.answered and qs.evidence_tier is not None
        ]

        return ScoreResult(
            assessment_id=assessment.id,
            template_id=template.id,
            overall_score=overall,
            section_breakdown=sections,
            evidence_distribution=build_evidence_distribution(tiers),
        )
