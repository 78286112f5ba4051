"""Assessment service: the operations exposed to the API/UI layer.

Each call reads an immutable snapshot from the data store and runs pure
computation over it. The entitlement gate is constructed once here and its
capability check is handed to the gap generator and matrix builder.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import NotFoundError
from ..models.assessment import Assessment, ScoreReport, ScoreResult
from ..models.gap import Gap
from ..models.strategy import StrategyMatrix
from ..models.template import NormalizedTemplate
from ..store.base import DataStore
from .config import DEFAULT_CONFIG
from .entitlement import EntitlementGate
from .gaps import GapAnalysisGenerator
from .risk import classify_confidence, classify_risk
from .rules import DefaultKeywordScorer
from .scoring import ScoringEngine
from .strategy import StrategyMatrixBuilder
from .weights import normalize_template

logger = logging.getLogger(__name__)


class AssessmentService:
    def __init__(
        self,
        store: DataStore,
        engine: Optional[ScoringEngine] = None,
        gate: Optional[EntitlementGate] = None,
        gap_threshold: float = 80.0,
        top_vendors: int = 3,
    ):
        self.store = store
        self.engine = engine or ScoringEngine()
        self.gate = gate or EntitlementGate(store)
        self.gaps = GapAnalysisGenerator(self.gate.can_access_full_analysis, threshold=gap_threshold)
        self.strategy = StrategyMatrixBuilder(self.gate.can_access_full_analysis, top_vendors=top_vendors)

    @classmethod
    def from_config(cls, store: DataStore, config: Optional[dict] = None) -> "AssessmentService":
        config = config or DEFAULT_CONFIG
        return cls(
            store,
            engine=ScoringEngine(DefaultKeywordScorer.from_config(config)),
            gap_threshold=float((config.get("gaps") or {}).get("threshold", 80)),
            top_vendors=int((config.get("strategy") or {}).get("top_vendors", 3)),
        )

    def _load(self, assessment_id: str) -> tuple[Assessment, NormalizedTemplate]:
        assessment = self.store.get_assessment(assessment_id)
        if assessment is None:
            raise NotFoundError("Assessment", assessment_id)
        template = self.store.get_template(assessment.template_id)
        if template is None:
            raise NotFoundError("Template", assessment.template_id)
        return assessment, normalize_template(template)

    def _score(self, assessment_id: str) -> tuple[ScoreResult, NormalizedTemplate]:
        assessment, template = self._load(assessment_id)
        return self.engine.score(assessment, template), template

    def compute_score(self, assessment_id: str) -> ScoreReport:
        """Score snapshot with risk level and confidence level."""
        result, _ = self._score(assessment_id)
        risk = classify_risk(result.overall_score)
        report = ScoreReport(
            **result.model_dump(),
            risk_level=risk.level,
            risk_message=risk.message,
            confidence_level=classify_confidence(result.evidence_distribution),
        )
        logger.info(
            "Assessment %s scored %.2f (%s risk, %s confidence)",
            assessment_id, report.overall_score, report.risk_level.value, report.confidence_level.value,
        )
        return report

    def get_gap_analysis(self, assessment_id: str, organization_id: str) -> list[Gap]:
        assessment = self.store.get_assessment(assessment_id)
        if assessment is None:
            raise NotFoundError("Assessment", assessment_id)
        if self.store.get_template(assessment.template_id) is None:
            raise NotFoundError("Template", assessment.template_id)
        return self.gaps.get_gap_analysis(
            assessment_id,
            organization_id,
            load_score=lambda: self._score(assessment_id),
            vendors=self.store.list_vendors(),
        )

    def get_strategy_matrix(self, assessment_id: str, organization_id: str) -> StrategyMatrix:
        gaps = self.get_gap_analysis(assessment_id, organization_id)
        return self.strategy.build_for_organization(
            assessment_id, organization_id, gaps, self.store.list_vendors()
        )
