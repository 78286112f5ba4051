"""Markdown assessment report."""

from __future__ import annotations

from typing import Optional

from .. import __version__
from ..core.evidence import TIER_LABELS
from ..core.gaps import SEVERITY_ORDER
from ..models.assessment import EvidenceTier, ScoreReport
from ..models.gap import Gap
from ..models.strategy import StrategyMatrix


def generate_assessment_report(
    report: ScoreReport,
    gaps: list[Gap],
    matrix: StrategyMatrix,
    template_name: str = "",
    organization_id: Optional[str] = None,
) -> str:
    """Generate the ASSESSMENT-REPORT.md for a scored assessment."""
    lines: list[str] = []
    lines.append("# Compliance Assessment Report")
    lines.append("")
    lines.append(f"**Assessment:** {report.assessment_id}")
    if template_name:
        lines.append(f"**Template:** {template_name}")
    if organization_id:
        lines.append(f"**Organization:** {organization_id}")
    lines.append(f"**Overall Score:** {report.overall_score:.2f} / 100")
    lines.append(f"**Risk Level:** {report.risk_level.value}")
    lines.append(f"**Confidence:** {report.confidence_level.value}")
    lines.append("")
    lines.append(f"> {report.risk_message}")
    lines.append("")

    lines.append("## Section Breakdown")
    lines.append("")
    lines.append("| Section | Weight | Score | Answered |")
    lines.append("|---------|--------|-------|----------|")
    for section in report.section_breakdown:
        lines.append(
            f"| {section.section_title} | {section.weight * 100:.1f}% | {section.score:.1f} "
            f"| {section.answered_count}/{section.question_count} |"
        )
    lines.append("")

    dist = report.evidence_distribution
    lines.append("## Evidence Quality")
    lines.append("")
    lines.append("| Tier | Answers | Share |")
    lines.append("|------|---------|-------|")
    lines.append(f"| {TIER_LABELS[EvidenceTier.TIER_2]} | {dist.tier2} | {dist.tier2_percentage}% |")
    lines.append(f"| {TIER_LABELS[EvidenceTier.TIER_1]} | {dist.tier1} | {dist.tier1_percentage}% |")
    lines.append(f"| {TIER_LABELS[EvidenceTier.TIER_0]} | {dist.tier0} | {dist.tier0_percentage}% |")
    lines.append("")

    lines.append("## Gap Analysis")
    lines.append("")
    if not gaps:
        lines.append("No gaps identified.")
        lines.append("")
    for gap in sorted(gaps, key=lambda g: SEVERITY_ORDER[g.severity]):
        lines.append(f"### {gap.title} [{gap.severity.value}]")
        lines.append(f"**Priority:** {gap.priority.value}")
        if gap.estimated_effort:
            lines.append(f"**Effort:** {gap.estimated_effort.value}")
        if gap.estimated_cost:
            lines.append(f"**Cost:** {gap.estimated_cost.value}")
        lines.append(f"\n{gap.description}")
        lines.append("")

    lines.append("## Remediation Roadmap")
    lines.append("")
    lines.append(f"*{matrix.summary}*")
    lines.append("")
    lines.append("| Timeline | Gaps | Estimated Cost | Top Vendors |")
    lines.append("|----------|------|----------------|-------------|")
    for bucket in matrix.buckets():
        vendors = ", ".join(
            f"{r.vendor.name} ({r.gaps_covered})" for r in bucket.top_vendors
        ) or "-"
        lines.append(f"| {bucket.timeline} | {bucket.gap_count} | {bucket.estimated_cost_range} | {vendors} |")
    lines.append("")

    lines.append("---")
    lines.append(f"*Generated by Vantage v{__version__}*")

    return "\n".join(lines)
