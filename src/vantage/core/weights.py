"""Template weight validation and normalization.

Authors declare section weights as fractions of the overall score and question
weights as relative importances ("this question matters 1.5x"). The engine
needs both levels as fractions summing to exactly 1.0.
"""

from __future__ import annotations

import logging
import math

from ..errors import ConfigurationError
from ..models.template import (
    NormalizedQuestion,
    NormalizedSection,
    NormalizedTemplate,
    Section,
    Template,
)

logger = logging.getLogger(__name__)

WEIGHT_TOLERANCE = 0.001


def normalize_weights(weights: list[float]) -> list[float]:
    """Scale weights to sum to 1.0; an all-zero list is distributed equally."""
    if not weights:
        return []
    total = sum(weights)
    if total == 0:
        return [1.0 / len(weights)] * len(weights)
    return [w / total for w in weights]


def _check_section_weights(template: Template) -> float:
    if not template.sections:
        raise ConfigurationError(f"Template '{template.id}' has no sections", total=0.0, delta=-1.0)

    for section in template.sections:
        if not math.isfinite(section.weight) or section.weight < 0:
            raise ConfigurationError(
                f"Section '{section.id}' in template '{template.id}' has invalid weight {section.weight}"
            )
        for question in section.questions:
            if not math.isfinite(question.weight) or question.weight < 0:
                raise ConfigurationError(
                    f"Question '{question.id}' in section '{section.id}' has invalid weight {question.weight}"
                )
        if not math.isfinite(sum(q.weight for q in section.questions)):
            raise ConfigurationError(f"Question weights in section '{section.id}' overflow")

    total = sum(s.weight for s in template.sections)
    delta = total - 1.0
    if not abs(delta) <= WEIGHT_TOLERANCE:
        raise ConfigurationError(
            f"Section weights in template '{template.id}' sum to {total:.4f} "
            f"(delta {delta:+.4f}), must equal 1.0 (±{WEIGHT_TOLERANCE})",
            total=total,
            delta=delta,
        )
    return total


def validate_template(template: Template) -> None:
    """Reject a template whose weights cannot be used for scoring."""
    _check_section_weights(template)


def _section_category(section: Section) -> str:
    if section.category:
        return section.category
    return "_".join(section.title.upper().split())


def normalize_template(template: Template) -> NormalizedTemplate:
    """Validate section weights and renormalize both levels to sum to 1.0."""
    total = _check_section_weights(template)

    sections: list[NormalizedSection] = []
    for section in template.sections:
        question_weights = normalize_weights([q.weight for q in section.questions])
        if section.questions and sum(q.weight for q in section.questions) == 0:
            logger.debug("Section '%s' has zero question weights, distributing equally", section.id)

        questions = [
            NormalizedQuestion(
                id=q.id,
                text=q.text,
                type=q.type,
                raw_weight=q.weight,
                weight=weight,
                is_foundational=q.is_foundational or q.weight > 1.0,
                required=q.required,
                options=q.options,
                scoring_rule=q.scoring_rule,
            )
            for q, weight in zip(section.questions, question_weights)
        ]
        sections.append(NormalizedSection(
            id=section.id,
            title=section.title,
            category=_section_category(section),
            declared_weight=section.weight,
            weight=section.weight / total,
            questions=questions,
        ))

    return NormalizedTemplate(
        id=template.id,
        name=template.name,
        version=template.version,
        sections=sections,
    )
