"""Scoring rule evaluators.

Each rule variant has exactly one evaluator returning a raw question score on
0..100. Evaluators raise ``RuleEvaluationError`` when an answer value cannot be
scored; the scoring engine recovers from it.
"""

from __future__ import annotations

import re
from typing import Any, Optional, Protocol

from ..errors import RuleEvaluationError
from ..models.template import (
    CountBucketRule,
    KeywordRule,
    MappingRule,
    RatingRule,
    option_key,
)

_RANGE_RE = re.compile(r"^\s*(\d+)\s*(?:-\s*(\d+)|(\+))?\s*$")


class KeywordScorer(Protocol):
    """Pluggable free-text heuristic: returns points on ``0..rule.scale``."""

    def __call__(self, rule: KeywordRule, text: str) -> float: ...


class DefaultKeywordScorer:
    """Start at a base fraction of the scale, step up per positive hit, down per negative hit."""

    def __init__(self, base_fraction: float = 0.5, positive_step: float = 0.1, negative_step: float = 0.15):
        self.base_fraction = base_fraction
        self.positive_step = positive_step
        self.negative_step = negative_step

    @classmethod
    def from_config(cls, config: dict) -> "DefaultKeywordScorer":
        keyword = (config.get("scoring") or {}).get("keyword") or {}
        return cls(
            base_fraction=float(keyword.get("base_fraction", 0.5)),
            positive_step=float(keyword.get("positive_step", 0.1)),
            negative_step=float(keyword.get("negative_step", 0.15)),
        )

    def __call__(self, rule: KeywordRule, text: str) -> float:
        lowered = text.lower()
        positives = sum(1 for kw in rule.positive if kw and kw.lower() in lowered)
        negatives = sum(1 for kw in rule.negative if kw and kw.lower() in lowered)
        fraction = self.base_fraction + positives * self.positive_step - negatives * self.negative_step
        return max(0.0, min(1.0, fraction)) * rule.scale


def _to_percent(points: float, scale: float) -> float:
    return max(0.0, min(100.0, points / scale * 100.0))


def _value_key(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return option_key(value)


def _lookup(mapping: dict[str, float], value: Any) -> float:
    key = _value_key(value)
    if key in mapping:
        return mapping[key]
    folded = key.strip().casefold()
    for candidate, points in mapping.items():
        if candidate.strip().casefold() == folded:
            return points
    raise RuleEvaluationError(f"Value {key!r} is not a recognized option")


def evaluate_mapping(rule: MappingRule, value: Any) -> float:
    if isinstance(value, (list, tuple)):
        points = [_lookup(rule.mapping, v) for v in value]
        return _to_percent(sum(points) / len(points), rule.scale)
    return _to_percent(_lookup(rule.mapping, value), rule.scale)


def evaluate_keywords(rule: KeywordRule, value: Any, scorer: KeywordScorer) -> float:
    if isinstance(value, (list, tuple)):
        text = " ".join(str(v) for v in value)
    elif isinstance(value, str):
        text = value
    else:
        raise RuleEvaluationError(f"Keyword rule expects text, got {type(value).__name__}")
    if not text.strip():
        return 0.0
    return _to_percent(scorer(rule, text), rule.scale)


def parse_count_range(key: str) -> tuple[int, Optional[int]]:
    """``"3"`` -> (3, 3), ``"1-2"`` -> (1, 2), ``"7+"`` -> (7, None)."""
    match = _RANGE_RE.match(key)
    if not match:
        raise RuleEvaluationError(f"Malformed count range {key!r}")
    low = int(match.group(1))
    if match.group(3):
        return low, None
    high = int(match.group(2)) if match.group(2) else low
    if high < low:
        raise RuleEvaluationError(f"Malformed count range {key!r}")
    return low, high


def _selection_count(rule: CountBucketRule, value: Any) -> int:
    if isinstance(value, bool):
        raise RuleEvaluationError("Count rule cannot score a boolean answer")
    if isinstance(value, int):
        return value
    exclusive = {o.casefold() for o in rule.exclusive_options}
    if isinstance(value, str):
        value = [value]
    if isinstance(value, (list, tuple)):
        return sum(1 for v in value if str(v).strip() and str(v).casefold() not in exclusive)
    raise RuleEvaluationError(f"Count rule cannot score a {type(value).__name__} answer")


def evaluate_count(rule: CountBucketRule, value: Any) -> float:
    count = _selection_count(rule, value)
    for key, points in rule.ranges.items():
        low, high = parse_count_range(key)
        if count >= low and (high is None or count <= high):
            return _to_percent(points, rule.scale)
    raise RuleEvaluationError(f"No count range covers {count} selections")


def evaluate_rating(rule: RatingRule, value: Any) -> float:
    if isinstance(value, bool):
        raise RuleEvaluationError("Rating rule cannot score a boolean answer")
    try:
        points = float(value)
    except (TypeError, ValueError):
        raise RuleEvaluationError(f"Rating {value!r} is not a number") from None
    if not 0 <= points <= rule.scale:
        raise RuleEvaluationError(f"Rating {points} is outside 0..{rule.scale}")
    return _to_percent(points, rule.scale)


def evaluate_rule(rule: object, value: Any, keyword_scorer: Optional[KeywordScorer] = None) -> float:
    """Raw question score on 0..100 for an answer value."""
    if isinstance(rule, MappingRule):
        return evaluate_mapping(rule, value)
    if isinstance(rule, KeywordRule):
        return evaluate_keywords(rule, value, keyword_scorer or DefaultKeywordScorer())
    if isinstance(rule, CountBucketRule):
        return evaluate_count(rule, value)
    if isinstance(rule, RatingRule):
        return evaluate_rating(rule, value)
    raise RuleEvaluationError(f"Unsupported scoring rule {type(rule).__name__}")
