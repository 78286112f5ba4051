"""Questionnaire template data models."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import Field, field_validator

from .base import WireModel


class QuestionType(str, Enum):
    SINGLE_SELECT = "SINGLE_SELECT"
    MULTI_SELECT = "MULTI_SELECT"
    TEXT = "TEXT"
    RATING = "RATING"
    YES_NO = "YES_NO"


def option_key(value: object) -> str:
    """Canonical string form of an option value; YAML booleans read as Yes/No."""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)


def _stringify_keys(value):
    if isinstance(value, dict):
        return {option_key(k): v for k, v in value.items()}
    return value


class MappingRule(WireModel):
    """Explicit option value -> points table."""

    kind: Literal["mapping"] = "mapping"
    scale: float = Field(default=5, gt=0)
    mapping: dict[str, float]

    @field_validator("mapping", mode="before")
    @classmethod
    def _string_keys(cls, v):
        return _stringify_keys(v)


class KeywordRule(WireModel):
    """Free-text heuristic driven by positive/negative keyword hits."""

    kind: Literal["keyword"] = "keyword"
    scale: float = Field(default=5, gt=0)
    positive: list[str] = []
    negative: list[str] = []


class CountBucketRule(WireModel):
    """Points by how many options were selected, e.g. ``{"0": 1, "1-2": 2, "7+": 5}``."""

    kind: Literal["count"] = "count"
    scale: float = Field(default=5, gt=0)
    ranges: dict[str, float]
    exclusive_options: list[str] = ["None"]

    @field_validator("ranges", mode="before")
    @classmethod
    def _string_keys(cls, v):
        return _stringify_keys(v)


class RatingRule(WireModel):
    """The answer value is itself a number of points on ``0..scale``."""

    kind: Literal["rating"] = "rating"
    scale: float = Field(default=5, gt=0)
    criteria: dict[int, str] = {}


ScoringRule = Annotated[
    Union[MappingRule, KeywordRule, CountBucketRule, RatingRule],
    Field(discriminator="kind"),
]


class Question(WireModel):
    id: str
    text: str
    type: QuestionType = QuestionType.SINGLE_SELECT
    weight: float = 1.0
    is_foundational: bool = False
    required: bool = True
    options: list[str] = []
    scoring_rule: ScoringRule


class Section(WireModel):
    id: str
    title: str
    weight: float
    category: Optional[str] = None
    questions: list[Question] = []


class Template(WireModel):
    id: str
    name: str
    version: str = "1.0"
    sections: list[Section] = []


class NormalizedQuestion(WireModel):
    """A question with its engine-facing weight (sums to 1.0 within a section)."""

    id: str
    text: str
    type: QuestionType
    raw_weight: float
    weight: float
    is_foundational: bool
    required: bool
    options: list[str] = []
    scoring_rule: ScoringRule


class NormalizedSection(WireModel):
    id: str
    title: str
    category: str
    declared_weight: float
    weight: float
    questions: list[NormalizedQuestion] = []


class NormalizedTemplate(WireModel):
    id: str
    name: str
    version: str
    sections: list[NormalizedSection] = []

    def question_index(self) -> dict[str, tuple[NormalizedSection, NormalizedQuestion]]:
        return {q.id: (s, q) for s in self.sections for q in s.questions}
