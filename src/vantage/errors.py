"""Exception hierarchy for the scoring engine."""

from __future__ import annotations


class VantageError(Exception):
    """Base class for all engine errors."""


class ConfigurationError(VantageError):
    """A template was authored with weights the engine cannot use.

    Raised at template validation/publish time, never while scoring a live
    assessment.
    """

    def __init__(self, message: str, total: float | None = None, delta: float | None = None):
        super().__init__(message)
        self.total = total
        self.delta = delta


class NotFoundError(VantageError):
    """A template or assessment required for the computation does not exist."""

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} not found: {identifier}")
        self.kind = kind
        self.identifier = identifier


class RuleEvaluationError(VantageError):
    """A scoring rule could not evaluate an answer value."""
