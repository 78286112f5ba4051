"""In-memory data store, optionally loaded from YAML."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..core.weights import validate_template
from ..models.assessment import Answer, Assessment
from ..models.gap import Vendor
from ..models.subscription import Subscription
from ..models.template import Template
from .loader import load_workspace

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Dict-backed store. Templates are validated when published."""

    def __init__(self) -> None:
        self._templates: dict[str, Template] = {}
        self._assessments: dict[str, Assessment] = {}
        self._subscriptions: dict[str, Subscription] = {}
        self._vendors: dict[str, Vendor] = {}

    @classmethod
    def from_dict(cls, data: dict) -> "InMemoryStore":
        store = cls()
        for raw in data.get("templates", []) or []:
            store.publish_template(Template.model_validate(raw))
        for raw in data.get("assessments", []) or []:
            store.save_assessment(Assessment.model_validate(raw))
        for raw in data.get("subscriptions", []) or []:
            store.save_subscription(Subscription.model_validate(raw))
        for raw in data.get("vendors", []) or []:
            store.save_vendor(Vendor.model_validate(raw))
        return store

    @classmethod
    def from_yaml(cls, path: Path) -> "InMemoryStore":
        return cls.from_dict(load_workspace(path))

    def publish_template(self, template: Template) -> Template:
        """Validate and store a template. Published templates are never replaced."""
        validate_template(template)
        if template.id in self._templates:
            raise ValueError(f"Template {template.id} is already published; publish a new version instead")
        self._templates[template.id] = template
        logger.debug("Published template %s (%s)", template.id, template.name)
        return template

    def save_assessment(self, assessment: Assessment) -> Assessment:
        self._assessments[assessment.id] = assessment
        return assessment

    def record_answer(self, assessment_id: str, answer: Answer) -> Answer:
        """Append an answer, superseding any earlier answer to the same question."""
        assessment = self._assessments[assessment_id]
        previous = assessment.current_answers().get(answer.question_id)
        if previous is not None and answer.revision <= previous.revision:
            answer = answer.model_copy(update={"revision": previous.revision + 1})
        self._assessments[assessment_id] = assessment.model_copy(
            update={"answers": [*assessment.answers, answer]}
        )
        return answer

    def save_subscription(self, subscription: Subscription) -> Subscription:
        self._subscriptions[subscription.organization_id] = subscription
        return subscription

    def save_vendor(self, vendor: Vendor) -> Vendor:
        self._vendors[vendor.id] = vendor
        return vendor

    def get_template(self, template_id: str) -> Optional[Template]:
        return self._templates.get(template_id)

    def get_assessment(self, assessment_id: str) -> Optional[Assessment]:
        return self._assessments.get(assessment_id)

    def get_subscription(self, organization_id: str) -> Optional[Subscription]:
        return self._subscriptions.get(organization_id)

    def list_vendors(self) -> list[Vendor]:
        return list(self._vendors.values())
