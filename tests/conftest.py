"""Shared fixtures for Vantage tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from vantage.core.weights import normalize_template
from vantage.models.assessment import Assessment
from vantage.models.gap import Vendor
from vantage.models.template import NormalizedTemplate, Template
from vantage.store.memory import InMemoryStore

SECURITY_TEMPLATE = {
    "id": "tpl-security",
    "name": "Security Baseline",
    "version": "2.1",
    "sections": [
        {
            "id": "sec-gov",
            "title": "Governance",
            "weight": 0.4,
            "questions": [
                {
                    "id": "gov-1",
                    "text": "Is there a board-approved information security policy?",
                    "type": "YES_NO",
                    "weight": 2.0,
                    "scoringRule": {"kind": "mapping", "mapping": {"Yes": 5, "No": 0}},
                },
                {
                    "id": "gov-2",
                    "text": "Describe how the policy is reviewed.",
                    "type": "TEXT",
                    "scoringRule": {
                        "kind": "keyword",
                        "positive": ["annual", "documented"],
                        "negative": ["never", "none"],
                    },
                },
            ],
        },
        {
            "id": "sec-ops",
            "title": "Operations",
            "weight": 0.6,
            "category": "OPERATIONS",
            "questions": [
                {
                    "id": "ops-1",
                    "text": "Which endpoint controls are deployed?",
                    "type": "MULTI_SELECT",
                    "options": ["MFA", "EDR", "Disk encryption", "Patch management", "None"],
                    "scoringRule": {
                        "kind": "count",
                        "ranges": {"0": 0, "1-2": 2, "3-4": 4, "5+": 5},
                    },
                },
                {
                    "id": "ops-2",
                    "text": "Rate the maturity of incident response.",
                    "type": "RATING",
                    "scoringRule": {"kind": "rating", "criteria": {0: "None", 3: "Defined", 5: "Optimized"}},
                },
            ],
        },
    ],
}

# Overall 59.33: governance 85.33 (gov-1 100, gov-2 56), operations 42 (ops-1 24, ops-2 60).
SAMPLE_ANSWERS = [
    {"questionId": "gov-1", "value": "Yes", "evidenceTier": "TIER_2"},
    {"questionId": "gov-2", "value": "We run an annual documented review", "evidenceTier": "TIER_1"},
    {"questionId": "ops-1", "value": ["MFA", "EDR"], "evidenceTier": "TIER_0"},
    {"questionId": "ops-2", "value": 3, "evidenceTier": "TIER_2"},
]

VENDORS = [
    {"id": "v-secops", "name": "SecureOps", "categories": ["OPERATIONS"]},
    {"id": "v-govco", "name": "GovCo", "categories": ["GOVERNANCE"]},
    {"id": "v-acme", "name": "Acme", "categories": ["OPERATIONS", "GOVERNANCE"]},
]

SUBSCRIPTIONS = [
    {"organizationId": "org-free", "plan": "FREE"},
    {"organizationId": "org-premium", "plan": "PREMIUM"},
    {"organizationId": "org-ent", "plan": "ENTERPRISE"},
]


@pytest.fixture
def template_data() -> dict:
    return yaml.safe_load(yaml.safe_dump(SECURITY_TEMPLATE))


@pytest.fixture
def sample_template(template_data: dict) -> Template:
    return Template.model_validate(template_data)


@pytest.fixture
def normalized_template(sample_template: Template) -> NormalizedTemplate:
    return normalize_template(sample_template)


@pytest.fixture
def sample_assessment() -> Assessment:
    return Assessment.model_validate({
        "id": "asmt-1",
        "organizationId": "org-ent",
        "templateId": "tpl-security",
        "answers": SAMPLE_ANSWERS,
    })


@pytest.fixture
def workspace_data(template_data: dict) -> dict:
    return {
        "templates": [template_data],
        "assessments": [
            {
                "id": "asmt-1",
                "organizationId": "org-ent",
                "templateId": "tpl-security",
                "answers": SAMPLE_ANSWERS,
            },
            {"id": "asmt-empty", "organizationId": "org-free", "templateId": "tpl-security"},
        ],
        "subscriptions": SUBSCRIPTIONS,
        "vendors": VENDORS,
    }


@pytest.fixture
def store(workspace_data: dict) -> InMemoryStore:
    return InMemoryStore.from_dict(workspace_data)


@pytest.fixture
def workspace_file(tmp_path: Path, workspace_data: dict) -> Path:
    """Write a workspace YAML usable by the CLI."""
    path = tmp_path / "workspace.yaml"
    path.write_text(yaml.safe_dump(workspace_data, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def template_file(tmp_path: Path, template_data: dict) -> Path:
    path = tmp_path / "security.yaml"
    path.write_text(yaml.safe_dump(template_data, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def vendors() -> list[Vendor]:
    return [Vendor.model_validate(v) for v in VENDORS]
