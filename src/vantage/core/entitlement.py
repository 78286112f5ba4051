"""Subscription entitlements and freemium gating.

The single place where a subscription plan is interpreted. Downstream code
receives ``EntitlementGate.can_access_full_analysis`` as an injected
capability check and never looks at plans itself.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from ..models.subscription import Plan, Subscription

logger = logging.getLogger(__name__)

CapabilityCheck = Callable[[str], bool]


class SubscriptionLookup(Protocol):
    def get_subscription(self, organization_id: str) -> Optional[Subscription]: ...


FEATURE_MATRIX: dict[str, dict[Plan, bool]] = {
    "full_analysis": {
        Plan.FREE: False,
        Plan.PREMIUM: True,
        Plan.ENTERPRISE: True,
    },
    "report_export": {
        Plan.FREE: False,
        Plan.PREMIUM: True,
        Plan.ENTERPRISE: True,
    },
}


class EntitlementGate:
    """Resolves what an organization's plan allows. Fails closed."""

    def __init__(self, subscriptions: SubscriptionLookup):
        self.subscriptions = subscriptions

    def plan_for(self, organization_id: str) -> Optional[Plan]:
        subscription = self.subscriptions.get_subscription(organization_id)
        if subscription is None:
            return None
        return subscription.plan

    def check_feature(self, organization_id: str, feature: str) -> bool:
        """Check if a feature is available on the organization's plan."""
        plan = self.plan_for(organization_id)
        if plan is None:
            return False
        return bool(FEATURE_MATRIX.get(feature, {}).get(plan, False))

    def can_access_full_analysis(self, organization_id: str) -> bool:
        plan = self.plan_for(organization_id)
        if plan is None:
            logger.warning("No subscription found for organization %s, defaulting to FREE", organization_id)
            return False
        allowed = FEATURE_MATRIX["full_analysis"][plan]
        logger.info("Organization %s plan: %s, real analysis: %s", organization_id, plan.value, allowed)
        return allowed

    def should_generate_real_analysis(self, organization_id: str) -> bool:
        return self.can_access_full_analysis(organization_id)
