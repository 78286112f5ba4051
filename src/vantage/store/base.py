"""Interface of the external data store the engine reads from."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from ..models.assessment import Assessment
from ..models.gap import Vendor
from ..models.subscription import Subscription
from ..models.template import Template


@runtime_checkable
class DataStore(Protocol):
    """Read access to materialized templates, assessments, subscriptions and vendors.

    Every lookup returns ``None`` when the record does not exist.
    """

    def get_template(self, template_id: str) -> Optional[Template]: ...

    def get_assessment(self, assessment_id: str) -> Optional[Assessment]: ...

    def get_subscription(self, organization_id: str) -> Optional[Subscription]: ...

    def list_vendors(self) -> list[Vendor]: ...
