"""Domain events for the part-request lifecycle.

Both events are addressed to the owning customer: the notification
handler turns them into outbox entries when the customer shares data
with a client user.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict
from uuid import UUID

from modules.notifications.constants import TemplateKey
from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class PartRequestCreated(DomainEvent):
    template_key: ClassVar[str] = TemplateKey.PART_REQUEST_CREATED

    customer_id: UUID
    notification_data: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, kw_only=True)
class PartRequestStatusChanged(DomainEvent):
    template_key: ClassVar[str] = TemplateKey.PART_REQUEST_STATUS

    customer_id: UUID
    old_status: str
    new_status: str
    notification_data: Dict[str, Any] = field(default_factory=dict)
