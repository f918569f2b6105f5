"""Domain-event handlers that feed the notification outbox.

Handlers run synchronously on the in-process bus, inside the transaction of
the command that published the event, so the outbox row commits (or rolls
back) together with the business change.
"""

from __future__ import annotations

from typing import Any, Dict, Protocol
from uuid import UUID

import structlog

from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.notifications.repositories.django_repository import NotificationDjangoRepository
from modules.notifications.services import NotificationService

logger = structlog.get_logger(__name__)


class CustomerNotifiable(Protocol):
    """Any domain event addressed to a customer."""

    aggregate_id: UUID
    customer_id: UUID
    template_key: str
    notification_data: Dict[str, Any]


class CustomerNotificationHandler:
    def __init__(self, service: NotificationService | None = None) -> None:
        self._service = service

    @property
    def service(self) -> NotificationService:
        if self._service is None:
            self._service = NotificationService(
                repository=NotificationDjangoRepository(),
                customer_repository=CustomerDjangoRepository(),
            )
        return self._service

    def handle(self, event: CustomerNotifiable) -> None:
        entry = self.service.enqueue_for_customer(
            event.customer_id, event.template_key, event.notification_data
        )
        logger.debug(
            "notification.event_handled",
            event_name=type(event).__name__,
            aggregate_id=str(event.aggregate_id),
            enqueued=entry is not None,
        )


customer_notification_handler = CustomerNotificationHandler()
