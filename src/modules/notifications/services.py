"""Notification outbox service layer (Use Cases).

Enqueueing is internal (called by domain-event handlers inside the business
transaction, never sends anything). Reading and driving the outbox state
machine is an administrative operation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.db import transaction

from modules.accounts.policies import require_admin
from modules.core.serialization import normalize_for_json
from modules.notifications.constants import Channel
from modules.notifications.exceptions import NotificationNotFailed, NotificationNotFound

if TYPE_CHECKING:
    from modules.accounts.models import AppUser
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.notifications.models import NotificationOutbox
    from modules.notifications.repositories.interfaces import INotificationRepository

logger = structlog.get_logger(__name__)


class NotificationService:
    def __init__(
        self,
        repository: INotificationRepository,
        customer_repository: ICustomerRepository,
    ) -> None:
        self._repo = repository
        self._customer_repo = customer_repository

    # ------------------------------------------------------------------
    # Enqueue
    # ------------------------------------------------------------------

    def enqueue(
        self,
        channel: str,
        recipient: str,
        template_key: str,
        data: Dict[str, Any],
    ) -> NotificationOutbox:
        return self._repo.create(
            {
                "channel": Channel(channel),
                "recipient": recipient or "",
                "template_key": template_key,
                "data": normalize_for_json(data),
            }
        )

    def enqueue_for_customer(
        self,
        customer_id: UUID | str,
        template_key: str,
        data: Dict[str, Any],
        channel: str = Channel.EMAIL,
    ) -> Optional[NotificationOutbox]:
        """Enqueue only when the customer shares something with a client user.

        Returns ``None`` (and writes nothing) when the customer is gone, has
        no shared client users, or has every capability flag off.
        """
        customer = self._customer_repo.get_by_id(str(customer_id))
        if customer is None or not customer.accepts_notifications():
            logger.debug(
                "notification.skipped",
                customer_id=str(customer_id),
                template_key=template_key,
            )
            return None
        return self.enqueue(channel, customer.email or "", template_key, data)

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def list_pending(
        self, actor: AppUser | None, limit: Optional[int] = None
    ) -> List[NotificationOutbox]:
        require_admin(actor)
        return self._repo.list_pending(limit)

    def count_pending(self) -> int:
        return self._repo.count_pending()

    @transaction.atomic
    def mark_sent(self, actor: AppUser | None, id: str) -> NotificationOutbox:
        require_admin(actor)
        entry = self._get(id)
        entry.mark_as_sent()
        logger.info("notification.sent", notification_id=str(entry.id))
        return entry

    @transaction.atomic
    def mark_failed(self, actor: AppUser | None, id: str, error: str) -> NotificationOutbox:
        require_admin(actor)
        entry = self._get(id)
        entry.mark_as_failed(error)
        logger.warning(
            "notification.failed",
            notification_id=str(entry.id),
            retry_count=entry.retry_count,
            status=entry.status,
            error=error,
        )
        return entry

    @transaction.atomic
    def retry(self, actor: AppUser | None, id: str) -> NotificationOutbox:
        """Move a ``FAILED`` entry back to ``PENDING`` with a fresh retry budget."""
        require_admin(actor)
        entry = self._get(id)
        if not entry.is_failed:
            raise NotificationNotFailed(
                f"Notification {id} is {entry.status}; only FAILED notifications can be retried."
            )
        entry.reset_for_retry()
        logger.info("notification.retried", notification_id=str(entry.id))
        return entry

    def _get(self, id: str) -> NotificationOutbox:
        entry = self._repo.get_by_id(id)
        if entry is None:
            raise NotificationNotFound(f"Notification {id} not found.")
        return entry
