"""Django ORM implementation of the notification outbox repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.notifications.constants import NotificationStatus
from modules.notifications.models import NotificationOutbox
from modules.notifications.repositories.interfaces import INotificationRepository

logger = structlog.get_logger(__name__)


class NotificationDjangoRepository(INotificationRepository):
    def get_by_id(self, id: str) -> Optional[NotificationOutbox]:
        try:
            return NotificationOutbox.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[NotificationOutbox]:
        queryset = NotificationOutbox.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset.order_by("created_at", "id"))

    def list_pending(self, limit: Optional[int] = None) -> List[NotificationOutbox]:
        queryset = NotificationOutbox.objects.filter(status=NotificationStatus.PENDING).order_by(
            "created_at", "id"
        )
        if limit is not None:
            queryset = queryset[:limit]
        return list(queryset)

    def count_pending(self) -> int:
        return NotificationOutbox.objects.filter(status=NotificationStatus.PENDING).count()

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> NotificationOutbox:
        entry = NotificationOutbox.objects.create(**data)
        logger.info(
            "notification.enqueued",
            notification_id=str(entry.id),
            template_key=entry.template_key,
            channel=entry.channel,
        )
        return entry

    @transaction.atomic
    def save(self, entity: NotificationOutbox) -> NotificationOutbox:
        entity.save()
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = NotificationOutbox.objects.filter(id=id).delete()
        return deleted > 0
