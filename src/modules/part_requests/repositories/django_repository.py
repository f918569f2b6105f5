"""Django ORM implementation of the part-request repository.

Reads eager-load customer/vehicle (JOIN) and items/timeline (batched
prefetch) so list endpoints stay at a fixed number of queries.

``save`` publishes the aggregate's pending domain events on the event bus
after the row is written, inside the caller's transaction.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Prefetch

from modules.part_requests.models import (
    PartRequest,
    PartRequestItem,
    PartRequestQuerySet,
    PartRequestStatusChange,
)
from modules.part_requests.repositories.interfaces import IPartRequestRepository
from shared.infrastructure.bus import event_bus as default_event_bus

if TYPE_CHECKING:
    from modules.accounts.models import AppUser
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


def _with_relations(queryset):
    return queryset.select_related("customer", "vehicle").prefetch_related(
        "items",
        Prefetch(
            "timeline",
            queryset=PartRequestStatusChange.objects.select_related("by_user"),
        ),
    )


class PartRequestDjangoRepository(IPartRequestRepository):
    def __init__(self, event_bus: IEventBus | None = None) -> None:
        self._event_bus = event_bus or default_event_bus

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[PartRequest]:
        """Returns ``None`` for non-existent or malformed ids."""
        try:
            return _with_relations(PartRequest.objects.filter(id=id)).first()
        except (ValueError, ValidationError):
            return None

    def list(
        self, filters: Optional[Dict[str, Any]] = None, search: Optional[str] = None
    ) -> PartRequestQuerySet:
        queryset = PartRequest.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        if search:
            queryset = queryset.search(search)
        return _with_relations(queryset).order_by("-created_at", "-id")

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: PartRequest) -> PartRequest:
        entity.save()

        events = entity.pull_domain_events()
        for event in events:
            self._event_bus.publish(event)

        logger.info(
            "part_request.saved",
            part_request_id=str(entity.id),
            status=entity.status,
            event_count=len(events),
        )
        return entity

    @transaction.atomic
    def replace_items(
        self, part_request: PartRequest, items: List[Dict[str, Any]]
    ) -> List[PartRequestItem]:
        PartRequestItem.objects.filter(part_request=part_request).delete()
        created = [
            PartRequestItem.objects.create(part_request=part_request, position=position, **item)
            for position, item in enumerate(items, start=1)
        ]
        logger.info(
            "part_request.items_written",
            part_request_id=str(part_request.id),
            item_count=len(created),
        )
        return created

    @transaction.atomic
    def append_status_change(
        self,
        part_request: PartRequest,
        status: str,
        at: datetime,
        by_user: Optional[AppUser],
    ) -> PartRequestStatusChange:
        sequence = PartRequestStatusChange.objects.filter(part_request=part_request).count() + 1
        return PartRequestStatusChange.objects.create(
            part_request=part_request,
            sequence=sequence,
            status=status,
            at=at,
            by_user=by_user,
        )

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard delete; items and timeline go with it (CASCADE)."""
        deleted, _ = PartRequest.objects.filter(id=id).delete()
        logger.info("part_request.deleted", part_request_id=str(id), deleted=deleted > 0)
        return deleted > 0
