"""Audit service: records and reads the event log."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import models

from modules.accounts.policies import require_admin
from modules.core.serialization import normalize_for_json

if TYPE_CHECKING:
    from modules.accounts.models import AppUser
    from modules.audit.models import Event
    from modules.audit.repositories.interfaces import IEventRepository

logger = structlog.get_logger(__name__)


class AuditService:
    def __init__(self, repository: IEventRepository) -> None:
        self._repo = repository

    def record(
        self,
        type: str,
        entity_type: str,
        entity_id: Any,
        payload: Optional[Dict[str, Any]],
        actor: AppUser,
    ) -> Event:
        """Append one event.  Called inside the caller's transaction."""
        event = self._repo.create(
            {
                "type": type,
                "entity_type": entity_type,
                "entity_id": str(entity_id),
                "payload": normalize_for_json(payload or {}),
                "actor": actor,
            }
        )
        logger.info(
            "audit.recorded",
            event_type=type,
            entity_type=entity_type,
            entity_id=str(entity_id),
        )
        return event

    # ------------------------------------------------------------------
    # Queries (ADMIN)
    # ------------------------------------------------------------------

    def list_events(
        self, actor: AppUser | None, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Event]":
        require_admin(actor)
        return self._repo.list(filters)

    def list_for_entity(
        self, actor: AppUser | None, entity_type: str, entity_id: Any
    ) -> "models.QuerySet[Event]":
        return self.list_events(
            actor, {"entity_type": entity_type, "entity_id": str(entity_id)}
        )

    def list_by_type(self, actor: AppUser | None, type: str) -> "models.QuerySet[Event]":
        return self.list_events(actor, {"type": type})
