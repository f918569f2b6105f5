"""Django ORM implementation of the audit event repository."""

from __future__ import annotations

from typing import Any, Dict, Optional

from django.db import models

from modules.audit.models import Event
from modules.audit.repositories.interfaces import IEventRepository


class EventDjangoRepository(IEventRepository):
    def create(self, data: Dict[str, Any]) -> Event:
        return Event.objects.create(**data)

    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[Event]":
        queryset = Event.objects.select_related("actor")
        if filters:
            queryset = queryset.filter(**filters)
        return queryset
