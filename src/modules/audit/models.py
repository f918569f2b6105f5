"""Audit event log.

One ``Event`` row is written for every mutating operation on customers,
vehicles, parts, part requests, suppliers and fuel types.  Rows are never
updated; ``entity_id`` is a plain string so events outlive the entity
they describe (e.g. ``PART_REQUEST_DELETED``).
"""

from __future__ import annotations

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from modules.audit.constants import EntityType
from modules.core.models import AppendOnlyModel


class Event(AppendOnlyModel):
    type = models.CharField(max_length=64)
    entity_type = models.CharField(max_length=20, choices=EntityType.choices)
    entity_id = models.CharField(max_length=64)
    payload = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)
    actor = models.ForeignKey(
        "accounts.AppUser",
        on_delete=models.PROTECT,
        related_name="audit_events",
    )

    class Meta:
        db_table = "events"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["entity_type", "entity_id"], name="events_entity_idx"),
            models.Index(fields=["type", "-created_at"], name="events_type_created_idx"),
        ]

    @property
    def timestamp(self):
        return self.created_at

    def __str__(self) -> str:
        return f"{self.type} {self.entity_type}:{self.entity_id}"
