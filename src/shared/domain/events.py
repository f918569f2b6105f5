"""Domain event primitives.

Aggregates collect events in memory while a command runs; the repository
pulls them on ``save`` and publishes them on the in-process bus, so
handlers run inside the same database transaction as the change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

import uuid6


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event (immutable)."""

    aggregate_id: UUID
    event_id: UUID = field(default_factory=uuid6.uuid7)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def event_name(self) -> str:
        return type(self).__name__


class DomainEventMixin:
    """Mixin for aggregate roots that collect domain events in memory."""

    _domain_events: list[DomainEvent]

    def add_domain_event(self, event: DomainEvent) -> None:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        self._domain_events.append(event)

    def pull_domain_events(self) -> list[DomainEvent]:
        """Return the pending events and forget them."""
        events = list(getattr(self, "_domain_events", []))
        self._domain_events = []
        return events

    @property
    def domain_events(self) -> list[DomainEvent]:
        return list(getattr(self, "_domain_events", []))
