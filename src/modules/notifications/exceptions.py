"""Notification outbox exceptions."""

from __future__ import annotations

from modules.core.exceptions import InvalidState, NotFound


class NotificationNotFound(NotFound):
    """The requested outbox entry does not exist."""


class NotificationNotFailed(InvalidState):
    """Only ``FAILED`` entries can be retried."""
