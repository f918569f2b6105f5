"""Notification outbox repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.notifications.models import NotificationOutbox


class INotificationRepository(IRepository["NotificationOutbox"]):
    @abstractmethod
    def create(self, data: Dict[str, Any]) -> NotificationOutbox:
        """Insert a new outbox entry."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[NotificationOutbox]:
        """Entries oldest first."""

    @abstractmethod
    def list_pending(self, limit: Optional[int] = None) -> List[NotificationOutbox]:
        """``PENDING`` entries oldest first, at most *limit*."""

    @abstractmethod
    def count_pending(self) -> int:
        """Size of the delivery backlog."""
