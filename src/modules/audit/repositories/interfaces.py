"""Audit event repository interface (insert and query only)."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from django.db import models

if TYPE_CHECKING:
    from modules.audit.models import Event


class IEventRepository(ABC):
    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Event:
        """Insert one event row."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> "models.QuerySet[Event]":
        """Events newest first, optionally filtered."""
