"""Part-request repository interface."""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.accounts.models import AppUser
    from modules.part_requests.models import (
        PartRequest,
        PartRequestItem,
        PartRequestQuerySet,
        PartRequestStatusChange,
    )


class IPartRequestRepository(IRepository["PartRequest"]):
    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None, search: Optional[str] = None
    ) -> PartRequestQuerySet:
        """Requests (newest first) with customer, vehicle, items and timeline loaded.

        *search* is a case-insensitive substring matched against the
        customer display name and the vehicle plate.
        """

    @abstractmethod
    def replace_items(
        self, part_request: PartRequest, items: List[Dict[str, Any]]
    ) -> List[PartRequestItem]:
        """Drop the current line items and write *items* in order."""

    @abstractmethod
    def append_status_change(
        self,
        part_request: PartRequest,
        status: str,
        at: datetime,
        by_user: Optional[AppUser],
    ) -> PartRequestStatusChange:
        """Append one timeline entry after the existing ones."""
