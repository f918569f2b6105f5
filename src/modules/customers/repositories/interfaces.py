"""Customer repository interface.

Extends ``IRepository[Customer]`` with the look-ups needed for sharing,
documents and the referential checks performed before removal.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.accounts.models import AppUser
    from modules.customers.models import Customer, CustomerDocument


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Customer]":
        """List customers (annotated with ``vehicle_count``)."""

    @abstractmethod
    def has_vehicles(self, id: str) -> bool:
        """``True`` when at least one vehicle belongs to the customer."""

    @abstractmethod
    def has_part_requests(self, id: str) -> bool:
        """``True`` when at least one part request references the customer."""

    @abstractmethod
    def set_shared_users(self, customer: Customer, users: List[AppUser]) -> None:
        """Replace the set of client users the customer is shared with."""

    @abstractmethod
    def add_document(self, data: Dict[str, Any]) -> CustomerDocument:
        """Attach a document record to a customer."""

    @abstractmethod
    def get_document(self, id: str) -> Optional[CustomerDocument]:
        """Retrieve a document (with its customer) by primary key."""

    @abstractmethod
    def delete_document(self, id: str) -> bool:
        """Remove a document record."""
