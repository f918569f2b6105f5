"""Supplier repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.suppliers.models import Supplier


class ISupplierRepository(IRepository["Supplier"]):
    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Supplier]:
        """Suppliers ordered by company name."""

    @abstractmethod
    def is_referenced_by_parts(self, id: str) -> bool:
        """``True`` when any catalog part points at the supplier."""
