"""Fuel type repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.fuel_types.models import FuelType


class IFuelTypeRepository(IRepository["FuelType"]):
    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[FuelType]:
        """Fuel types ordered by ``order``."""

    @abstractmethod
    def count(self) -> int:
        """Total number of fuel types (active or not)."""

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[FuelType]:
        """Case-insensitive look-up by name."""

    @abstractmethod
    def is_used_by_vehicles(self, name: str) -> bool:
        """``True`` when any vehicle records this fuel type name."""
