"""Vehicle repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.vehicles.models import Vehicle


class IVehicleRepository(IRepository["Vehicle"]):
    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Vehicle]:
        """Vehicles (with customer) ordered by plate."""

    @abstractmethod
    def get_by_plate(self, plate: str) -> Optional[Vehicle]:
        """Retrieve a vehicle by normalised plate."""

    @abstractmethod
    def has_part_requests(self, id: str) -> bool:
        """``True`` when any part request references the vehicle."""
