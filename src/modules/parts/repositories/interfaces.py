"""Part repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.parts.models import Part


class IPartRepository(IRepository["Part"]):
    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None, search: Optional[str] = None
    ) -> List[Part]:
        """Parts (with supplier) filtered by ORM look-ups and a name/SKU search."""

    @abstractmethod
    def get_many(self, ids: Iterable[Any]) -> Dict[str, Part]:
        """Map ``str(id) -> Part`` for the ids that exist."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Part]:
        """Retrieve a part with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def is_used_in_part_requests(self, id: str) -> bool:
        """``True`` when any part-request line item references the part."""
