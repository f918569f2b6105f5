"""Generic repository interface.

``IRepository[T]`` is the base contract every module's repository
interface extends.  Services depend on these abstractions; only the
``django_repository`` modules touch the ORM.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    ``T`` is the aggregate the repository manages (``Customer``,
    ``PartRequest``, ...).
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Return the entity with primary key *id*, or ``None``."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Iterable[T]:
        """List entities matching the ORM-style *filters*."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Insert or update *entity*."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Hard-delete by id; ``True`` when a row was removed."""
