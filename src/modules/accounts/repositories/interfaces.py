"""User and session repository interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.accounts.models import AppUser, Session


class IUserRepository(IRepository["AppUser"]):
    """Repository contract for application users."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[AppUser]:
        """List users (with linked customer) ordered by email."""

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[AppUser]:
        """Retrieve a user by normalised email."""

    @abstractmethod
    def get_many(self, ids: List[str]) -> List[AppUser]:
        """Retrieve every user whose id is in *ids* (missing ids are skipped)."""

    @abstractmethod
    def clear_shared_customers(self, user: AppUser) -> int:
        """Remove *user* from every customer's shared set; return how many."""


class ISessionRepository(ABC):
    """Repository contract for session tokens."""

    @abstractmethod
    def create(self, user: AppUser, token: str, expires_at: datetime) -> Session:
        """Persist a new session."""

    @abstractmethod
    def get_by_token(self, token: str) -> Optional[Session]:
        """Retrieve a session (with its user) by token."""

    @abstractmethod
    def delete_by_token(self, token: str) -> bool:
        """Delete the session with *token*; ``False`` when none matched."""

    @abstractmethod
    def purge_expired(self, now: datetime) -> int:
        """Delete sessions expired at *now*; return how many were removed."""
