"""Django ORM implementations of the user and session repositories.

Missing rows are reported as ``None`` (Null Object style); the Service
Layer decides how to translate them into domain errors.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.accounts.models import AppUser, Session
from modules.accounts.repositories.interfaces import ISessionRepository, IUserRepository

logger = structlog.get_logger(__name__)


class UserDjangoRepository(IUserRepository):
    def get_by_id(self, id: str) -> Optional[AppUser]:
        try:
            return AppUser.objects.select_related("customer").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_email(self, email: str) -> Optional[AppUser]:
        return AppUser.objects.filter(email=email.strip().lower()).first()

    def get_many(self, ids: List[str]) -> List[AppUser]:
        try:
            return list(AppUser.objects.filter(id__in=ids))
        except (ValueError, ValidationError):
            return []

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[AppUser]:
        queryset = AppUser.objects.select_related("customer")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: AppUser) -> AppUser:
        is_new = entity._state.adding
        entity.save()
        logger.info("user.saved", user_id=str(entity.id), is_new=is_new)
        return entity

    @transaction.atomic
    def clear_shared_customers(self, user: AppUser) -> int:
        count = user.shared_customers.count()
        user.shared_customers.clear()
        if count:
            logger.info("user.sharing_cleared", user_id=str(user.id), customers=count)
        return count

    @transaction.atomic
    def delete(self, id: str) -> bool:
        user = self.get_by_id(id)
        if not user:
            return False
        user.delete()
        logger.info("user.deleted", user_id=str(id))
        return True


class SessionDjangoRepository(ISessionRepository):
    def create(self, user: AppUser, token: str, expires_at: datetime) -> Session:
        return Session.objects.create(user=user, token=token, expires_at=expires_at)

    def get_by_token(self, token: str) -> Optional[Session]:
        return Session.objects.select_related("user").filter(token=token).first()

    def delete_by_token(self, token: str) -> bool:
        deleted, _ = Session.objects.filter(token=token).delete()
        return deleted > 0

    def purge_expired(self, now: datetime) -> int:
        deleted, _ = Session.objects.filter(expires_at__lte=now).delete()
        return deleted
