"""Session-token identity resolution.

``resolve_identity`` is the single entry point every request goes through
(via ``SessionTokenAuthentication``).  It never raises: an absent, unknown
or expired token yields ``None`` and the caller treats that as "no actor".
Expired sessions are left in place; ``accounts.purge_expired_sessions``
removes them.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import structlog
from django.utils import timezone

from modules.accounts.repositories.django_repository import SessionDjangoRepository

if TYPE_CHECKING:
    from modules.accounts.models import AppUser
    from modules.accounts.repositories.interfaces import ISessionRepository

logger = structlog.get_logger(__name__)


def resolve_identity(
    token: str | None,
    now: datetime | None = None,
    repository: ISessionRepository | None = None,
) -> AppUser | None:
    """Return the user owning *token*, or ``None`` when it does not resolve."""
    if not token:
        return None

    session = (repository or SessionDjangoRepository()).get_by_token(token)
    if session is None:
        logger.info("session.unknown_token")
        return None

    if session.is_expired(now or timezone.now()):
        logger.info("session.expired", user_id=str(session.user_id))
        return None

    return session.user
