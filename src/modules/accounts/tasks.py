"""Background tasks for the accounts module."""

import structlog
from celery import shared_task

from modules.accounts.repositories.django_repository import (
    SessionDjangoRepository,
    UserDjangoRepository,
)
from modules.accounts.services import AuthService

logger = structlog.get_logger(__name__)


@shared_task(name="accounts.purge_expired_sessions")
def purge_expired_sessions():
    """Remove sessions whose expiry instant has passed."""
    service = AuthService(
        user_repository=UserDjangoRepository(),
        session_repository=SessionDjangoRepository(),
    )
    deleted = service.purge_expired_sessions()
    logger.info("sessions.purged", deleted=deleted)
    return {"deleted": deleted}
