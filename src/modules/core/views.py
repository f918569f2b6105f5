"""Operational endpoints (public, outside the DRF auth stack)."""

import time
from typing import Any, Dict

import structlog
from django.core.cache import cache
from django.db import connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.notifications.repositories.django_repository import NotificationDjangoRepository
from modules.notifications.services import NotificationService

logger = structlog.get_logger(__name__)


def health_check(request: HttpRequest) -> JsonResponse:
    """Database and cache probes plus the notification backlog.

    Returns 503 when a probe fails; a growing backlog is reported but does
    not make the service unhealthy.
    """
    services: Dict[str, Dict[str, Any]] = {}
    overall_healthy = True

    try:
        start = time.monotonic()
        conn = connections["default"]
        conn.ensure_connection()
        with conn.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        services["database"] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except Exception:
        services["database"] = {"status": "down"}
        overall_healthy = False
        logger.error("health_check.db_failure", exc_info=True)

    try:
        start = time.monotonic()
        cache.set("_health_check", "ok", 10)
        if cache.get("_health_check") != "ok":
            raise ConnectionError("Cache read failed")
        services["cache"] = {
            "status": "up",
            "response_time_ms": round((time.monotonic() - start) * 1000, 2),
        }
    except Exception:
        services["cache"] = {"status": "down"}
        overall_healthy = False
        logger.error("health_check.cache_failure", exc_info=True)

    if services["database"]["status"] == "up":
        notifications = NotificationService(
            repository=NotificationDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
        )
        services["notification_outbox"] = {"pending": notifications.count_pending()}

    status = "healthy" if overall_healthy else "unhealthy"
    logger.info("health_check.completed", status=status)

    return JsonResponse(
        {
            "status": status,
            "timestamp": timezone.now().isoformat(),
            "services": services,
        },
        status=200 if overall_healthy else 503,
    )
