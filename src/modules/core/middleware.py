import re
import time
import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

REQUEST_ID_HEADER = "X-Request-ID"
# Printable token characters only; anything else is replaced with a fresh id.
VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:\-]{1,128}$")

logger = structlog.get_logger(__name__)


def resolve_correlation_id(raw: str | None) -> str:
    """Return the caller's request id when well-formed, else a new UUID4."""
    if raw and VALID_REQUEST_ID.match(raw):
        return raw
    return str(uuid.uuid4())


class CorrelationIdMiddleware:
    """Tags every request with a correlation id.

    The id comes from the ``X-Request-ID`` header when it is well-formed, or
    is generated.  It is bound to the structlog context so every log line of
    the request carries it, stored in ``correlation_id_var`` for code outside
    the logging pipeline, and echoed on the response.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = resolve_correlation_id(request.META.get("HTTP_X_REQUEST_ID"))
        correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        logger.info("request.started", method=request.method, path=request.path)
        started = time.monotonic()

        response = self.get_response(request)

        logger.info(
            "request.finished",
            method=request.method,
            path=request.path,
            status_code=response.status_code,
            duration_ms=round((time.monotonic() - started) * 1000, 2),
        )

        response[REQUEST_ID_HEADER] = cid
        return response
