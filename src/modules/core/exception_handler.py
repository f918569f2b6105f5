"""Standardized error responses for the whole API.

Every error is rendered as::

    {"type": "validation_error" | "client_error" | "server_error",
     "errors": [{"code": "...", "detail": "...", "attr": "..." | null}]}
"""

from __future__ import annotations

from typing import Any

import structlog
from django.core.exceptions import PermissionDenied
from django.http import Http404
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from modules.core.exceptions import DomainError

logger = structlog.get_logger(__name__)


def standardized_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """DRF ``EXCEPTION_HANDLER`` producing the standardized error payload."""
    if isinstance(exc, DomainError):
        return _domain_error_response(exc)

    if isinstance(exc, PydanticValidationError):
        errors = [
            {
                "code": error["type"],
                "detail": error["msg"],
                "attr": ".".join(str(part) for part in error["loc"]) or None,
            }
            for error in exc.errors()
        ]
        return Response(
            {"type": "validation_error", "errors": errors},
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = exception_handler(exc, context)
    if response is None:
        logger.error(
            "api.unhandled_exception",
            exc_type=type(exc).__name__,
            view=type(context.get("view")).__name__,
        )
        return None

    if isinstance(exc, (Http404, PermissionDenied)):
        exc = exceptions.NotFound() if isinstance(exc, Http404) else exceptions.PermissionDenied()

    if isinstance(exc, exceptions.ValidationError):
        error_type = "validation_error"
        errors = list(_flatten_validation_errors(exc.detail))
    else:
        error_type = "server_error" if response.status_code >= 500 else "client_error"
        errors = [
            {
                "code": getattr(exc, "default_code", "error"),
                "detail": str(getattr(exc, "detail", exc)),
                "attr": None,
            }
        ]

    response.data = {"type": error_type, "errors": errors}
    return response


def _domain_error_response(exc: DomainError) -> Response:
    logger.info(
        "api.domain_error",
        error=type(exc).__name__,
        status_code=exc.status_code,
    )
    return Response(
        {
            "type": "client_error",
            "errors": [
                {
                    "code": exc.default_code,
                    "detail": str(exc) or exc.default_code,
                    "attr": exc.attr,
                }
            ],
        },
        status=exc.status_code,
    )


def _flatten_validation_errors(detail: Any, attr: str | None = None):
    if isinstance(detail, dict):
        for key, value in detail.items():
            nested = key if attr is None else f"{attr}.{key}"
            if key == "non_field_errors" and attr is None:
                nested = None
            yield from _flatten_validation_errors(value, nested)
    elif isinstance(detail, list):
        for index, item in enumerate(detail):
            if isinstance(item, (dict, list)):
                nested = str(index) if attr is None else f"{attr}.{index}"
                yield from _flatten_validation_errors(item, nested)
            else:
                yield from _flatten_validation_errors(item, attr)
    else:
        yield {
            "code": getattr(detail, "code", "invalid"),
            "detail": str(detail),
            "attr": attr,
        }
