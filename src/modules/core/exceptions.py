"""Domain error taxonomy shared by every module.

Services raise subclasses of these four kinds; the API layer renders them
through ``modules.core.exception_handler``.  Each class carries the HTTP
status and the machine-readable code used in the error payload.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for business-rule violations raised by services."""

    status_code = 400
    default_code = "domain_error"

    def __init__(self, message: str = "", *, attr: str | None = None) -> None:
        super().__init__(message)
        self.attr = attr


class Unauthorized(DomainError):
    """The actor is missing or lacks the role/ownership the operation needs."""

    status_code = 403
    default_code = "permission_denied"


class NotFound(DomainError):
    """A referenced entity does not exist."""

    status_code = 404
    default_code = "not_found"


class InvalidInput(DomainError):
    """Malformed or semantically invalid arguments."""

    status_code = 400
    default_code = "invalid"


class InvalidState(DomainError):
    """The operation is not allowed in the entity's current state."""

    status_code = 409
    default_code = "invalid_state"
