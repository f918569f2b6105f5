"""Account domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import InvalidInput, NotFound, Unauthorized


class InvalidCredentials(Unauthorized):
    """Unknown email or wrong password."""

    status_code = 401
    default_code = "authentication_failed"


class SignUpDisabled(Unauthorized):
    """Self-service registration is turned off for this deployment."""


class UserAlreadyExists(InvalidInput):
    """Another user already signed up with the same email."""


class UserNotFound(NotFound):
    """The requested user does not exist."""


class InvalidRoleAssignment(InvalidInput):
    """Role change or client link that breaks the CLIENTE/customer pairing."""
