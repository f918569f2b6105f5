"""Customer domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import InvalidInput, InvalidState, NotFound


class CustomerNotFound(NotFound):
    """The requested customer does not exist."""


class CustomerDocumentNotFound(NotFound):
    """The requested document does not exist (or belongs to another customer)."""


class CustomerHasDependents(InvalidState):
    """The customer still owns vehicles or part requests and cannot be removed."""


class InvalidSharing(InvalidInput):
    """Sharing can only target existing users with the CLIENTE role."""
