"""Part domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import InvalidInput, InvalidState, NotFound


class PartNotFound(NotFound):
    """The requested part does not exist."""


class InsufficientStock(InvalidInput):
    """A stock adjustment would take the quantity below zero."""


class PartInUse(InvalidState):
    """Part-request line items still reference the part."""
