"""Vehicle domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import InvalidInput, InvalidState, NotFound


class VehicleNotFound(NotFound):
    """The requested vehicle does not exist."""


class DuplicatePlate(InvalidInput):
    """Another vehicle is already registered with this plate."""


class VehicleHasPartRequests(InvalidState):
    """Part requests still reference the vehicle."""
