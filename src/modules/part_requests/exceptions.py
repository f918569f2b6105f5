"""Part-request domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import InvalidInput, NotFound


class PartRequestNotFound(NotFound):
    """The requested part request does not exist."""


class InvalidPartRequestStatus(InvalidInput):
    """The status is not one of the five known values."""


class VehicleCustomerMismatch(InvalidInput):
    """The vehicle does not belong to the customer of the request."""
