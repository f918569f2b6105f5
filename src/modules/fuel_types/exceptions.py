"""Fuel type domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import InvalidInput, NotFound


class FuelTypeNotFound(NotFound):
    """The requested fuel type does not exist."""


class FuelTypeAlreadyExists(InvalidInput):
    """Another fuel type already uses this name."""
