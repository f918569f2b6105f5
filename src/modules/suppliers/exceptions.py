"""Supplier domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFound


class SupplierNotFound(NotFound):
    """The requested supplier does not exist."""
