"""Supplier model.

Suppliers referenced by catalog parts are never hard-deleted; removing one
deactivates it (``is_active=False``) so the parts history stays readable.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class Supplier(BaseModel):
    company_name = models.CharField(max_length=255, db_index=True)
    contact_name = models.CharField(max_length=255, blank=True, default="")
    phone = models.CharField(max_length=30, blank=True, default="")
    email = models.EmailField(max_length=254, blank=True, default="")
    address = models.TextField(blank=True, default="")
    notes = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "suppliers"
        ordering = ["company_name"]
        indexes = [
            models.Index(fields=["is_active"], name="suppliers_active_idx"),
        ]

    def __str__(self) -> str:
        return self.company_name
