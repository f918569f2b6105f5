"""Vehicle model.

- ``plate`` is stored normalised (upper-case, no whitespace) and is unique.
- ``fuel_type`` stores the fuel type *name* (see ``modules.fuel_types``).
- ``tires`` holds summer/winter sets, each with front/rear specs, plus notes.
- Customer FK uses PROTECT: a customer with vehicles cannot be removed.
"""

from __future__ import annotations

import re

from django.db import models

from modules.core.models import BaseModel


class Vehicle(BaseModel):
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="vehicles",
    )
    plate = models.CharField(max_length=20, unique=True)
    make = models.CharField(max_length=80, blank=True, default="")
    model = models.CharField(max_length=80, blank=True, default="")
    year = models.PositiveSmallIntegerField(null=True, blank=True)
    vin = models.CharField(max_length=17, blank=True, default="")
    fuel_type = models.CharField(max_length=60, blank=True, default="")
    km = models.PositiveIntegerField(null=True, blank=True)
    tires = models.JSONField(default=dict, blank=True)

    registration_doc_file_id = models.CharField(max_length=255, blank=True, default="")
    registration_doc_file_name = models.CharField(max_length=255, blank=True, default="")
    registration_doc_file_type = models.CharField(max_length=100, blank=True, default="")
    registration_doc_uploaded_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "vehicles"
        ordering = ["plate"]
        indexes = [
            models.Index(fields=["customer"], name="vehicles_customer_idx"),
        ]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def normalize_plate(value: str) -> str:
        return re.sub(r"\s+", "", value or "").upper()

    @property
    def make_model(self) -> str:
        return f"{self.make} {self.model}".strip()

    @property
    def has_registration_doc(self) -> bool:
        return bool(self.registration_doc_file_id)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        self.plate = self.normalize_plate(self.plate)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.plate} {self.make_model}".strip()
