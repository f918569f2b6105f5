"""Catalog part (inventory item).

- ``stock_qty`` never goes below zero (service-level check on adjustment).
- ``is_low_stock`` is derived from ``min_stock_qty``.
- Prices here are the *current* catalog prices; part requests keep their
  own snapshots, so later edits never rewrite history.
"""

from __future__ import annotations

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel

_money = dict(max_digits=10, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)])


class Part(BaseModel):
    name = models.CharField(max_length=255, db_index=True)
    sku = models.CharField(max_length=64, blank=True, default="", db_index=True)
    oem_code = models.CharField(max_length=64, blank=True, default="")
    supplier = models.ForeignKey(
        "suppliers.Supplier",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="parts",
    )
    unit_cost = models.DecimalField(**_money)
    unit_price = models.DecimalField(**_money)
    part_price = models.DecimalField(**_money)
    labor_price = models.DecimalField(**_money)
    stock_qty = models.PositiveIntegerField(default=0)
    min_stock_qty = models.PositiveIntegerField(null=True, blank=True)
    location = models.CharField(max_length=120, blank=True, default="")
    notes = models.TextField(blank=True, default="")
    vehicle = models.ForeignKey(
        "vehicles.Vehicle",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="parts",
    )

    class Meta:
        db_table = "parts"
        ordering = ["name"]

    @property
    def is_low_stock(self) -> bool:
        return self.min_stock_qty is not None and self.stock_qty <= self.min_stock_qty

    @property
    def supplier_name(self) -> str | None:
        return self.supplier.company_name if self.supplier_id else None

    def __str__(self) -> str:
        return f"{self.name} ({self.sku})" if self.sku else self.name
