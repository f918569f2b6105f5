"""PartRequest, PartRequestItem and PartRequestStatusChange models.

- A request is created in ``DA_ORDINARE`` with one timeline entry.
- Every status change appends exactly one ``PartRequestStatusChange``;
  timeline rows are never edited (``AppendOnlyModel``).
- Line items are write-once: price/cost snapshots are captured when the
  item is written and never recomputed from the catalog.  Updating the
  items of a request replaces the whole list.
- ``part_id`` is a loose reference so a request keeps its history even if
  the catalog changes; reads fall back to a sentinel name.
"""

from __future__ import annotations

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import AppendOnlyModel, BaseModel
from modules.part_requests.constants import (
    TERMINAL_STATES,
    PartRequestStatus,
    suggested_next_statuses,
)
from shared.domain.events import DomainEventMixin


class PartRequestQuerySet(models.QuerySet):
    def search(self, term: str) -> PartRequestQuerySet:
        """Case-insensitive match on customer display name or vehicle plate."""
        return self.filter(
            models.Q(customer__display_name__icontains=term)
            | models.Q(vehicle__plate__icontains=term)
        )


class PartRequest(DomainEventMixin, BaseModel):
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.PROTECT,
        related_name="part_requests",
    )
    vehicle = models.ForeignKey(
        "vehicles.Vehicle",
        on_delete=models.PROTECT,
        related_name="part_requests",
    )
    status = models.CharField(
        max_length=20,
        choices=PartRequestStatus.choices,
        default=PartRequestStatus.DA_ORDINARE,
    )
    supplier = models.CharField(max_length=255, blank=True, default="")
    notes = models.TextField(blank=True, default="")

    objects = PartRequestQuerySet.as_manager()

    class Meta:
        db_table = "part_requests"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="part_requests_status_idx"),
            models.Index(fields=["customer", "-created_at"], name="part_requests_customer_idx"),
            models.Index(fields=["vehicle"], name="part_requests_vehicle_idx"),
        ]

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    @property
    def suggested_next_statuses(self) -> list[str]:
        return suggested_next_statuses(self.status)

    def __str__(self) -> str:
        return f"PartRequest {self.id} ({self.status})"


class PartRequestItem(AppendOnlyModel):
    part_request = models.ForeignKey(
        PartRequest,
        on_delete=models.CASCADE,
        related_name="items",
    )
    position = models.PositiveSmallIntegerField()
    part_id = models.UUIDField(null=True, blank=True, db_index=True)
    free_text_name = models.CharField(max_length=255, blank=True, default="")
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price_snapshot = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )
    unit_cost_snapshot = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True
    )

    class Meta:
        db_table = "part_request_items"
        ordering = ["position"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name="part_request_items_quantity_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(part_id__isnull=False) | ~models.Q(free_text_name=""),
                name="part_request_items_part_or_name",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.free_text_name or self.part_id} x{self.quantity}"


class PartRequestStatusChange(AppendOnlyModel):
    """One timeline entry. ``by_user`` is ``None`` once the user is removed."""

    part_request = models.ForeignKey(
        PartRequest,
        on_delete=models.CASCADE,
        related_name="timeline",
    )
    sequence = models.PositiveIntegerField()
    status = models.CharField(max_length=20, choices=PartRequestStatus.choices)
    at = models.DateTimeField()
    by_user = models.ForeignKey(
        "accounts.AppUser",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "part_request_timeline"
        ordering = ["sequence", "created_at"]
        indexes = [
            models.Index(fields=["part_request", "sequence"], name="pr_timeline_seq_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.part_request_id} #{self.sequence}: {self.status}"
