"""Customer and customer-document models.

A customer is either a private person (``PRIVATO``) or a company
(``AZIENDA``).  ``display_name`` is the searchable label used across the
UI and in part-request read models.

Sharing: a customer can expose its own data to client users
(``shared_with``) through three capability flags.  Clients always see only
the customer they are linked to (``AppUser.customer``).
"""

from __future__ import annotations

from django.db import models

from modules.accounts.constants import Role
from modules.core.models import BaseModel
from modules.customers.constants import CustomerType


class Customer(BaseModel):
    """Customer aggregate root."""

    type = models.CharField(max_length=10, choices=CustomerType.choices, default=CustomerType.PRIVATO)
    display_name = models.CharField(max_length=255, db_index=True)

    # Private person
    first_name = models.CharField(max_length=120, blank=True, default="")
    last_name = models.CharField(max_length=120, blank=True, default="")

    # Company
    company_name = models.CharField(max_length=255, blank=True, default="")
    vat_number = models.CharField(max_length=20, blank=True, default="")
    contact_person = models.CharField(max_length=255, blank=True, default="")

    # Contacts
    phone = models.CharField(max_length=30, blank=True, default="")
    email = models.EmailField(max_length=254, blank=True, default="")
    address = models.TextField(blank=True, default="")

    notes = models.TextField(blank=True, default="")

    # Sharing with client users
    shared_with = models.ManyToManyField(
        "accounts.AppUser",
        blank=True,
        related_name="shared_customers",
    )
    can_view_vehicles = models.BooleanField(default=False)
    can_view_parts = models.BooleanField(default=False)
    can_view_documents = models.BooleanField(default=False)

    class Meta:
        db_table = "customers"
        ordering = ["display_name"]
        indexes = [
            models.Index(fields=["type"], name="customers_type_idx"),
        ]

    # ------------------------------------------------------------------
    # Sharing
    # ------------------------------------------------------------------

    @property
    def has_any_capability(self) -> bool:
        return self.can_view_vehicles or self.can_view_parts or self.can_view_documents

    def accepts_notifications(self) -> bool:
        """Customer-facing notifications need a shared client user and a capability."""
        return self.has_any_capability and self.shared_with.filter(role=Role.CLIENTE).exists()

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.display_name} ({self.type})"


class CustomerDocument(BaseModel):
    """A file attached to a customer (ID card, contracts, ...)."""

    customer = models.ForeignKey(
        Customer,
        on_delete=models.CASCADE,
        related_name="documents",
    )
    file_id = models.CharField(max_length=255)
    file_name = models.CharField(max_length=255)
    file_type = models.CharField(max_length=100, blank=True, default="")
    uploaded_by = models.ForeignKey(
        "accounts.AppUser",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        db_table = "customer_documents"
        ordering = ["-created_at"]

    @property
    def uploaded_at(self):
        return self.created_at

    def __str__(self) -> str:
        return self.file_name
