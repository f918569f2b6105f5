"""Django ORM implementation of the Customer repository.

Satisfies ``ICustomerRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
instead of raising HTTP-level exceptions; the service layer decides
how to translate a missing entity into an API response.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import Count

from modules.customers.models import Customer, CustomerDocument
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    def _queryset(self) -> "models.QuerySet[Customer]":
        return Customer.objects.annotate(vehicle_count=Count("vehicles", distinct=True))

    def get_by_id(self, id: str) -> Optional[Customer]:
        """Retrieve a customer by primary key.

        Returns ``None`` for non-existent or invalid IDs (e.g. malformed UUID).
        """
        try:
            return (
                self._queryset()
                .prefetch_related("documents", "shared_with")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Customer]":
        """List customers with optional Django ORM look-ups.

        Examples of valid filters::

            {"id": customer_id}
            {"display_name__icontains": "rossi", "type": "AZIENDA"}
        """
        queryset = (
            self._queryset().prefetch_related("shared_with").order_by("display_name", "id")
        )
        if filters:
            queryset = queryset.filter(**filters)
        return queryset

    @transaction.atomic
    def save(self, entity: Customer) -> Customer:
        """Persist (create or update) a customer."""
        is_new = entity._state.adding
        entity.save()
        logger.info("customer.saved", customer_id=str(entity.id), is_new=is_new)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete a customer (documents cascade)."""
        deleted, _ = Customer.objects.filter(id=id).delete()
        if deleted:
            logger.info("customer.deleted", customer_id=str(id))
        return deleted > 0

    # ------------------------------------------------------------------
    # Referential checks
    # ------------------------------------------------------------------

    def has_vehicles(self, id: str) -> bool:
        return Customer.objects.filter(id=id, vehicles__isnull=False).exists()

    def has_part_requests(self, id: str) -> bool:
        return Customer.objects.filter(id=id, part_requests__isnull=False).exists()

    # ------------------------------------------------------------------
    # Sharing & documents
    # ------------------------------------------------------------------

    def set_shared_users(self, customer: Customer, users: List[Any]) -> None:
        customer.shared_with.set(users)

    def add_document(self, data: Dict[str, Any]) -> CustomerDocument:
        return CustomerDocument.objects.create(**data)

    def get_document(self, id: str) -> Optional[CustomerDocument]:
        try:
            return CustomerDocument.objects.select_related("customer").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def delete_document(self, id: str) -> bool:
        deleted, _ = CustomerDocument.objects.filter(id=id).delete()
        return deleted > 0
