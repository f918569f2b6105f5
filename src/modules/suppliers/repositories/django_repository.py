"""Django ORM implementation of the Supplier repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.suppliers.models import Supplier
from modules.suppliers.repositories.interfaces import ISupplierRepository

logger = structlog.get_logger(__name__)


class SupplierDjangoRepository(ISupplierRepository):
    def get_by_id(self, id: str) -> Optional[Supplier]:
        try:
            return Supplier.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Supplier]:
        queryset = Supplier.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Supplier) -> Supplier:
        is_new = entity._state.adding
        entity.save()
        logger.info("supplier.saved", supplier_id=str(entity.id), is_new=is_new)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Supplier.objects.filter(id=id).delete()
        return deleted > 0

    def is_referenced_by_parts(self, id: str) -> bool:
        return Supplier.objects.filter(id=id, parts__isnull=False).exists()
