"""Supplier service layer.

Staff manage suppliers; removal deactivates a supplier that catalog
parts still reference and deletes it otherwise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction

from modules.accounts.policies import require_staff
from modules.audit.constants import EntityType, EventType
from modules.core.constants import RemovalOutcome
from modules.suppliers.exceptions import SupplierNotFound
from modules.suppliers.models import Supplier

if TYPE_CHECKING:
    from modules.accounts.models import AppUser
    from modules.audit.services import AuditService
    from modules.parts.repositories.interfaces import IPartRepository
    from modules.suppliers.dtos import CreateSupplierDTO, UpdateSupplierDTO
    from modules.suppliers.repositories.interfaces import ISupplierRepository

logger = structlog.get_logger(__name__)


class SupplierService:
    def __init__(
        self,
        repository: ISupplierRepository,
        part_repository: IPartRepository,
        audit_service: AuditService,
    ) -> None:
        self._repo = repository
        self._part_repo = part_repository
        self._audit = audit_service

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_suppliers(self, actor: AppUser | None, include_inactive: bool = False) -> List[Supplier]:
        require_staff(actor)
        return self._repo.list(None if include_inactive else {"is_active": True})

    def get_supplier(self, actor: AppUser | None, id: str) -> Supplier:
        require_staff(actor)
        return self._get(id)

    def parts_history(self, actor: AppUser | None, id: str) -> list:
        """Catalog parts sourced from the supplier, most recent first."""
        require_staff(actor)
        self._get(id)
        return self._part_repo.list({"supplier_id": id})

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_supplier(self, actor: AppUser | None, dto: CreateSupplierDTO) -> Supplier:
        actor = require_staff(actor)
        supplier = self._repo.save(Supplier(**dto.model_dump()))
        self._audit.record(
            EventType.SUPPLIER_CREATED,
            EntityType.SUPPLIER,
            supplier.id,
            {"company_name": supplier.company_name},
            actor,
        )
        return supplier

    @transaction.atomic
    def update_supplier(self, actor: AppUser | None, id: str, dto: UpdateSupplierDTO) -> Supplier:
        actor = require_staff(actor)
        supplier = self._get(id)
        changes = dto.changes()
        for field, value in changes.items():
            setattr(supplier, field, value)
        supplier = self._repo.save(supplier)
        self._audit.record(
            EventType.SUPPLIER_UPDATED, EntityType.SUPPLIER, supplier.id, changes, actor
        )
        return supplier

    @transaction.atomic
    def remove_supplier(self, actor: AppUser | None, id: str) -> RemovalOutcome:
        actor = require_staff(actor)
        supplier = self._get(id)

        if self._repo.is_referenced_by_parts(id):
            supplier.is_active = False
            self._repo.save(supplier)
            outcome = RemovalOutcome.DEACTIVATED
            event_type = EventType.SUPPLIER_DEACTIVATED
        else:
            self._repo.delete(id)
            outcome = RemovalOutcome.DELETED
            event_type = EventType.SUPPLIER_DELETED

        self._audit.record(
            event_type,
            EntityType.SUPPLIER,
            supplier.id,
            {"company_name": supplier.company_name},
            actor,
        )
        logger.info("supplier.removed", supplier_id=str(id), outcome=outcome.value)
        return outcome

    def _get(self, id: str) -> Supplier:
        supplier = self._repo.get_by_id(id)
        if supplier is None:
            raise SupplierNotFound(f"Supplier {id} not found.")
        return supplier
