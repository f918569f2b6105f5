"""Parts catalog service layer (Use Cases).

Rules enforced here:
- Catalog management is shop-staff only.
- A client may list the parts fitted to one of its own vehicles when the
  customer shares parts (``can_view_parts``).
- Stock only moves through ``adjust_stock`` and never drops below zero.
- A part referenced by a part-request line item cannot be removed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import structlog
from django.db import transaction

from modules.accounts.constants import CustomerCapability
from modules.accounts.policies import ensure_customer_access, require_actor, require_staff
from modules.audit.constants import EntityType, EventType
from modules.parts.exceptions import InsufficientStock, PartInUse, PartNotFound
from modules.parts.models import Part
from modules.suppliers.exceptions import SupplierNotFound
from modules.vehicles.exceptions import VehicleNotFound

if TYPE_CHECKING:
    from modules.accounts.models import AppUser
    from modules.audit.services import AuditService
    from modules.parts.dtos import AdjustStockDTO, CreatePartDTO, UpdatePartDTO
    from modules.parts.repositories.interfaces import IPartRepository
    from modules.suppliers.repositories.interfaces import ISupplierRepository
    from modules.vehicles.repositories.interfaces import IVehicleRepository

logger = structlog.get_logger(__name__)


class PartService:
    def __init__(
        self,
        repository: IPartRepository,
        supplier_repository: ISupplierRepository,
        vehicle_repository: IVehicleRepository,
        audit_service: AuditService,
    ) -> None:
        self._repo = repository
        self._supplier_repo = supplier_repository
        self._vehicle_repo = vehicle_repository
        self._audit = audit_service

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_parts(
        self, actor: AppUser | None, search: Optional[str] = None, low_stock: bool = False
    ) -> List[Part]:
        require_staff(actor)
        parts = self._repo.list(search=search)
        if low_stock:
            parts = [part for part in parts if part.is_low_stock]
        return parts

    def list_vehicle_parts(self, actor: AppUser | None, vehicle_id: str) -> List[Part]:
        actor = require_actor(actor)
        vehicle = self._vehicle_repo.get_by_id(vehicle_id)
        if vehicle is None:
            raise VehicleNotFound(f"Vehicle {vehicle_id} not found.")
        ensure_customer_access(actor, vehicle.customer, CustomerCapability.PARTS)
        return self._repo.list({"vehicle_id": vehicle.id})

    def get_part(self, actor: AppUser | None, id: str) -> Part:
        require_staff(actor)
        return self._get(id)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_part(self, actor: AppUser | None, dto: CreatePartDTO) -> Part:
        actor = require_staff(actor)
        self._check_references(dto.supplier_id, dto.vehicle_id)

        part = self._repo.save(Part(**dto.model_dump()))
        self._audit.record(
            EventType.PART_CREATED,
            EntityType.PART,
            part.id,
            {"name": part.name, "sku": part.sku, "stock_qty": part.stock_qty},
            actor,
        )
        logger.info("part.created", part_id=str(part.id))
        return part

    @transaction.atomic
    def update_part(self, actor: AppUser | None, id: str, dto: UpdatePartDTO) -> Part:
        actor = require_staff(actor)
        part = self._get(id)
        changes = dto.changes()
        self._check_references(changes.get("supplier_id"), changes.get("vehicle_id"))

        for field, value in changes.items():
            setattr(part, field, value)
        part = self._repo.save(part)
        self._audit.record(EventType.PART_UPDATED, EntityType.PART, part.id, changes, actor)
        return part

    @transaction.atomic
    def adjust_stock(self, actor: AppUser | None, id: str, dto: AdjustStockDTO) -> Part:
        """Apply a signed stock movement. Raises ``InsufficientStock`` below zero."""
        actor = require_staff(actor)
        part = self._repo.get_for_update(id)
        if part is None:
            raise PartNotFound(f"Part {id} not found.")

        old_qty = part.stock_qty
        new_qty = old_qty + dto.delta
        if new_qty < 0:
            raise InsufficientStock(
                f"Insufficient stock for {part.name}: available {old_qty}, requested {-dto.delta}.",
                attr="delta",
            )

        part.stock_qty = new_qty
        part = self._repo.save(part)
        self._audit.record(
            EventType.PART_STOCK_ADJUSTED,
            EntityType.PART,
            part.id,
            {"old_qty": old_qty, "new_qty": new_qty, "delta": dto.delta, "reason": dto.reason},
            actor,
        )
        logger.info(
            "part.stock_adjusted",
            part_id=str(part.id),
            old_qty=old_qty,
            new_qty=new_qty,
            low_stock=part.is_low_stock,
        )
        return part

    @transaction.atomic
    def delete_part(self, actor: AppUser | None, id: str) -> None:
        """Raises ``PartNotFound`` or ``PartInUse``."""
        actor = require_staff(actor)
        part = self._get(id)
        if self._repo.is_used_in_part_requests(id):
            raise PartInUse("Part is referenced by part requests and cannot be removed.")

        self._repo.delete(id)
        self._audit.record(
            EventType.PART_DELETED, EntityType.PART, part.id, {"name": part.name}, actor
        )
        logger.info("part.deleted", part_id=str(id))

    def _get(self, id: str) -> Part:
        part = self._repo.get_by_id(id)
        if part is None:
            raise PartNotFound(f"Part {id} not found.")
        return part

    def _check_references(self, supplier_id, vehicle_id) -> None:
        if supplier_id is not None and self._supplier_repo.get_by_id(str(supplier_id)) is None:
            raise SupplierNotFound(f"Supplier {supplier_id} not found.")
        if vehicle_id is not None and self._vehicle_repo.get_by_id(str(vehicle_id)) is None:
            raise VehicleNotFound(f"Vehicle {vehicle_id} not found.")
