"""Vehicle service layer (Use Cases).

Rules enforced here:
- Plates are unique after normalisation.
- Clients read vehicles of their own customer only, and only when the
  customer shares vehicles (``can_view_vehicles``); the registration
  document additionally needs ``can_view_documents``.
- A vehicle referenced by part requests cannot be removed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

import structlog
from django.db import transaction
from django.utils import timezone

from modules.accounts.constants import CustomerCapability
from modules.accounts.policies import ensure_customer_access, require_actor, require_staff
from modules.audit.constants import EntityType, EventType
from modules.customers.exceptions import CustomerNotFound
from modules.vehicles.exceptions import DuplicatePlate, VehicleHasPartRequests, VehicleNotFound
from modules.vehicles.models import Vehicle

if TYPE_CHECKING:
    from django.core.files.uploadedfile import UploadedFile

    from modules.accounts.models import AppUser
    from modules.audit.services import AuditService
    from modules.core.storage import BlobStorage
    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.vehicles.dtos import CreateVehicleDTO, UpdateVehicleDTO
    from modules.vehicles.repositories.interfaces import IVehicleRepository

logger = structlog.get_logger(__name__)


class VehicleService:
    def __init__(
        self,
        repository: IVehicleRepository,
        customer_repository: ICustomerRepository,
        audit_service: AuditService,
        storage: BlobStorage,
    ) -> None:
        self._repo = repository
        self._customer_repo = customer_repository
        self._audit = audit_service
        self._storage = storage

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_vehicles(
        self, actor: AppUser | None, customer_id: Optional[UUID | str] = None
    ) -> List[Vehicle]:
        """Vehicles of one customer (clients: always their own)."""
        actor = require_actor(actor)
        if actor.is_client:
            if actor.customer_id is None:
                return []
            customer_id = actor.customer_id

        if customer_id is None:
            return self._repo.list()

        customer = self._customer_repo.get_by_id(str(customer_id))
        if customer is None:
            raise CustomerNotFound(f"Customer {customer_id} not found.")
        ensure_customer_access(actor, customer, CustomerCapability.VEHICLES)
        return self._repo.list({"customer_id": customer.id})

    def get_vehicle(self, actor: AppUser | None, id: str) -> Vehicle:
        actor = require_actor(actor)
        vehicle = self._get(id)
        ensure_customer_access(actor, vehicle.customer, CustomerCapability.VEHICLES)
        return vehicle

    def get_registration_doc_url(self, actor: AppUser | None, id: str) -> str | None:
        actor = require_actor(actor)
        vehicle = self._get(id)
        ensure_customer_access(actor, vehicle.customer, CustomerCapability.DOCUMENTS)
        return self._storage.url(vehicle.registration_doc_file_id)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_vehicle(self, actor: AppUser | None, dto: CreateVehicleDTO) -> Vehicle:
        """Raises ``CustomerNotFound`` or ``DuplicatePlate``."""
        actor = require_staff(actor)
        customer = self._customer_repo.get_by_id(str(dto.customer_id))
        if customer is None:
            raise CustomerNotFound(f"Customer {dto.customer_id} not found.")
        if self._repo.get_by_plate(dto.plate):
            raise DuplicatePlate(f"Plate {dto.plate} is already registered.", attr="plate")

        vehicle = Vehicle(
            **dto.model_dump(exclude={"customer_id", "tires"}),
            customer=customer,
            tires=dto.tires.model_dump(exclude_none=True) if dto.tires else {},
        )
        vehicle = self._repo.save(vehicle)
        self._audit.record(
            EventType.VEHICLE_CREATED,
            EntityType.VEHICLE,
            vehicle.id,
            {"customer_id": customer.id, "plate": vehicle.plate},
            actor,
        )
        logger.info("vehicle.created", vehicle_id=str(vehicle.id), customer_id=str(customer.id))
        return vehicle

    @transaction.atomic
    def update_vehicle(self, actor: AppUser | None, id: str, dto: UpdateVehicleDTO) -> Vehicle:
        actor = require_staff(actor)
        vehicle = self._get(id)
        changes = dto.changes()

        new_plate = changes.get("plate")
        if new_plate and new_plate != vehicle.plate:
            existing = self._repo.get_by_plate(new_plate)
            if existing and existing.id != vehicle.id:
                raise DuplicatePlate(f"Plate {new_plate} is already registered.", attr="plate")

        for field, value in changes.items():
            setattr(vehicle, field, value)
        vehicle = self._repo.save(vehicle)
        self._audit.record(
            EventType.VEHICLE_UPDATED, EntityType.VEHICLE, vehicle.id, changes, actor
        )
        return vehicle

    @transaction.atomic
    def upload_registration_doc(
        self, actor: AppUser | None, id: str, file: UploadedFile
    ) -> Vehicle:
        """Store a new registration document, replacing any previous one."""
        actor = require_staff(actor)
        vehicle = self._get(id)
        previous_file_id = vehicle.registration_doc_file_id

        vehicle.registration_doc_file_id = self._storage.save(file)
        vehicle.registration_doc_file_name = file.name
        vehicle.registration_doc_file_type = getattr(file, "content_type", "") or ""
        vehicle.registration_doc_uploaded_at = timezone.now()
        vehicle = self._repo.save(vehicle)

        if previous_file_id:
            transaction.on_commit(lambda: self._storage.delete(previous_file_id))

        self._audit.record(
            EventType.VEHICLE_REGISTRATION_DOC_UPLOADED,
            EntityType.VEHICLE,
            vehicle.id,
            {"file_name": vehicle.registration_doc_file_name},
            actor,
        )
        return vehicle

    @transaction.atomic
    def delete_vehicle(self, actor: AppUser | None, id: str) -> None:
        """Raises ``VehicleNotFound`` or ``VehicleHasPartRequests``."""
        actor = require_staff(actor)
        vehicle = self._get(id)
        if self._repo.has_part_requests(id):
            raise VehicleHasPartRequests("Vehicle has part requests; remove them first.")

        file_id = vehicle.registration_doc_file_id
        self._repo.delete(id)
        if file_id:
            transaction.on_commit(lambda: self._storage.delete(file_id))

        self._audit.record(
            EventType.VEHICLE_DELETED,
            EntityType.VEHICLE,
            vehicle.id,
            {"plate": vehicle.plate, "customer_id": vehicle.customer_id},
            actor,
        )
        logger.info("vehicle.deleted", vehicle_id=str(id))

    def _get(self, id: str) -> Vehicle:
        vehicle = self._repo.get_by_id(id)
        if vehicle is None:
            raise VehicleNotFound(f"Vehicle {id} not found.")
        return vehicle
