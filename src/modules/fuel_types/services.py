"""Fuel type service: everyone reads, only ADMIN edits."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import transaction

from modules.accounts.policies import require_actor, require_admin
from modules.audit.constants import EntityType, EventType
from modules.core.constants import RemovalOutcome
from modules.fuel_types.exceptions import FuelTypeAlreadyExists, FuelTypeNotFound
from modules.fuel_types.models import FuelType

if TYPE_CHECKING:
    from modules.accounts.models import AppUser
    from modules.audit.services import AuditService
    from modules.fuel_types.dtos import CreateFuelTypeDTO, UpdateFuelTypeDTO
    from modules.fuel_types.repositories.interfaces import IFuelTypeRepository

logger = structlog.get_logger(__name__)


class FuelTypeService:
    def __init__(self, repository: IFuelTypeRepository, audit_service: AuditService) -> None:
        self._repo = repository
        self._audit = audit_service

    def list_fuel_types(self, actor: AppUser | None, include_inactive: bool = False) -> List[FuelType]:
        require_actor(actor)
        return self._repo.list(None if include_inactive else {"is_active": True})

    @transaction.atomic
    def create_fuel_type(self, actor: AppUser | None, dto: CreateFuelTypeDTO) -> FuelType:
        actor = require_admin(actor)
        if self._repo.get_by_name(dto.name):
            raise FuelTypeAlreadyExists(f"Fuel type {dto.name!r} already exists.", attr="name")

        order = dto.order if dto.order is not None else self._repo.count()
        fuel_type = self._repo.save(FuelType(name=dto.name, order=order))
        self._audit.record(
            EventType.FUEL_TYPE_CREATED,
            EntityType.FUEL_TYPE,
            fuel_type.id,
            {"name": fuel_type.name, "order": fuel_type.order},
            actor,
        )
        return fuel_type

    @transaction.atomic
    def update_fuel_type(
        self, actor: AppUser | None, id: str, dto: UpdateFuelTypeDTO
    ) -> FuelType:
        actor = require_admin(actor)
        fuel_type = self._get(id)
        changes = dto.changes()

        new_name = changes.get("name")
        if new_name and new_name.lower() != fuel_type.name.lower():
            if self._repo.get_by_name(new_name):
                raise FuelTypeAlreadyExists(f"Fuel type {new_name!r} already exists.", attr="name")

        for field, value in changes.items():
            setattr(fuel_type, field, value)
        fuel_type = self._repo.save(fuel_type)
        self._audit.record(
            EventType.FUEL_TYPE_UPDATED, EntityType.FUEL_TYPE, fuel_type.id, changes, actor
        )
        return fuel_type

    @transaction.atomic
    def remove_fuel_type(self, actor: AppUser | None, id: str) -> RemovalOutcome:
        actor = require_admin(actor)
        fuel_type = self._get(id)

        if self._repo.is_used_by_vehicles(fuel_type.name):
            fuel_type.is_active = False
            self._repo.save(fuel_type)
            outcome, event_type = RemovalOutcome.DEACTIVATED, EventType.FUEL_TYPE_DEACTIVATED
        else:
            self._repo.delete(id)
            outcome, event_type = RemovalOutcome.DELETED, EventType.FUEL_TYPE_DELETED

        self._audit.record(
            event_type, EntityType.FUEL_TYPE, fuel_type.id, {"name": fuel_type.name}, actor
        )
        logger.info("fuel_type.removed", fuel_type_id=str(id), outcome=outcome.value)
        return outcome

    def _get(self, id: str) -> FuelType:
        fuel_type = self._repo.get_by_id(id)
        if fuel_type is None:
            raise FuelTypeNotFound(f"Fuel type {id} not found.")
        return fuel_type
