"""Django ORM implementation of the FuelType repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.fuel_types.models import FuelType
from modules.fuel_types.repositories.interfaces import IFuelTypeRepository
from modules.vehicles.models import Vehicle

logger = structlog.get_logger(__name__)


class FuelTypeDjangoRepository(IFuelTypeRepository):
    def get_by_id(self, id: str) -> Optional[FuelType]:
        try:
            return FuelType.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_name(self, name: str) -> Optional[FuelType]:
        return FuelType.objects.filter(name__iexact=name).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[FuelType]:
        queryset = FuelType.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def count(self) -> int:
        return FuelType.objects.count()

    @transaction.atomic
    def save(self, entity: FuelType) -> FuelType:
        is_new = entity._state.adding
        entity.save()
        logger.info("fuel_type.saved", fuel_type_id=str(entity.id), is_new=is_new)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = FuelType.objects.filter(id=id).delete()
        return deleted > 0

    def is_used_by_vehicles(self, name: str) -> bool:
        return Vehicle.objects.filter(fuel_type=name).exists()
