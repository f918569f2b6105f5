"""Django ORM implementation of the Vehicle repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.vehicles.models import Vehicle
from modules.vehicles.repositories.interfaces import IVehicleRepository

logger = structlog.get_logger(__name__)


class VehicleDjangoRepository(IVehicleRepository):
    def get_by_id(self, id: str) -> Optional[Vehicle]:
        try:
            return Vehicle.objects.select_related("customer").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_plate(self, plate: str) -> Optional[Vehicle]:
        return Vehicle.objects.filter(plate=Vehicle.normalize_plate(plate)).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Vehicle]:
        queryset = Vehicle.objects.select_related("customer")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Vehicle) -> Vehicle:
        is_new = entity._state.adding
        entity.save()
        logger.info("vehicle.saved", vehicle_id=str(entity.id), is_new=is_new)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Vehicle.objects.filter(id=id).delete()
        return deleted > 0

    def has_part_requests(self, id: str) -> bool:
        return Vehicle.objects.filter(id=id, part_requests__isnull=False).exists()
