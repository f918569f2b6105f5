"""Django ORM implementation of the Part repository.

Returns ``None`` for missing or malformed ids (Null Object style).
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q

from modules.part_requests.models import PartRequestItem
from modules.parts.models import Part
from modules.parts.repositories.interfaces import IPartRepository

logger = structlog.get_logger(__name__)


class PartDjangoRepository(IPartRepository):
    def get_by_id(self, id: str) -> Optional[Part]:
        try:
            return Part.objects.select_related("supplier").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Part]:
        try:
            return Part.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_many(self, ids: Iterable[Any]) -> Dict[str, Part]:
        wanted = {str(id) for id in ids if id}
        if not wanted:
            return {}
        return {str(part.id): part for part in Part.objects.filter(id__in=wanted)}

    def list(
        self, filters: Optional[Dict[str, Any]] = None, search: Optional[str] = None
    ) -> List[Part]:
        queryset = Part.objects.select_related("supplier")
        if filters:
            queryset = queryset.filter(**filters)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) | Q(sku__icontains=search) | Q(oem_code__icontains=search)
            )
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Part) -> Part:
        is_new = entity._state.adding
        entity.save()
        logger.info("part.saved", part_id=str(entity.id), is_new=is_new)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        deleted, _ = Part.objects.filter(id=id).delete()
        return deleted > 0

    def is_used_in_part_requests(self, id: str) -> bool:
        return PartRequestItem.objects.filter(part_id=id).exists()
