"""Read-model shaping for part requests.

``PartRequestPresenter`` resolves display fields (part names, customer and
vehicle labels, timeline user names) into ``PartRequestOutputDTO`` and then
renders one explicit shape per role: staff get everything, clients get the
same document without supplier, internal notes, costs and workflow hints.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, List

from modules.accounts.constants import UNKNOWN_USER_LABEL
from modules.part_requests.constants import CUSTOM_PART_LABEL, PART_NOT_FOUND_LABEL
from modules.part_requests.dtos import (
    PartRequestItemOutputDTO,
    PartRequestOutputDTO,
    TimelineEntryDTO,
)

if TYPE_CHECKING:
    from modules.accounts.models import AppUser
    from modules.part_requests.models import PartRequest, PartRequestItem
    from modules.parts.repositories.interfaces import IPartRepository

CLIENT_HIDDEN_FIELDS: Dict[str, Any] = {
    "supplier": True,
    "notes": True,
    "suggested_next_statuses": True,
    "items": {"__all__": {"unit_cost_snapshot"}},
}


def resolve_part_name(item: PartRequestItem, part_names: Dict[str, str]) -> str:
    if item.part_id is not None:
        return part_names.get(str(item.part_id), PART_NOT_FOUND_LABEL)
    return item.free_text_name or CUSTOM_PART_LABEL


class PartRequestPresenter:
    def __init__(self, part_repository: IPartRepository) -> None:
        self._part_repo = part_repository

    def to_dto(
        self,
        part_request: PartRequest,
        part_names: Dict[str, str] | None = None,
        detail: bool = False,
    ) -> PartRequestOutputDTO:
        if part_names is None:
            part_names = self._part_names([part_request])
        return PartRequestOutputDTO(
            id=part_request.id,
            customer_id=part_request.customer_id,
            customer_name=part_request.customer.display_name,
            customer_email=(part_request.customer.email or None) if detail else None,
            customer_phone=(part_request.customer.phone or None) if detail else None,
            vehicle_id=part_request.vehicle_id,
            vehicle_plate=part_request.vehicle.plate,
            vehicle_make_model=part_request.vehicle.make_model,
            status=part_request.status,
            status_label=part_request.get_status_display(),
            suggested_next_statuses=part_request.suggested_next_statuses,
            supplier=part_request.supplier,
            notes=part_request.notes,
            items=[
                PartRequestItemOutputDTO(
                    id=item.id,
                    position=item.position,
                    part_id=item.part_id,
                    part_name=resolve_part_name(item, part_names),
                    free_text_name=item.free_text_name,
                    quantity=item.quantity,
                    unit_price_snapshot=item.unit_price_snapshot,
                    unit_cost_snapshot=item.unit_cost_snapshot,
                )
                for item in part_request.items.all()
            ],
            timeline=[
                TimelineEntryDTO(
                    sequence=entry.sequence,
                    status=entry.status,
                    at=entry.at,
                    by_user_id=entry.by_user_id,
                    user_name=entry.by_user.display_name if entry.by_user else UNKNOWN_USER_LABEL,
                )
                for entry in part_request.timeline.all()
            ],
            created_at=part_request.created_at,
            updated_at=part_request.updated_at,
        )

    def present(self, part_request: PartRequest, actor: AppUser, detail: bool = True) -> dict:
        return self.render(self.to_dto(part_request, detail=detail), actor)

    def present_many(self, part_requests: Iterable[PartRequest], actor: AppUser) -> List[dict]:
        part_requests = list(part_requests)
        part_names = self._part_names(part_requests)
        return [self.render(self.to_dto(pr, part_names), actor) for pr in part_requests]

    @staticmethod
    def render(dto: PartRequestOutputDTO, actor: AppUser) -> dict:
        if actor.is_client:
            return dto.model_dump(mode="json", exclude=CLIENT_HIDDEN_FIELDS)
        return dto.model_dump(mode="json")

    def _part_names(self, part_requests: Iterable[PartRequest]) -> Dict[str, str]:
        """One catalog query for every referenced part."""
        ids = {item.part_id for pr in part_requests for item in pr.items.all() if item.part_id}
        return {id: part.name for id, part in self._part_repo.get_many(ids).items()}
