"""Part-request DTOs for the Service Layer (Pydantic v2, immutable).

Input DTOs validate item rules before any write:
- at least one item;
- every quantity is a positive integer;
- every item references a catalog part or carries a non-blank name.

Output DTOs are the enriched read model; ``presenters`` shapes them per
role.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated, List, Optional
from uuid import UUID

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class RequestedItemDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    part_id: Optional[UUID] = None
    free_text_name: Optional[str] = None
    quantity: int
    unit_price_snapshot: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    unit_cost_snapshot: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be greater than zero.")
        return v

    @model_validator(mode="after")
    def part_or_name_required(self):
        if self.part_id is None and not self.free_text_name:
            raise ValueError("Each item needs a catalog part or a free-text name.")
        return self


def _items_not_empty(items: List[RequestedItemDTO]) -> List[RequestedItemDTO]:
    if not items:
        raise ValueError("At least one part must be requested.")
    return items


RequestedItems = Annotated[List[RequestedItemDTO], AfterValidator(_items_not_empty)]


class CreatePartRequestDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    customer_id: UUID
    vehicle_id: UUID
    items: RequestedItems
    supplier: str = ""
    notes: str = ""


class UpdatePartRequestDTO(BaseModel):
    """Typed partial update: ``None`` means "not supplied"."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    items: Optional[RequestedItems] = None
    supplier: Optional[str] = None
    notes: Optional[str] = None

    def changes(self) -> dict:
        return {
            field: getattr(self, field)
            for field in ("supplier", "notes")
            if getattr(self, field) is not None
        }


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class PartRequestItemOutputDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    position: int
    part_id: Optional[UUID]
    part_name: str
    free_text_name: str
    quantity: int
    unit_price_snapshot: Optional[Decimal]
    unit_cost_snapshot: Optional[Decimal]


class TimelineEntryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    sequence: int
    status: str
    at: datetime
    by_user_id: Optional[UUID]
    user_name: str


class PartRequestOutputDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    customer_id: UUID
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    vehicle_id: UUID
    vehicle_plate: str
    vehicle_make_model: str
    status: str
    status_label: str
    suggested_next_statuses: List[str]
    supplier: str
    notes: str
    items: List[PartRequestItemOutputDTO]
    timeline: List[TimelineEntryDTO]
    created_at: datetime
    updated_at: datetime
