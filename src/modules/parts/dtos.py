"""Part DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreatePartDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)
    sku: str = ""
    oem_code: str = ""
    supplier_id: UUID | None = None
    unit_cost: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    unit_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    part_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    labor_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    stock_qty: int = Field(default=0, ge=0)
    min_stock_qty: int | None = Field(default=None, ge=0)
    location: str = ""
    notes: str = ""
    vehicle_id: UUID | None = None


class UpdatePartDTO(BaseModel):
    """Only supplied (non-``None``) fields are written.

    Stock changes go through ``AdjustStockDTO`` so every movement is logged.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=255)
    sku: str | None = None
    oem_code: str | None = None
    supplier_id: UUID | None = None
    unit_cost: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    unit_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    part_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    labor_price: Decimal | None = Field(default=None, ge=0, decimal_places=2)
    min_stock_qty: int | None = Field(default=None, ge=0)
    location: str | None = None
    notes: str | None = None
    vehicle_id: UUID | None = None

    def changes(self) -> dict:
        return {field: value for field, value in self.model_dump().items() if value is not None}


class AdjustStockDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    delta: int
    reason: str = ""

    @field_validator("delta")
    @classmethod
    def delta_not_zero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("Stock adjustment must be non-zero.")
        return v
