"""Fuel type DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CreateFuelTypeDTO(BaseModel):
    """``order`` defaults to the end of the list when omitted."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=60)
    order: int | None = Field(default=None, ge=0)


class UpdateFuelTypeDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    name: str | None = Field(default=None, min_length=1, max_length=60)
    order: int | None = Field(default=None, ge=0)
    is_active: bool | None = None

    def changes(self) -> dict:
        return {field: value for field, value in self.model_dump().items() if value is not None}
