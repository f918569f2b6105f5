"""Vehicle DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

import re
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _normalize_plate(value: object) -> object:
    if isinstance(value, str):
        return re.sub(r"\s+", "", value).upper()
    return value


# ---------------------------------------------------------------------------
# Tires
# ---------------------------------------------------------------------------


class TireSpecDTO(BaseModel):
    """One axle's tire size, e.g. 205/55 R16 91V."""

    model_config = ConfigDict(frozen=True)

    width: int | None = Field(default=None, gt=0)
    aspect_ratio: int | None = Field(default=None, gt=0)
    rim_diameter: int | None = Field(default=None, gt=0)
    load_index: str | None = None
    speed_rating: str | None = None
    brand: str | None = None


class TireSetDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    front: TireSpecDTO | None = None
    rear: TireSpecDTO | None = None


class TiresDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    summer: TireSetDTO | None = None
    winter: TireSetDTO | None = None
    notes: str | None = None


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateVehicleDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    customer_id: UUID
    plate: str = Field(min_length=1, max_length=20)
    make: str = ""
    model: str = ""
    year: int | None = Field(default=None, ge=1900, le=2100)
    vin: str = Field(default="", max_length=17)
    fuel_type: str = ""
    km: int | None = Field(default=None, ge=0)
    tires: TiresDTO | None = None

    @field_validator("plate", mode="before")
    @classmethod
    def normalize_plate(cls, v: object) -> object:
        return _normalize_plate(v)


class UpdateVehicleDTO(BaseModel):
    """Only supplied (non-``None``) fields are written."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    plate: str | None = Field(default=None, min_length=1, max_length=20)
    make: str | None = None
    model: str | None = None
    year: int | None = Field(default=None, ge=1900, le=2100)
    vin: str | None = Field(default=None, max_length=17)
    fuel_type: str | None = None
    km: int | None = Field(default=None, ge=0)
    tires: TiresDTO | None = None

    @field_validator("plate", mode="before")
    @classmethod
    def normalize_plate(cls, v: object) -> object:
        return _normalize_plate(v)

    def changes(self) -> dict:
        changes = {
            field: value
            for field, value in self.model_dump(exclude={"tires"}).items()
            if value is not None
        }
        if self.tires is not None:
            changes["tires"] = self.tires.model_dump(exclude_none=True)
        return changes
