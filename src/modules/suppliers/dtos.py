"""Supplier DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class CreateSupplierDTO(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    company_name: str = Field(min_length=1)
    contact_name: str = ""
    phone: str = ""
    email: EmailStr | Literal[""] = ""
    address: str = ""
    notes: str = ""
    is_active: bool = True


class UpdateSupplierDTO(BaseModel):
    """Only supplied (non-``None``) fields are written."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    company_name: str | None = Field(default=None, min_length=1)
    contact_name: str | None = None
    phone: str | None = None
    email: EmailStr | Literal[""] | None = None
    address: str | None = None
    notes: str | None = None
    is_active: bool | None = None

    def changes(self) -> dict:
        return {field: value for field, value in self.model_dump().items() if value is not None}
