"""Customer DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator, model_validator

from modules.customers.constants import CustomerType


def _blank_to_none(value: object) -> object:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateCustomerDTO(BaseModel):
    """Immutable DTO for customer creation.

    ``display_name`` is derived from the person or company name when the
    caller leaves it blank.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    type: CustomerType = CustomerType.PRIVATO
    display_name: str = ""
    first_name: str = ""
    last_name: str = ""
    company_name: str = ""
    vat_number: str = ""
    contact_person: str = ""
    phone: str = ""
    email: EmailStr | None = None
    address: str = ""
    notes: str = ""

    @field_validator("email", mode="before")
    @classmethod
    def blank_email_is_none(cls, v: object) -> object:
        return _blank_to_none(v)

    @model_validator(mode="before")
    @classmethod
    def derive_display_name(cls, data: Any) -> Any:
        if not isinstance(data, dict) or str(data.get("display_name") or "").strip():
            return data
        if data.get("type") == CustomerType.AZIENDA:
            derived = str(data.get("company_name") or "")
        else:
            derived = f"{data.get('first_name') or ''} {data.get('last_name') or ''}"
        derived = derived.strip()
        if not derived:
            raise ValueError("A display name (or person/company name) is required.")
        return {**data, "display_name": derived}


class UpdateCustomerDTO(BaseModel):
    """All fields optional; only supplied (non-``None``) fields are written."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    type: CustomerType | None = None
    display_name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    company_name: str | None = None
    vat_number: str | None = None
    contact_person: str | None = None
    phone: str | None = None
    email: EmailStr | Literal[""] | None = None
    address: str | None = None
    notes: str | None = None

    @field_validator("display_name")
    @classmethod
    def display_name_not_blank(cls, v: str | None) -> str | None:
        if v is not None and not v:
            raise ValueError("Display name cannot be blank.")
        return v

    def changes(self) -> dict:
        return {field: value for field, value in self.model_dump().items() if value is not None}


class CustomerSharingDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_ids: list[UUID] = []
    can_view_vehicles: bool = False
    can_view_parts: bool = False
    can_view_documents: bool = False
