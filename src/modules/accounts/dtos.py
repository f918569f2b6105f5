"""Account DTOs for the Service Layer (Pydantic v2, immutable)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Annotated
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field

from modules.accounts.constants import Role

if TYPE_CHECKING:
    from modules.accounts.models import AppUser, Session


def _normalize_email(value: object) -> object:
    if isinstance(value, str):
        return value.strip().lower()
    return value


NormalizedEmail = Annotated[EmailStr, BeforeValidator(_normalize_email)]


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class SignInDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    email: NormalizedEmail
    password: str = Field(min_length=1)


class SignUpDTO(BaseModel):
    """Self-service registration.  Only the shop staff role is accepted."""

    model_config = ConfigDict(frozen=True)

    email: NormalizedEmail
    password: str = Field(min_length=6)
    name: str = ""
    role: Role = Role.BENZINE


class SetRoleDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    customer_id: UUID | None = None
    privileges: dict[str, bool] | None = None


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class UserOutputDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str
    name: str
    role: str
    customer_id: UUID | None
    customer_name: str | None
    privileges: dict[str, bool]

    @classmethod
    def from_entity(cls, user: AppUser) -> UserOutputDTO:
        customer = user.customer if user.customer_id else None
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            role=user.role,
            customer_id=user.customer_id,
            customer_name=customer.display_name if customer else None,
            privileges=user.privileges or {},
        )


class SessionOutputDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    expires_at: datetime
    user: UserOutputDTO

    @classmethod
    def from_entity(cls, session: Session) -> SessionOutputDTO:
        return cls(
            token=session.token,
            expires_at=session.expires_at,
            user=UserOutputDTO.from_entity(session.user),
        )
