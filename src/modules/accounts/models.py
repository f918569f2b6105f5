"""Application users and session tokens.

``AppUser`` is the identity every service receives as ``actor``.  It is not
Django's auth user: authentication is an opaque bearer token resolved to a
``Session`` row (see ``modules.accounts.sessions``).
"""

from __future__ import annotations

import secrets
from datetime import datetime

from django.contrib.auth.hashers import check_password, make_password
from django.db import models
from django.utils import timezone

from modules.accounts.constants import STAFF_ROLES, UNKNOWN_USER_LABEL, Role
from modules.core.models import BaseModel


class AppUser(BaseModel):
    """A person who can sign in: shop admin, shop staff, or a client."""

    email = models.EmailField(max_length=254, unique=True)
    name = models.CharField(max_length=255, blank=True, default="")
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.BENZINE)
    customer = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="client_users",
    )
    privileges = models.JSONField(default=dict, blank=True)
    password_hash = models.CharField(max_length=255)

    # DRF checks these on ``request.user``
    is_authenticated = True
    is_anonymous = False

    class Meta:
        db_table = "app_users"
        ordering = ["email"]
        indexes = [
            models.Index(fields=["role"], name="app_users_role_idx"),
        ]

    # ------------------------------------------------------------------
    # Role helpers
    # ------------------------------------------------------------------

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_staff_member(self) -> bool:
        return self.role in STAFF_ROLES

    @property
    def is_client(self) -> bool:
        return self.role == Role.CLIENTE

    @property
    def display_name(self) -> str:
        return self.name or self.email or UNKNOWN_USER_LABEL

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    def set_password(self, raw_password: str) -> None:
        self.password_hash = make_password(raw_password)

    def check_password(self, raw_password: str) -> bool:
        return check_password(raw_password, self.password_hash)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.email} ({self.role})"


class Session(BaseModel):
    """Opaque bearer token bound to a user until ``expires_at``."""

    token = models.CharField(max_length=128, unique=True)
    user = models.ForeignKey(
        AppUser,
        on_delete=models.CASCADE,
        related_name="sessions",
    )
    expires_at = models.DateTimeField(db_index=True)

    class Meta:
        db_table = "account_sessions"
        ordering = ["-created_at"]

    @staticmethod
    def generate_token() -> str:
        return secrets.token_urlsafe(32)

    def is_expired(self, now: datetime | None = None) -> bool:
        """A session is expired at or after its expiry instant."""
        return self.expires_at <= (now or timezone.now())

    def __str__(self) -> str:
        return f"session for {self.user_id} until {self.expires_at:%Y-%m-%d %H:%M}"
