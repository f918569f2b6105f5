"""Account service layer: sign-in/up/out and user administration."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone

from modules.accounts.constants import Role
from modules.accounts.exceptions import (
    InvalidCredentials,
    InvalidRoleAssignment,
    SignUpDisabled,
    UserAlreadyExists,
    UserNotFound,
)
from modules.accounts.models import AppUser, Session
from modules.accounts.policies import require_actor, require_admin
from modules.customers.exceptions import CustomerNotFound

if TYPE_CHECKING:
    from uuid import UUID

    from modules.accounts.dtos import SetRoleDTO, SignInDTO, SignUpDTO
    from modules.accounts.repositories.interfaces import (
        ISessionRepository,
        IUserRepository,
    )
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class AuthService:
    """Issues and revokes session tokens."""

    def __init__(
        self,
        user_repository: IUserRepository,
        session_repository: ISessionRepository,
    ) -> None:
        self._user_repo = user_repository
        self._session_repo = session_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def sign_in(self, dto: SignInDTO) -> Session:
        """Open a new session for valid credentials.

        Raises:
            InvalidCredentials: unknown email or wrong password.
        """
        user = self._user_repo.get_by_email(dto.email)
        if user is None or not user.check_password(dto.password):
            logger.warning("auth.sign_in_failed")
            raise InvalidCredentials("Invalid email or password.")

        session = self._open_session(user)
        logger.info("auth.signed_in", user_id=str(user.id), role=user.role)
        return session

    @transaction.atomic
    def sign_up(self, dto: SignUpDTO) -> Session:
        """Register a user and sign them in.

        Self-service accounts are always shop staff; ADMIN and CLIENTE are
        granted afterwards by an administrator through ``set_role``.

        Raises:
            SignUpDisabled: ``SIGN_UP_ENABLED`` is off.
            InvalidRoleAssignment: a role other than BENZINE was requested.
            UserAlreadyExists: the email is taken.
        """
        if not settings.SIGN_UP_ENABLED:
            raise SignUpDisabled("Sign-up is disabled.")
        if dto.role != Role.BENZINE:
            logger.warning("auth.sign_up_role_rejected", role=dto.role)
            raise InvalidRoleAssignment(
                "Only shop staff accounts can be self-registered.", attr="role"
            )

        if self._user_repo.get_by_email(dto.email):
            raise UserAlreadyExists("A user with this email already exists.")

        user = AppUser(email=dto.email, name=dto.name, role=dto.role)
        user.set_password(dto.password)
        user = self._user_repo.save(user)

        session = self._open_session(user)
        logger.info("auth.signed_up", user_id=str(user.id), role=user.role)
        return session

    def sign_out(self, token: str | None) -> None:
        """Delete the session for *token*; failures are logged, never raised."""
        if not token:
            return
        try:
            removed = self._session_repo.delete_by_token(token)
        except DatabaseError as exc:
            logger.warning("auth.sign_out_failed", error=str(exc))
            return
        logger.info("auth.signed_out", session_found=removed)

    def purge_expired_sessions(self) -> int:
        return self._session_repo.purge_expired(timezone.now())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _open_session(self, user: AppUser) -> Session:
        expires_at = timezone.now() + settings.SESSION_TOKEN_TTL
        return self._session_repo.create(user, Session.generate_token(), expires_at)


class UserService:
    """User administration (ADMIN only) and the current-user query."""

    def __init__(
        self,
        user_repository: IUserRepository,
        customer_repository: ICustomerRepository,
    ) -> None:
        self._user_repo = user_repository
        self._customer_repo = customer_repository

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_current_user(self, actor: AppUser | None) -> AppUser:
        return require_actor(actor)

    def list_users(self, actor: AppUser | None) -> List[AppUser]:
        require_admin(actor)
        return self._user_repo.list()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def set_role(self, actor: AppUser | None, user_id: str, dto: SetRoleDTO) -> AppUser:
        """Change a user's role, customer link and privileges.

        A CLIENTE must be linked to a customer.  Any other role loses its link
        and is dropped from every customer's shared set.

        Raises:
            UserNotFound, CustomerNotFound, InvalidRoleAssignment
        """
        admin = require_admin(actor)
        user = self._get_user(user_id)

        if dto.role == Role.CLIENTE:
            if dto.customer_id is None:
                raise InvalidRoleAssignment(
                    "A client user must be linked to a customer.", attr="customer_id"
                )
            self._get_customer(dto.customer_id)
            user.customer_id = dto.customer_id
        else:
            user.customer_id = None
            self._user_repo.clear_shared_customers(user)

        user.role = dto.role
        if dto.privileges is not None:
            user.privileges = dto.privileges

        user = self._user_repo.save(user)
        logger.info(
            "user.role_changed",
            user_id=str(user.id),
            role=user.role,
            changed_by=str(admin.id),
        )
        return self._user_repo.get_by_id(str(user.id)) or user

    @transaction.atomic
    def link_client_to_customer(
        self, actor: AppUser | None, user_id: str, customer_id: UUID
    ) -> AppUser:
        """Attach a CLIENTE user to the customer whose data they may see."""
        require_admin(actor)
        user = self._get_user(user_id)
        if user.role != Role.CLIENTE:
            raise InvalidRoleAssignment("Only client users can be linked to a customer.")
        self._get_customer(customer_id)

        user.customer_id = customer_id
        user = self._user_repo.save(user)
        logger.info("user.linked_to_customer", user_id=str(user.id), customer_id=str(customer_id))
        return self._user_repo.get_by_id(str(user.id)) or user

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_user(self, user_id: str) -> AppUser:
        user = self._user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFound(f"User {user_id} not found.")
        return user

    def _get_customer(self, customer_id: UUID):
        customer = self._customer_repo.get_by_id(str(customer_id))
        if customer is None:
            raise CustomerNotFound(f"Customer {customer_id} not found.")
        return customer
