"""Account API views: sign-in/up/out, current user, user administration.

Domain exceptions propagate to ``standardized_exception_handler``.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import GenericViewSet

from modules.accounts.authentication import get_bearer_token
from modules.accounts.dtos import (
    SessionOutputDTO,
    SetRoleDTO,
    SignInDTO,
    SignUpDTO,
    UserOutputDTO,
)
from modules.accounts.repositories.django_repository import (
    SessionDjangoRepository,
    UserDjangoRepository,
)
from modules.accounts.serializers import (
    LinkCustomerSerializer,
    SetRoleSerializer,
    SignInSerializer,
    SignUpSerializer,
)
from modules.accounts.services import AuthService, UserService
from modules.customers.repositories.django_repository import CustomerDjangoRepository


def _auth_service() -> AuthService:
    return AuthService(
        user_repository=UserDjangoRepository(),
        session_repository=SessionDjangoRepository(),
    )


class SignInView(APIView):
    """POST /api/v1/auth/sign-in/"""

    authentication_classes: list = []
    permission_classes = [AllowAny]
    throttle_scope = "sign_in"

    def post(self, request: Request) -> Response:
        serializer = SignInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = _auth_service().sign_in(SignInDTO(**serializer.validated_data))
        return Response(SessionOutputDTO.from_entity(session).model_dump(mode="json"))


class SignUpView(APIView):
    """POST /api/v1/auth/sign-up/"""

    authentication_classes: list = []
    permission_classes = [AllowAny]
    throttle_scope = "sign_in"

    def post(self, request: Request) -> Response:
        serializer = SignUpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = _auth_service().sign_up(SignUpDTO(**serializer.validated_data))
        return Response(
            SessionOutputDTO.from_entity(session).model_dump(mode="json"),
            status=status.HTTP_201_CREATED,
        )


class SignOutView(APIView):
    """POST /api/v1/auth/sign-out/ (always 204, even for stale tokens)."""

    authentication_classes: list = []
    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        try:
            token = get_bearer_token(request)
        except AuthenticationFailed:
            token = None
        _auth_service().sign_out(token)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MeView(APIView):
    """GET /api/v1/me: the user behind the bearer token."""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        service = UserService(
            user_repository=UserDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
        )
        user = service.get_current_user(request.user)
        return Response(UserOutputDTO.from_entity(user).model_dump(mode="json"))


class UserViewSet(GenericViewSet):
    """Administrative user management (ADMIN only, enforced by the service)."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = UserService(
            user_repository=UserDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
        )

    def list(self, request: Request) -> Response:
        """GET /api/v1/users/"""
        users = self._service.list_users(request.user)
        return Response([UserOutputDTO.from_entity(u).model_dump(mode="json") for u in users])

    @action(detail=True, methods=["post"])
    def role(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/users/{pk}/role/"""
        serializer = SetRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = self._service.set_role(request.user, pk, SetRoleDTO(**serializer.validated_data))
        return Response(UserOutputDTO.from_entity(user).model_dump(mode="json"))

    @action(detail=True, methods=["post"], url_path="link-customer")
    def link_customer(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/users/{pk}/link-customer/"""
        serializer = LinkCustomerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = self._service.link_client_to_customer(
            request.user, pk, serializer.validated_data["customer_id"]
        )
        return Response(UserOutputDTO.from_entity(user).model_dump(mode="json"))
