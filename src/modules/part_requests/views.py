"""Part-request API views.

Exposes ``PartRequestService`` over HTTP.  Domain exceptions propagate to
the project exception handler; views only translate payloads to DTOs and
entities to role-shaped responses.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.audit.repositories.django_repository import EventDjangoRepository
from modules.audit.services import AuditService
from modules.core.pagination import StandardResultsSetPagination
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.part_requests.dtos import CreatePartRequestDTO, UpdatePartRequestDTO
from modules.part_requests.filters import PartRequestFilter
from modules.part_requests.models import PartRequest
from modules.part_requests.presenters import PartRequestPresenter
from modules.part_requests.repositories.django_repository import PartRequestDjangoRepository
from modules.part_requests.serializers import (
    CreatePartRequestSerializer,
    SetStatusSerializer,
    UpdatePartRequestSerializer,
)
from modules.part_requests.services import PartRequestService
from modules.parts.repositories.django_repository import PartDjangoRepository
from modules.vehicles.repositories.django_repository import VehicleDjangoRepository

WRITE_ACTIONS = {"create", "partial_update", "destroy", "set_status"}


class PartRequestViewSet(GenericViewSet):
    pagination_class = StandardResultsSetPagination
    filterset_class = PartRequestFilter
    filter_backends = [DjangoFilterBackend]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        part_repository = PartDjangoRepository()
        self._service = PartRequestService(
            repository=PartRequestDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            vehicle_repository=VehicleDjangoRepository(),
            part_repository=part_repository,
            audit_service=AuditService(repository=EventDjangoRepository()),
        )
        self._presenter = PartRequestPresenter(part_repository)

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return PartRequest.objects.none()
        return self._service.list_part_requests(self.request.user)

    def get_throttles(self) -> list[BaseThrottle]:
        self.throttle_scope = "part_request_writes" if self.action in WRITE_ACTIONS else None
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/part-requests/?status=&customer=&vehicle=&search=

        The service scopes the queryset to what the caller may see;
        ``PartRequestFilter`` narrows it through ``filter_backends``.
        """
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        data = self._presenter.present_many(page, request.user)
        return self.get_paginated_response(data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        part_request = self._service.get_part_request(request.user, pk)
        return Response(self._presenter.present(part_request, request.user))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        serializer = CreatePartRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        part_request = self._service.create_part_request(
            request.user, CreatePartRequestDTO(**serializer.validated_data)
        )
        return Response(
            self._presenter.present(part_request, request.user),
            status=status.HTTP_201_CREATED,
        )

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        serializer = UpdatePartRequestSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        part_request = self._service.update_part_request(
            request.user, pk, UpdatePartRequestDTO(**serializer.validated_data)
        )
        return Response(self._presenter.present(part_request, request.user))

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        self._service.remove_part_request(request.user, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="status")
    def set_status(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/part-requests/{pk}/status/ ``{"status": "ORDINATO"}``"""
        serializer = SetStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        part_request = self._service.set_status(
            request.user, pk, serializer.validated_data["status"]
        )
        return Response(self._presenter.present(part_request, request.user))
