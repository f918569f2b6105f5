"""Fuel type API views."""

from __future__ import annotations

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.audit.repositories.django_repository import EventDjangoRepository
from modules.audit.services import AuditService
from modules.fuel_types.dtos import CreateFuelTypeDTO, UpdateFuelTypeDTO
from modules.fuel_types.repositories.django_repository import FuelTypeDjangoRepository
from modules.fuel_types.serializers import FuelTypeSerializer, FuelTypeWriteSerializer
from modules.fuel_types.services import FuelTypeService


class FuelTypeViewSet(GenericViewSet):
    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = FuelTypeService(
            repository=FuelTypeDjangoRepository(),
            audit_service=AuditService(repository=EventDjangoRepository()),
        )

    def list(self, request: Request) -> Response:
        """GET /api/v1/fuel-types/?include_inactive=true"""
        include_inactive = request.query_params.get("include_inactive", "").lower() in {"1", "true"}
        fuel_types = self._service.list_fuel_types(request.user, include_inactive=include_inactive)
        return Response(FuelTypeSerializer(fuel_types, many=True).data)

    def create(self, request: Request) -> Response:
        serializer = FuelTypeWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = {k: v for k, v in serializer.validated_data.items() if k != "is_active"}
        fuel_type = self._service.create_fuel_type(request.user, CreateFuelTypeDTO(**data))
        return Response(FuelTypeSerializer(fuel_type).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        serializer = FuelTypeWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        fuel_type = self._service.update_fuel_type(
            request.user, pk, UpdateFuelTypeDTO(**serializer.validated_data)
        )
        return Response(FuelTypeSerializer(fuel_type).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        outcome = self._service.remove_fuel_type(request.user, pk)
        return Response({"result": outcome.value})
