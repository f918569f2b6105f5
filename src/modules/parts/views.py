"""Parts catalog API views."""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.audit.repositories.django_repository import EventDjangoRepository
from modules.audit.services import AuditService
from modules.parts.dtos import AdjustStockDTO, CreatePartDTO, UpdatePartDTO
from modules.parts.repositories.django_repository import PartDjangoRepository
from modules.parts.serializers import (
    AdjustStockSerializer,
    ClientPartSerializer,
    PartSerializer,
    PartWriteSerializer,
)
from modules.parts.services import PartService
from modules.suppliers.repositories.django_repository import SupplierDjangoRepository
from modules.vehicles.repositories.django_repository import VehicleDjangoRepository


class PartViewSet(GenericViewSet):
    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = PartService(
            repository=PartDjangoRepository(),
            supplier_repository=SupplierDjangoRepository(),
            vehicle_repository=VehicleDjangoRepository(),
            audit_service=AuditService(repository=EventDjangoRepository()),
        )

    def list(self, request: Request) -> Response:
        """GET /api/v1/parts/?search=&low_stock=true or ?vehicle={id}"""
        vehicle_id = request.query_params.get("vehicle")
        if vehicle_id:
            parts = self._service.list_vehicle_parts(request.user, vehicle_id)
            serializer_class = ClientPartSerializer if request.user.is_client else PartSerializer
            return Response(serializer_class(parts, many=True).data)

        parts = self._service.list_parts(
            request.user,
            search=request.query_params.get("search") or None,
            low_stock=request.query_params.get("low_stock", "").lower() in {"1", "true"},
        )
        return Response(PartSerializer(parts, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        return Response(PartSerializer(self._service.get_part(request.user, pk)).data)

    def create(self, request: Request) -> Response:
        serializer = PartWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        part = self._service.create_part(request.user, CreatePartDTO(**serializer.validated_data))
        return Response(PartSerializer(part).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        serializer = PartWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = {k: v for k, v in serializer.validated_data.items() if k != "stock_qty"}
        part = self._service.update_part(request.user, pk, UpdatePartDTO(**data))
        return Response(PartSerializer(part).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        self._service.delete_part(request.user, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="adjust-stock")
    def adjust_stock(self, request: Request, pk: str | None = None) -> Response:
        serializer = AdjustStockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        part = self._service.adjust_stock(
            request.user, pk, AdjustStockDTO(**serializer.validated_data)
        )
        return Response(PartSerializer(part).data)
