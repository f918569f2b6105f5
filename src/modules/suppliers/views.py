"""Supplier API views (staff only, enforced by the service)."""

from __future__ import annotations

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.audit.repositories.django_repository import EventDjangoRepository
from modules.audit.services import AuditService
from modules.parts.repositories.django_repository import PartDjangoRepository
from modules.suppliers.dtos import CreateSupplierDTO, UpdateSupplierDTO
from modules.suppliers.repositories.django_repository import SupplierDjangoRepository
from modules.suppliers.serializers import (
    SupplierPartSerializer,
    SupplierSerializer,
    SupplierWriteSerializer,
)
from modules.suppliers.services import SupplierService


class SupplierViewSet(GenericViewSet):
    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = SupplierService(
            repository=SupplierDjangoRepository(),
            part_repository=PartDjangoRepository(),
            audit_service=AuditService(repository=EventDjangoRepository()),
        )

    def list(self, request: Request) -> Response:
        """GET /api/v1/suppliers/?include_inactive=true"""
        include_inactive = request.query_params.get("include_inactive", "").lower() in {"1", "true"}
        suppliers = self._service.list_suppliers(request.user, include_inactive=include_inactive)
        return Response(SupplierSerializer(suppliers, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/suppliers/{pk}/ (with parts history)"""
        supplier = self._service.get_supplier(request.user, pk)
        data = SupplierSerializer(supplier).data
        data["parts_history"] = SupplierPartSerializer(
            self._service.parts_history(request.user, pk), many=True
        ).data
        return Response(data)

    def create(self, request: Request) -> Response:
        serializer = SupplierWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        supplier = self._service.create_supplier(
            request.user, CreateSupplierDTO(**serializer.validated_data)
        )
        return Response(SupplierSerializer(supplier).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        serializer = SupplierWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        supplier = self._service.update_supplier(
            request.user, pk, UpdateSupplierDTO(**serializer.validated_data)
        )
        return Response(SupplierSerializer(supplier).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/suppliers/{pk}/ -> ``{"result": "deleted" | "deactivated"}``"""
        outcome = self._service.remove_supplier(request.user, pk)
        return Response({"result": outcome.value})
