"""Vehicle API views."""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.audit.repositories.django_repository import EventDjangoRepository
from modules.audit.services import AuditService
from modules.core.storage import BlobStorage
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.serializers import DocumentUploadSerializer
from modules.vehicles.dtos import CreateVehicleDTO, UpdateVehicleDTO
from modules.vehicles.repositories.django_repository import VehicleDjangoRepository
from modules.vehicles.serializers import VehicleSerializer, VehicleWriteSerializer
from modules.vehicles.services import VehicleService


class VehicleViewSet(GenericViewSet):
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = VehicleService(
            repository=VehicleDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            audit_service=AuditService(repository=EventDjangoRepository()),
            storage=BlobStorage(prefix="registration-documents"),
        )

    def list(self, request: Request) -> Response:
        """GET /api/v1/vehicles/?customer={id}"""
        vehicles = self._service.list_vehicles(
            request.user, request.query_params.get("customer") or None
        )
        return Response(VehicleSerializer(vehicles, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        return Response(VehicleSerializer(self._service.get_vehicle(request.user, pk)).data)

    def create(self, request: Request) -> Response:
        serializer = VehicleWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = {k: v for k, v in serializer.validated_data.items() if v is not None}
        vehicle = self._service.create_vehicle(request.user, CreateVehicleDTO(**data))
        return Response(VehicleSerializer(vehicle).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        serializer = VehicleWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = {k: v for k, v in serializer.validated_data.items() if k != "customer_id"}
        vehicle = self._service.update_vehicle(request.user, pk, UpdateVehicleDTO(**data))
        return Response(VehicleSerializer(vehicle).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        self._service.delete_vehicle(request.user, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["get", "post"], url_path="registration-doc")
    def registration_doc(self, request: Request, pk: str | None = None) -> Response:
        """GET -> ``{"url": ...}``; POST (multipart ``file``) replaces the document."""
        if request.method == "GET":
            return Response({"url": self._service.get_registration_doc_url(request.user, pk)})

        serializer = DocumentUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        vehicle = self._service.upload_registration_doc(
            request.user, pk, serializer.validated_data["file"]
        )
        return Response(VehicleSerializer(vehicle).data)
