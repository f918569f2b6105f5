"""Customer API views.

Exposes the ``CustomerService`` via HTTP using DRF ViewSets.
Domain exceptions propagate to ``standardized_exception_handler``;
the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.audit.repositories.django_repository import EventDjangoRepository
from modules.audit.services import AuditService
from modules.core.pagination import StandardResultsSetPagination
from modules.core.storage import BlobStorage
from modules.customers.dtos import CreateCustomerDTO, CustomerSharingDTO, UpdateCustomerDTO
from modules.customers.filters import CustomerFilter
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.serializers import (
    ClientCustomerDetailSerializer,
    ClientCustomerSerializer,
    CustomerDetailSerializer,
    CustomerDocumentSerializer,
    CustomerSerializer,
    CustomerSharingSerializer,
    CustomerWriteSerializer,
    DocumentUploadSerializer,
)
from modules.customers.services import CustomerService


class CustomerViewSet(GenericViewSet):
    """ViewSet for Customer operations.

    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    filterset_class = CustomerFilter
    filter_backends = [DjangoFilterBackend]
    pagination_class = StandardResultsSetPagination
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CustomerService(
            repository=CustomerDjangoRepository(),
            user_repository=UserDjangoRepository(),
            audit_service=AuditService(repository=EventDjangoRepository()),
            storage=BlobStorage(prefix="customer-documents"),
        )

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Customer.objects.none()
        return self._service.list_customers(self.request.user)

    def _detail(self, request: Request, customer: Customer) -> dict:
        serializer_class = (
            ClientCustomerDetailSerializer if request.user.is_client else CustomerDetailSerializer
        )
        return serializer_class(customer).data

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/customers/?search=&type="""
        queryset = self.filter_queryset(self.get_queryset())
        serializer_class = ClientCustomerSerializer if request.user.is_client else CustomerSerializer
        page = self.paginate_queryset(queryset)
        return self.get_paginated_response(serializer_class(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/customers/{pk}/"""
        customer = self._service.get_customer(request.user, pk)
        return Response(self._detail(request, customer))

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/customers/"""
        serializer = CustomerWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        customer = self._service.create_customer(
            request.user, CreateCustomerDTO(**serializer.validated_data)
        )
        return Response(CustomerDetailSerializer(customer).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/customers/{pk}/"""
        serializer = CustomerWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        customer = self._service.update_customer(
            request.user, pk, UpdateCustomerDTO(**serializer.validated_data)
        )
        return Response(CustomerDetailSerializer(customer).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/customers/{pk}/"""
        self._service.delete_customer(request.user, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Sharing
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def sharing(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/customers/{pk}/sharing/"""
        serializer = CustomerSharingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        customer = self._service.set_sharing(
            request.user, pk, CustomerSharingDTO(**serializer.validated_data)
        )
        return Response(CustomerDetailSerializer(customer).data)

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def documents(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/customers/{pk}/documents/ (multipart ``file``)"""
        serializer = DocumentUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        document = self._service.add_document(request.user, pk, serializer.validated_data["file"])
        return Response(CustomerDocumentSerializer(document).data, status=status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=["delete"],
        url_path=r"documents/(?P<document_id>[^/.]+)",
    )
    def remove_document(
        self, request: Request, pk: str | None = None, document_id: str | None = None
    ) -> Response:
        """DELETE /api/v1/customers/{pk}/documents/{document_id}/"""
        self._service.remove_document(request.user, pk, document_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(
        detail=False,
        methods=["get"],
        url_path=r"documents/(?P<document_id>[^/.]+)/url",
    )
    def document_url(self, request: Request, document_id: str | None = None) -> Response:
        """GET /api/v1/customers/documents/{document_id}/url/"""
        return Response({"url": self._service.get_document_url(request.user, document_id)})
