"""Notification outbox API (ADMIN only, enforced by the service)."""

from __future__ import annotations

from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.notifications.repositories.django_repository import NotificationDjangoRepository
from modules.notifications.serializers import (
    MarkFailedSerializer,
    NotificationSerializer,
    PendingQuerySerializer,
)
from modules.notifications.services import NotificationService


class NotificationViewSet(GenericViewSet):
    serializer_class = NotificationSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = NotificationService(
            repository=NotificationDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
        )

    @action(detail=False, methods=["get"])
    def pending(self, request: Request) -> Response:
        """GET /api/v1/notifications/pending/?limit=50"""
        query = PendingQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        entries = self._service.list_pending(request.user, limit=query.validated_data.get("limit"))
        return Response(NotificationSerializer(entries, many=True).data)

    @action(detail=True, methods=["post"])
    def sent(self, request: Request, pk: str | None = None) -> Response:
        return Response(NotificationSerializer(self._service.mark_sent(request.user, pk)).data)

    @action(detail=True, methods=["post"])
    def failed(self, request: Request, pk: str | None = None) -> Response:
        serializer = MarkFailedSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = self._service.mark_failed(request.user, pk, serializer.validated_data["error"])
        return Response(NotificationSerializer(entry).data)

    @action(detail=True, methods=["post"])
    def retry(self, request: Request, pk: str | None = None) -> Response:
        return Response(NotificationSerializer(self._service.retry(request.user, pk)).data)
