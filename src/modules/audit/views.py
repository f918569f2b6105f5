"""Audit log API (read-only, ADMIN)."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework.mixins import ListModelMixin
from rest_framework.viewsets import GenericViewSet

from modules.audit.filters import EventFilter
from modules.audit.models import Event
from modules.audit.repositories.django_repository import EventDjangoRepository
from modules.audit.serializers import EventSerializer
from modules.audit.services import AuditService
from modules.core.pagination import StandardResultsSetPagination


class EventViewSet(ListModelMixin, GenericViewSet):
    """GET /api/v1/events/?entity_type=&entity_id=&type="""

    serializer_class = EventSerializer
    filterset_class = EventFilter
    filter_backends = [DjangoFilterBackend]
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = AuditService(repository=EventDjangoRepository())

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Event.objects.none()
        return self._service.list_events(self.request.user)
