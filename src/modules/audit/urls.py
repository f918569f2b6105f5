"""Audit URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.audit.views import EventViewSet

router = DefaultRouter(trailing_slash=True)
router.register("events", EventViewSet, basename="event")

urlpatterns = router.urls
