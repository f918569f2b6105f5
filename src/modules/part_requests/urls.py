"""Part-request URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.part_requests.views import PartRequestViewSet

router = DefaultRouter(trailing_slash=True)
router.register("part-requests", PartRequestViewSet, basename="part-request")

urlpatterns = router.urls
