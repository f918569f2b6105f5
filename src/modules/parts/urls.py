"""Parts catalog URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.parts.views import PartViewSet

router = DefaultRouter(trailing_slash=True)
router.register("parts", PartViewSet, basename="part")

urlpatterns = router.urls
