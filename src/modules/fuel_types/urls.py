"""Fuel type URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.fuel_types.views import FuelTypeViewSet

router = DefaultRouter(trailing_slash=True)
router.register("fuel-types", FuelTypeViewSet, basename="fuel-type")

urlpatterns = router.urls
