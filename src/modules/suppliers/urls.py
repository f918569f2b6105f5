"""Supplier URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.suppliers.views import SupplierViewSet

router = DefaultRouter(trailing_slash=True)
router.register("suppliers", SupplierViewSet, basename="supplier")

urlpatterns = router.urls
