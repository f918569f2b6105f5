from django.urls import include, path
from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView,
)

urlpatterns = [
    path("", include("modules.core.urls")),
    # Domain modules, versioned API
    path("api/v1/", include("modules.accounts.urls")),
    path("api/v1/", include("modules.customers.urls")),
    path("api/v1/", include("modules.vehicles.urls")),
    path("api/v1/", include("modules.parts.urls")),
    path("api/v1/", include("modules.suppliers.urls")),
    path("api/v1/", include("modules.fuel_types.urls")),
    path("api/v1/", include("modules.part_requests.urls")),
    path("api/v1/", include("modules.notifications.urls")),
    path("api/v1/", include("modules.audit.urls")),
    # OpenAPI schema & docs (public)
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path(
        "api/docs/",
        SpectacularSwaggerView.as_view(url_name="schema"),
        name="swagger-ui",
    ),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
]
