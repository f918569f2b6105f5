import django_filters

from modules.part_requests.constants import PartRequestStatus
from modules.part_requests.models import PartRequest


class PartRequestFilter(django_filters.FilterSet):
    """Query filters applied after the service has scoped the queryset."""

    status = django_filters.ChoiceFilter(choices=PartRequestStatus.choices)
    customer = django_filters.UUIDFilter(method="filter_customer")
    vehicle = django_filters.UUIDFilter(field_name="vehicle_id")
    search = django_filters.CharFilter(method="filter_search")
    created_after = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_before = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = PartRequest
        fields = ["status", "customer", "vehicle", "search", "created_after", "created_before"]

    def filter_customer(self, queryset, name, value):
        # Clients are already pinned to their own customer.
        user = getattr(self.request, "user", None)
        if user is not None and user.is_client:
            return queryset
        return queryset.filter(customer_id=value)

    def filter_search(self, queryset, name, value):
        return queryset.search(value.strip()) if value.strip() else queryset
