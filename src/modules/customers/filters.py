import django_filters

from modules.customers.constants import CustomerType
from modules.customers.models import Customer


class CustomerFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(field_name="display_name", lookup_expr="icontains")
    type = django_filters.ChoiceFilter(choices=CustomerType.choices)

    class Meta:
        model = Customer
        fields = ["search", "type"]
