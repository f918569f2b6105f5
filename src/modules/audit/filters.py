import django_filters

from modules.audit.constants import EntityType
from modules.audit.models import Event


class EventFilter(django_filters.FilterSet):
    type = django_filters.CharFilter(field_name="type", lookup_expr="iexact")
    entity_type = django_filters.ChoiceFilter(choices=EntityType.choices)
    entity_id = django_filters.CharFilter(field_name="entity_id")
    actor = django_filters.UUIDFilter(field_name="actor_id")
    created_after = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")
    created_before = django_filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="lte")

    class Meta:
        model = Event
        fields = ["type", "entity_type", "entity_id", "actor"]
