from rest_framework import serializers

from modules.audit.models import Event


class EventSerializer(serializers.ModelSerializer):
    actor_id = serializers.UUIDField(read_only=True)
    actor_name = serializers.CharField(source="actor.display_name", read_only=True)
    timestamp = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Event
        fields = [
            "id",
            "type",
            "entity_type",
            "entity_id",
            "payload",
            "actor_id",
            "actor_name",
            "timestamp",
        ]
        read_only_fields = fields
