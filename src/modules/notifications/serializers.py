from __future__ import annotations

from rest_framework import serializers

from modules.notifications.models import NotificationOutbox


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = NotificationOutbox
        fields = [
            "id",
            "channel",
            "recipient",
            "template_key",
            "data",
            "status",
            "retry_count",
            "last_error",
            "sent_at",
            "created_at",
        ]
        read_only_fields = fields


class MarkFailedSerializer(serializers.Serializer):
    error = serializers.CharField()


class PendingQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=500, required=False)
