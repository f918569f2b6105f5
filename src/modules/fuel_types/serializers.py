from rest_framework import serializers

from modules.fuel_types.models import FuelType


class FuelTypeWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=60)
    order = serializers.IntegerField(required=False, min_value=0, allow_null=True)
    is_active = serializers.BooleanField(required=False)


class FuelTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = FuelType
        fields = ["id", "name", "order", "is_active"]
        read_only_fields = fields
