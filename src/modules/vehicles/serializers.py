"""Vehicle DRF serializers.

Tire specs are validated by ``TiresDTO``; the serializer only checks that
``tires`` is a JSON object.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.vehicles.models import Vehicle


class VehicleWriteSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField()
    plate = serializers.CharField(max_length=20)
    make = serializers.CharField(required=False, allow_blank=True, max_length=80)
    model = serializers.CharField(required=False, allow_blank=True, max_length=80)
    year = serializers.IntegerField(required=False, allow_null=True)
    vin = serializers.CharField(required=False, allow_blank=True, max_length=17)
    fuel_type = serializers.CharField(required=False, allow_blank=True, max_length=60)
    km = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    tires = serializers.DictField(required=False, allow_null=True)


class VehicleSerializer(serializers.ModelSerializer):
    customer_id = serializers.UUIDField(read_only=True)
    customer_name = serializers.CharField(source="customer.display_name", read_only=True)
    registration_doc = serializers.SerializerMethodField()

    class Meta:
        model = Vehicle
        fields = [
            "id",
            "customer_id",
            "customer_name",
            "plate",
            "make",
            "model",
            "year",
            "vin",
            "fuel_type",
            "km",
            "tires",
            "registration_doc",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_registration_doc(self, obj: Vehicle) -> dict | None:
        if not obj.has_registration_doc:
            return None
        return {
            "file_id": obj.registration_doc_file_id,
            "file_name": obj.registration_doc_file_name,
            "file_type": obj.registration_doc_file_type,
            "uploaded_at": obj.registration_doc_uploaded_at,
        }
