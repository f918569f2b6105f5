"""Part DRF serializers.

``ClientPartSerializer`` is the client-facing shape: cost, supplier and
warehouse fields are omitted.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.parts.models import Part


class PartWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    sku = serializers.CharField(required=False, allow_blank=True, max_length=64)
    oem_code = serializers.CharField(required=False, allow_blank=True, max_length=64)
    supplier_id = serializers.UUIDField(required=False, allow_null=True)
    unit_cost = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    part_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    labor_price = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    stock_qty = serializers.IntegerField(required=False, min_value=0)
    min_stock_qty = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    location = serializers.CharField(required=False, allow_blank=True, max_length=120)
    notes = serializers.CharField(required=False, allow_blank=True)
    vehicle_id = serializers.UUIDField(required=False, allow_null=True)


class AdjustStockSerializer(serializers.Serializer):
    delta = serializers.IntegerField()
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class PartSerializer(serializers.ModelSerializer):
    supplier_id = serializers.UUIDField(read_only=True)
    supplier_name = serializers.CharField(read_only=True)
    vehicle_id = serializers.UUIDField(read_only=True)
    is_low_stock = serializers.BooleanField(read_only=True)

    class Meta:
        model = Part
        fields = [
            "id",
            "name",
            "sku",
            "oem_code",
            "supplier_id",
            "supplier_name",
            "unit_cost",
            "unit_price",
            "part_price",
            "labor_price",
            "stock_qty",
            "min_stock_qty",
            "is_low_stock",
            "location",
            "notes",
            "vehicle_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ClientPartSerializer(serializers.ModelSerializer):
    vehicle_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Part
        fields = ["id", "name", "sku", "oem_code", "unit_price", "part_price", "labor_price", "vehicle_id"]
        read_only_fields = fields
