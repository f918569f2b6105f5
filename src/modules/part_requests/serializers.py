"""Part-request DRF serializers (input only).

Responses are rendered by ``PartRequestPresenter``; these serializers
validate request shape at the API edge before the DTOs apply the item rules.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.part_requests.constants import PartRequestStatus


class RequestedItemSerializer(serializers.Serializer):
    part_id = serializers.UUIDField(required=False, allow_null=True)
    free_text_name = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=255
    )
    quantity = serializers.IntegerField()
    unit_price_snapshot = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True
    )
    unit_cost_snapshot = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True
    )


class CreatePartRequestSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField()
    vehicle_id = serializers.UUIDField()
    items = RequestedItemSerializer(many=True)
    supplier = serializers.CharField(required=False, allow_blank=True, default="", max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class UpdatePartRequestSerializer(serializers.Serializer):
    items = RequestedItemSerializer(many=True, required=False)
    supplier = serializers.CharField(required=False, allow_blank=True, max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True)


class SetStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=PartRequestStatus.choices)
