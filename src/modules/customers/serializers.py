"""Customer DRF serializers for API input/output.

Output shaping is explicit per role: staff get ``CustomerSerializer``,
clients get ``ClientCustomerSerializer`` (no internal notes, no sharing
configuration).
"""

from __future__ import annotations

from rest_framework import serializers

from modules.customers.constants import CustomerType
from modules.customers.models import Customer, CustomerDocument

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CustomerWriteSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=CustomerType.choices, required=False)
    display_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    first_name = serializers.CharField(required=False, allow_blank=True, max_length=120)
    last_name = serializers.CharField(required=False, allow_blank=True, max_length=120)
    company_name = serializers.CharField(required=False, allow_blank=True, max_length=255)
    vat_number = serializers.CharField(required=False, allow_blank=True, max_length=20)
    contact_person = serializers.CharField(required=False, allow_blank=True, max_length=255)
    phone = serializers.CharField(required=False, allow_blank=True, max_length=30)
    email = serializers.EmailField(required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class CustomerSharingSerializer(serializers.Serializer):
    user_ids = serializers.ListField(child=serializers.UUIDField(), required=False, default=list)
    can_view_vehicles = serializers.BooleanField(required=False, default=False)
    can_view_parts = serializers.BooleanField(required=False, default=False)
    can_view_documents = serializers.BooleanField(required=False, default=False)


class DocumentUploadSerializer(serializers.Serializer):
    file = serializers.FileField()


# ---------------------------------------------------------------------------
# Output Serializers
# ---------------------------------------------------------------------------


class CustomerDocumentSerializer(serializers.ModelSerializer):
    uploaded_at = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = CustomerDocument
        fields = ["id", "file_id", "file_name", "file_type", "uploaded_at"]
        read_only_fields = fields


class ClientCustomerSerializer(serializers.ModelSerializer):
    """What a client user sees of its own customer record."""

    vehicle_count = serializers.SerializerMethodField()

    class Meta:
        model = Customer
        fields = [
            "id",
            "type",
            "display_name",
            "first_name",
            "last_name",
            "company_name",
            "vat_number",
            "contact_person",
            "phone",
            "email",
            "address",
            "vehicle_count",
            "created_at",
        ]
        read_only_fields = fields

    def get_vehicle_count(self, obj: Customer) -> int:
        count = getattr(obj, "vehicle_count", None)
        return count if count is not None else obj.vehicles.count()


class CustomerSerializer(ClientCustomerSerializer):
    """Full staff view, including notes and sharing configuration."""

    sharing = serializers.SerializerMethodField()

    class Meta(ClientCustomerSerializer.Meta):
        fields = ClientCustomerSerializer.Meta.fields + ["notes", "sharing", "updated_at"]
        read_only_fields = fields

    def get_sharing(self, obj: Customer) -> dict:
        return {
            "user_ids": [str(user.id) for user in obj.shared_with.all()],
            "can_view_vehicles": obj.can_view_vehicles,
            "can_view_parts": obj.can_view_parts,
            "can_view_documents": obj.can_view_documents,
        }


class CustomerDetailSerializer(CustomerSerializer):
    documents = CustomerDocumentSerializer(many=True, read_only=True)

    class Meta(CustomerSerializer.Meta):
        fields = CustomerSerializer.Meta.fields + ["documents"]
        read_only_fields = fields


class ClientCustomerDetailSerializer(ClientCustomerSerializer):
    documents = serializers.SerializerMethodField()

    class Meta(ClientCustomerSerializer.Meta):
        fields = ClientCustomerSerializer.Meta.fields + ["documents"]
        read_only_fields = fields

    def get_documents(self, obj: Customer) -> list:
        if not obj.can_view_documents:
            return []
        return CustomerDocumentSerializer(obj.documents.all(), many=True).data
