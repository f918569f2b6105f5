"""Account DRF serializers (request validation only; responses use DTOs)."""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.constants import Role


class SignInSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)


class SignUpSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, trim_whitespace=False)
    name = serializers.CharField(required=False, default="", allow_blank=True)
    role = serializers.ChoiceField(choices=Role.choices, required=False, default=Role.BENZINE)


class SetRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(choices=Role.choices)
    customer_id = serializers.UUIDField(required=False, allow_null=True, default=None)
    privileges = serializers.DictField(
        child=serializers.BooleanField(), required=False, allow_null=True, default=None
    )


class LinkCustomerSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField()
