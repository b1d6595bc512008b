"""User DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.users.models import User


class UserSerializer(serializers.ModelSerializer):
    """Read serializer for the User resource."""

    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "last_name",
            "full_name",
            "email",
            "age",
            "address",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
