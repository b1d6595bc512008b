"""Order DRF serializers for API output.

Request payloads are validated by the Pydantic DTOs in ``dtos.py``;
quantity range checks stay in the Service Layer.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.models import Order


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders."""

    payment_method_label = serializers.CharField(
        source="get_payment_method_display", read_only=True
    )
    user_id = serializers.UUIDField(read_only=True)
    product_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "name",
            "description",
            "address",
            "payment_method",
            "payment_method_label",
            "quantity",
            "order_date",
            "user_id",
            "product_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
