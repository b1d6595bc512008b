"""Audit log DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.audit.models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    """Read serializer for audit rows."""

    class Meta:
        model = AuditLog
        fields = [
            "id",
            "table_name",
            "action",
            "entity_id",
            "old_values",
            "new_values",
            "changed_at",
            "correlation_id",
        ]
        read_only_fields = fields


class DateRangeQuerySerializer(serializers.Serializer):
    """Parses ``?start_date=&end_date=`` (ISO 8601 datetimes)."""

    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()
