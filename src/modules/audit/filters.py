import django_filters

from modules.audit.constants import AuditAction
from modules.audit.models import AuditLog


class AuditLogFilter(django_filters.FilterSet):
    table_name = django_filters.CharFilter(field_name="table_name", lookup_expr="iexact")
    action = django_filters.ChoiceFilter(choices=AuditAction.choices)
    entity_id = django_filters.CharFilter(field_name="entity_id")
    correlation_id = django_filters.CharFilter(field_name="correlation_id")
    changed_after = django_filters.IsoDateTimeFilter(
        field_name="changed_at", lookup_expr="gte"
    )
    changed_before = django_filters.IsoDateTimeFilter(
        field_name="changed_at", lookup_expr="lte"
    )

    class Meta:
        model = AuditLog
        fields = [
            "table_name",
            "action",
            "entity_id",
            "correlation_id",
            "changed_after",
            "changed_before",
        ]
