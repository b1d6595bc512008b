"""Django ORM implementation of the audit log repository."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from django.db.models import QuerySet

from modules.audit.models import AuditLog
from modules.audit.repositories.interfaces import IAuditLogRepository


class AuditLogDjangoRepository(IAuditLogRepository):
    """Concrete audit log repository backed by Django ORM."""

    def record(
        self,
        table_name: str,
        action: str,
        entity_id: str,
        old_values: Optional[Dict[str, Any]],
        new_values: Optional[Dict[str, Any]],
        correlation_id: str = "",
    ) -> AuditLog:
        return AuditLog.objects.create(
            table_name=table_name,
            action=action,
            entity_id=entity_id,
            old_values=old_values,
            new_values=new_values,
            correlation_id=correlation_id,
        )

    def queryset(self) -> QuerySet[AuditLog]:
        return AuditLog.objects.order_by("-changed_at", "-id")

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[AuditLog]:
        queryset = self.queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_between(self, start: datetime, end: datetime) -> List[AuditLog]:
        return list(self.queryset().filter(changed_at__gte=start, changed_at__lte=end))
