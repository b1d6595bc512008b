"""Audit log query service.

Read-only use cases over the audit trail; rows are only ever written
by ``modules.audit.recorder``.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List

import structlog

from modules.audit.exceptions import InvalidDateRange

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.audit.models import AuditLog
    from modules.audit.repositories.interfaces import IAuditLogRepository

logger = structlog.get_logger(__name__)


class AuditLogService:
    """Application service for audit trail queries."""

    def __init__(self, repository: IAuditLogRepository) -> None:
        self._repo = repository

    def all_logs(self) -> QuerySet[AuditLog]:
        return self._repo.queryset()

    def logs_for_table(self, table_name: str) -> List[AuditLog]:
        return self._repo.list({"table_name": table_name})

    def logs_for_entity(self, table_name: str, entity_id: str) -> List[AuditLog]:
        return self._repo.list({"table_name": table_name, "entity_id": entity_id})

    def logs_between(self, start: datetime, end: datetime) -> List[AuditLog]:
        """Rows changed within ``[start, end]``.

        Raises:
            InvalidDateRange: ``start`` is after ``end``.
        """
        if start > end:
            logger.warning(
                "audit.invalid_date_range",
                start=start.isoformat(),
                end=end.isoformat(),
            )
            raise InvalidDateRange("Start date cannot be greater than end date.")
        return self._repo.list_between(start, end)
