"""Audit log repository interface.

Audit rows are append-only, so the contract offers ``record`` and
read-only queries; ``save``/``delete`` of the generic repository are
not part of it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from django.db.models import QuerySet

    from modules.audit.models import AuditLog


class IAuditLogRepository(ABC):
    """Repository contract for the audit trail."""

    @abstractmethod
    def record(
        self,
        table_name: str,
        action: str,
        entity_id: str,
        old_values: Optional[Dict[str, Any]],
        new_values: Optional[Dict[str, Any]],
        correlation_id: str = "",
    ) -> AuditLog:
        """Append one audit row."""

    @abstractmethod
    def queryset(self) -> QuerySet[AuditLog]:
        """Every audit row, newest first (for FilterSet-driven listing)."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[AuditLog]:
        """Audit rows matching the look-ups, newest first."""

    @abstractmethod
    def list_between(self, start: datetime, end: datetime) -> List[AuditLog]:
        """Audit rows with ``start <= changed_at <= end``, newest first."""
