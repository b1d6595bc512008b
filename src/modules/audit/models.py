"""AuditLog model.

Append-only trail of every mutation of a tracked model.  A row is
written in the same transaction as the change it describes and is never
updated or deleted afterwards: instance ``save``/``delete`` and bulk
``update``/``delete`` all raise ``AuditLogImmutable``.
"""

from __future__ import annotations

from typing import Any

import uuid6
from django.db import models
from django.utils import timezone

from modules.audit.constants import AuditAction
from modules.audit.exceptions import AuditLogImmutable


class AuditLogQuerySet(models.QuerySet):
    def update(self, **kwargs: Any) -> int:
        raise AuditLogImmutable("Audit logs cannot be updated.")

    def delete(self) -> Any:
        raise AuditLogImmutable("Audit logs cannot be deleted.")


class AuditLog(models.Model):
    """One before/after field map for an Added, Modified or Deleted row."""

    id = models.UUIDField(primary_key=True, default=uuid6.uuid7, editable=False)
    table_name: models.CharField = models.CharField(max_length=100)
    action: models.CharField = models.CharField(
        max_length=10, choices=AuditAction.choices
    )
    entity_id: models.CharField = models.CharField(max_length=64)
    old_values: models.JSONField = models.JSONField(null=True, blank=True)
    new_values: models.JSONField = models.JSONField(null=True, blank=True)
    changed_at: models.DateTimeField = models.DateTimeField(default=timezone.now)
    correlation_id: models.CharField = models.CharField(
        max_length=64, blank=True, default=""
    )

    objects = AuditLogQuerySet.as_manager()

    class Meta:
        db_table = "audit_logs"
        ordering = ["-changed_at"]
        indexes = [
            models.Index(
                fields=["table_name", "entity_id"], name="audit_table_entity_idx"
            ),
            models.Index(fields=["-changed_at"], name="audit_changed_at_idx"),
        ]

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self._state.adding:
            raise AuditLogImmutable("Audit logs cannot be updated.")
        super().save(*args, **kwargs)

    def delete(self, *args: Any, **kwargs: Any) -> Any:
        raise AuditLogImmutable("Audit logs cannot be deleted.")

    def __str__(self) -> str:
        return f"{self.action} {self.table_name}:{self.entity_id}"
