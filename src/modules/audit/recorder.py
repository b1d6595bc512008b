"""Audit recorder: explicit before/after snapshots on model signals.

``pre_save`` loads the persisted row and snapshots it on the instance,
``post_save`` snapshots the instance again and writes the diff,
``post_delete`` writes the last known values.  Receivers are connected
for every model listed in ``settings.AUDIT_TRACKED_MODELS`` (see
``AuditConfig.ready``); ``AuditLog`` itself is never tracked.

Rows are written through the same connection, inside the same
transaction, as the change they describe: a rolled-back order leaves no
audit row behind.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

import structlog
from django.db import models

from modules.audit.constants import IGNORED_FIELDS, AuditAction
from modules.audit.repositories.django_repository import AuditLogDjangoRepository
from modules.core.middleware import get_correlation_id
from shared.serialization import diff_snapshots, snapshot_instance

logger = structlog.get_logger(__name__)

_BEFORE_ATTR = "_audit_before"

_repository = AuditLogDjangoRepository()


def capture_previous_state(
    sender: type[models.Model], instance: models.Model, raw: bool = False, **kwargs
) -> None:
    """pre_save: remember the persisted values of an existing row."""
    if raw or instance._state.adding:
        setattr(instance, _BEFORE_ATTR, None)
        return
    previous = sender._default_manager.filter(pk=instance.pk).first()
    before = snapshot_instance(previous, IGNORED_FIELDS) if previous else None
    setattr(instance, _BEFORE_ATTR, before)


def record_save(
    sender: type[models.Model],
    instance: models.Model,
    created: bool,
    raw: bool = False,
    update_fields: Optional[Iterable[str]] = None,
    **kwargs,
) -> None:
    """post_save: write an Added row, or a Modified row holding the diff."""
    if raw:
        return
    before = instance.__dict__.pop(_BEFORE_ATTR, None)
    after = snapshot_instance(instance, IGNORED_FIELDS)

    if created or before is None:
        _record(instance, AuditAction.ADDED, old_values=None, new_values=after)
        return

    if update_fields:
        written = _attnames(sender, update_fields)
        before = {key: val for key, val in before.items() if key in written}
        after = {key: val for key, val in after.items() if key in written}

    old_values, new_values = diff_snapshots(before, after)
    if not new_values:
        return
    _record(instance, AuditAction.MODIFIED, old_values=old_values, new_values=new_values)


def record_delete(
    sender: type[models.Model], instance: models.Model, **kwargs
) -> None:
    """post_delete: write a Deleted row holding the last known values."""
    _record(
        instance,
        AuditAction.DELETED,
        old_values=snapshot_instance(instance, IGNORED_FIELDS),
        new_values=None,
    )


def _attnames(model: type[models.Model], names: Iterable[str]) -> set[str]:
    return {model._meta.get_field(name).attname for name in names}


def _record(
    instance: models.Model,
    action: AuditAction,
    old_values: Optional[Dict[str, Any]],
    new_values: Optional[Dict[str, Any]],
) -> None:
    entry = _repository.record(
        table_name=instance._meta.db_table,
        action=action,
        entity_id=str(instance.pk),
        old_values=old_values,
        new_values=new_values,
        correlation_id=get_correlation_id(),
    )
    logger.debug(
        "audit.recorded",
        table_name=entry.table_name,
        action=entry.action,
        entity_id=entry.entity_id,
    )
