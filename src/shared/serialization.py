"""JSON-safe snapshots of model instances.

Used by the audit recorder (before/after field maps) and by domain
events, which must outlive the row they describe.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, Optional
from uuid import UUID


def normalize_for_json(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [normalize_for_json(item) for item in value]
    if isinstance(value, dict):
        return {key: normalize_for_json(val) for key, val in value.items()}
    return value


def snapshot_instance(
    instance: Any, exclude: Optional[Iterable[str]] = None
) -> Dict[str, Any]:
    """Return ``{attname: value}`` for every concrete field of *instance*.

    Foreign keys are captured by their column (``user_id``), never by
    following the relation, so taking a snapshot issues no queries.
    """
    skipped = set(exclude or ())
    return {
        field.attname: normalize_for_json(_field_value(instance, field))
        for field in instance._meta.concrete_fields
        if field.attname not in skipped
    }


def _field_value(instance: Any, field: Any) -> Any:
    value = getattr(instance, field.attname)
    places = getattr(field, "decimal_places", None)
    if isinstance(value, Decimal) and places is not None:
        # "10" and "10.00" are the same price once persisted
        return value.quantize(Decimal(1).scaleb(-places))
    return value


def diff_snapshots(
    before: Dict[str, Any], after: Dict[str, Any]
) -> tuple[Dict[str, Any], Dict[str, Any]]:
    """Return ``(old_values, new_values)`` restricted to the changed keys."""
    changed = [key for key in after if before.get(key) != after[key]]
    return (
        {key: before.get(key) for key in changed},
        {key: after[key] for key in changed},
    )
