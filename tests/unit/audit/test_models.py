from __future__ import annotations

import pytest

from modules.audit.constants import AuditAction
from modules.audit.exceptions import AuditLogImmutable
from modules.audit.models import AuditLog

pytestmark = pytest.mark.unit


@pytest.fixture()
def entry():
    return AuditLog.objects.create(
        table_name="products",
        action=AuditAction.ADDED,
        entity_id="abc",
        new_values={"name": "Caneta"},
    )


def test_rows_cannot_be_updated(entry):
    entry.table_name = "users"
    with pytest.raises(AuditLogImmutable):
        entry.save()


def test_rows_cannot_be_deleted(entry):
    with pytest.raises(AuditLogImmutable):
        entry.delete()


def test_bulk_operations_are_rejected(entry):
    with pytest.raises(AuditLogImmutable):
        AuditLog.objects.filter(id=entry.id).update(table_name="users")
    with pytest.raises(AuditLogImmutable):
        AuditLog.objects.all().delete()


def test_str(entry):
    assert str(entry) == "Added products:abc"
