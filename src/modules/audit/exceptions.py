"""Audit domain exceptions."""

from __future__ import annotations


class AuditLogImmutable(Exception):
    """Audit rows are append-only: they cannot be changed or deleted."""


class InvalidDateRange(Exception):
    """The start of a date range is after its end."""
