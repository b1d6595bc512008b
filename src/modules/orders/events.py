"""Domain events for the Orders bounded context.

Each event carries the order snapshot in ``payload`` (see
``shared.serialization.snapshot_instance``).
"""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderPlaced(DomainEvent):
    """Raised when an order is created and its stock reserved."""


@dataclass(frozen=True)
class OrderUpdated(DomainEvent):
    """Raised when an order is updated or patched."""


@dataclass(frozen=True)
class OrderDeleted(DomainEvent):
    """Raised when an order is deleted and its stock released."""
