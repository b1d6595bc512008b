"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
Domain events collected on the aggregate are handed to the event bus
with ``transaction.on_commit``: they are published only if the whole
unit of work commits, and silently dropped on rollback.
"""

from __future__ import annotations

from functools import partial
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.orders.models import Order
from modules.orders.repositories.interfaces import IOrderRepository
from shared.domain.bus import IEventBus
from shared.infrastructure.bus import event_bus as default_event_bus

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    def __init__(self, bus: Optional[IEventBus] = None) -> None:
        self._bus = bus or default_event_bus

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its user and product (single JOIN).

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return (
                Order.objects.select_related("user", "product").filter(id=id).first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Only the order row is locked: related rows are loaded separately
        so the product can be locked explicitly by the stock ledger.
        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Order.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders, newest first.

        Supported filter keys are plain Django look-ups, e.g.
        ``user_id`` or ``product_id``.
        """
        queryset = Order.objects.select_related("user", "product")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order, update_fields: Optional[List[str]] = None) -> Order:
        """Persist (create or update) an order."""
        if update_fields:
            entity.save(update_fields=update_fields)
        else:
            entity.save()
        event_count = self._publish_on_commit(entity)
        logger.info("order.saved", order_id=str(entity.id), event_count=event_count)
        return entity

    @transaction.atomic
    def remove(self, entity: Order) -> None:
        order_id = entity.id
        entity.delete()
        event_count = self._publish_on_commit(entity)
        logger.info("order.deleted", order_id=str(order_id), event_count=event_count)

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Delete an order row by ID; ``False`` when it does not exist.

        Raw persistence only: the product stock is left untouched.  Deleting
        an order as a use case (releasing its quantity) goes through
        ``OrderService.delete_order``.
        """
        order = self.get_for_update(id)
        if not order:
            return False
        self.remove(order)
        return True

    def _publish_on_commit(self, entity: Order) -> int:
        events = entity.pull_domain_events()
        for event in events:
            transaction.on_commit(partial(self._bus.publish, event), robust=True)
        return len(events)
