"""Order event handlers that enqueue customer notifications.

Handlers run after the order transaction committed (see the order
repository); they only enqueue Celery tasks.  A failure here is logged
by the event bus and never undoes the order.
"""

from __future__ import annotations

import structlog

from modules.notifications.tasks import send_order_cancellation, send_order_confirmation
from modules.orders.events import OrderDeleted, OrderPlaced
from shared.domain.bus import IEventBus, IEventHandler

logger = structlog.get_logger(__name__)


class OrderPlacedHandler(IEventHandler[OrderPlaced]):
    def handle(self, event: OrderPlaced) -> None:
        send_order_confirmation.delay(event.payload)
        logger.info(
            "notification.confirmation_enqueued", order_id=str(event.aggregate_id)
        )


class OrderDeletedHandler(IEventHandler[OrderDeleted]):
    def handle(self, event: OrderDeleted) -> None:
        send_order_cancellation.delay(event.payload, event.occurred_on.isoformat())
        logger.info(
            "notification.cancellation_enqueued", order_id=str(event.aggregate_id)
        )


order_placed_handler = OrderPlacedHandler()
order_deleted_handler = OrderDeletedHandler()


def register_handlers(bus: IEventBus) -> None:
    bus.subscribe(OrderPlaced, order_placed_handler)
    bus.subscribe(OrderDeleted, order_deleted_handler)
