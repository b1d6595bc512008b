"""Tasks assíncronas de notificação de pedidos.

Each task receives the JSON order snapshot carried by the domain event
and reloads the user and product it references.
"""

from __future__ import annotations

from smtplib import SMTPException
from typing import Any, Dict, Optional

import structlog
from celery import shared_task
from django.utils.dateparse import parse_datetime

from modules.notifications.dtos import OrderNotificationContext
from modules.notifications.services import EmailService
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.users.repositories.django_repository import UserDjangoRepository

logger = structlog.get_logger(__name__)

RETRY_DELAY_SECONDS = 30


def _build_context(
    order: Dict[str, Any], cancellation_date: Optional[str] = None
) -> Optional[OrderNotificationContext]:
    user = UserDjangoRepository().get_by_id(order["user_id"])
    product = ProductDjangoRepository().get_by_id(order["product_id"])
    if not user or not product:
        logger.warning(
            "notification.skipped",
            order_id=order.get("id"),
            user_found=bool(user),
            product_found=bool(product),
        )
        return None
    return OrderNotificationContext.from_order_snapshot(
        order,
        user,
        product,
        cancellation_date=(
            parse_datetime(cancellation_date) if cancellation_date else None
        ),
    )


@shared_task(
    bind=True,
    name="notifications.send_order_confirmation",
    max_retries=3,
)
def send_order_confirmation(self, order: Dict[str, Any]) -> bool:
    """Envia o e-mail de confirmação de um pedido recém-criado."""
    context = _build_context(order)
    if context is None:
        return False
    try:
        EmailService().send_order_confirmation(context)
    except (SMTPException, OSError) as exc:
        logger.warning("notification.retry", order_id=order["id"], error=str(exc))
        raise self.retry(exc=exc, countdown=RETRY_DELAY_SECONDS)
    return True


@shared_task(
    bind=True,
    name="notifications.send_order_cancellation",
    max_retries=3,
)
def send_order_cancellation(
    self, order: Dict[str, Any], cancelled_at: Optional[str] = None
) -> bool:
    """Envia o e-mail de cancelamento de um pedido removido."""
    context = _build_context(order, cancellation_date=cancelled_at)
    if context is None:
        return False
    try:
        EmailService().send_order_cancellation(context)
    except (SMTPException, OSError) as exc:
        logger.warning("notification.retry", order_id=order["id"], error=str(exc))
        raise self.retry(exc=exc, countdown=RETRY_DELAY_SECONDS)
    return True
