"""E-mail delivery for order notifications.

Messages are rendered from Django templates (plain text body plus an
HTML alternative) and sent through the configured ``EMAIL_BACKEND``.
Delivery errors propagate to the caller (the Celery task), which owns
the retry policy.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string

from modules.notifications.dtos import OrderNotificationContext

logger = structlog.get_logger(__name__)


class EmailService:
    """Renders and sends transactional e-mails."""

    def __init__(self, from_email: Optional[str] = None) -> None:
        self._from_email = from_email or settings.DEFAULT_FROM_EMAIL

    def send(
        self, to: str, subject: str, template: str, context: Dict[str, Any]
    ) -> None:
        """Send ``notifications/<template>.txt`` with its ``.html`` alternative."""
        text_body = render_to_string(f"notifications/{template}.txt", context)
        html_body = render_to_string(f"notifications/{template}.html", context)

        message = EmailMultiAlternatives(
            subject=subject,
            body=text_body,
            from_email=self._from_email,
            to=[to],
        )
        message.attach_alternative(html_body, "text/html")
        message.send()
        logger.info("email.sent", to=to, template=template)

    def send_order_confirmation(self, context: OrderNotificationContext) -> None:
        self.send(
            to=context.customer_email,
            subject=f"Confirmação do pedido #{context.order_id}",
            template="order_confirmation",
            context=context.model_dump(),
        )

    def send_order_cancellation(self, context: OrderNotificationContext) -> None:
        self.send(
            to=context.customer_email,
            subject=f"Cancelamento do pedido #{context.order_id}",
            template="order_cancellation",
            context=context.model_dump(),
        )
