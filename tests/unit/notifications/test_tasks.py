from __future__ import annotations

from uuid import uuid4

import pytest
from django.core import mail

from modules.notifications.tasks import send_order_cancellation, send_order_confirmation

pytestmark = pytest.mark.unit


def _snapshot(user_id, product_id) -> dict:
    return {
        "id": str(uuid4()),
        "name": "Pedido",
        "description": "",
        "address": "Rua A, 1",
        "payment_method": "DEBIT",
        "quantity": 1,
        "order_date": "2026-05-05T10:00:00+00:00",
        "user_id": str(user_id),
        "product_id": str(product_id),
    }


def test_confirmation_task_sends_mail(user, product):
    assert send_order_confirmation(_snapshot(user.id, product.id)) is True
    assert len(mail.outbox) == 1


def test_cancellation_task_sends_mail(user, product):
    sent = send_order_cancellation(
        _snapshot(user.id, product.id), "2026-05-06T08:00:00+00:00"
    )
    assert sent is True
    assert mail.outbox[0].subject.startswith("Cancelamento do pedido")


def test_missing_user_skips_notification(product):
    assert send_order_confirmation(_snapshot(uuid4(), product.id)) is False
    assert mail.outbox == []


def test_missing_product_skips_notification(user):
    assert send_order_cancellation(_snapshot(user.id, uuid4())) is False
    assert mail.outbox == []
