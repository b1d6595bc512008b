"""OrderService ordering guarantees, with every collaborator mocked.

Validation must precede any lock or write, and a database lock failure
must surface as ``OrderConflict``.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from django.db import OperationalError

from modules.orders.constants import PaymentMethod
from modules.orders.dtos import CreateOrderDTO, PatchOrderDTO
from modules.orders.exceptions import (
    InvalidQuantity,
    OrderConflict,
    OrderNotFound,
    UserNotFound,
)
from modules.orders.services import OrderService

pytestmark = pytest.mark.unit


@pytest.fixture()
def repos():
    return SimpleNamespace(order=MagicMock(), user=MagicMock(), product=MagicMock())


@pytest.fixture()
def service(repos):
    return OrderService(
        order_repository=repos.order,
        user_repository=repos.user,
        product_repository=repos.product,
    )


def _create_dto(quantity: int = 1) -> CreateOrderDTO:
    return CreateOrderDTO(
        name="Pedido",
        address="Rua A, 1",
        payment_method=PaymentMethod.COUPON,
        quantity=quantity,
        user_id=uuid4(),
        product_id=uuid4(),
    )


def test_invalid_quantity_is_rejected_before_any_lookup(service, repos):
    with pytest.raises(InvalidQuantity):
        service.create_order(_create_dto(quantity=0))

    repos.user.get_by_id.assert_not_called()
    repos.product.get_for_update.assert_not_called()
    repos.order.save.assert_not_called()


def test_missing_user_is_rejected_before_locking_product(service, repos):
    repos.user.get_by_id.return_value = None

    with pytest.raises(UserNotFound):
        service.create_order(_create_dto())

    repos.product.get_for_update.assert_not_called()


def test_lock_failure_becomes_conflict(service, repos):
    repos.user.get_by_id.return_value = SimpleNamespace(id=uuid4())
    repos.product.get_for_update.side_effect = OperationalError(
        "Lock wait timeout exceeded"
    )

    with pytest.raises(OrderConflict) as exc_info:
        service.create_order(_create_dto())

    assert isinstance(exc_info.value.__cause__, OperationalError)
    repos.order.save.assert_not_called()


def test_patch_locks_order_before_product(service, repos):
    calls = []
    order = SimpleNamespace(
        id=uuid4(), user_id=uuid4(), product_id=uuid4(), quantity=2, name="Pedido"
    )
    repos.order.get_for_update.side_effect = lambda _id: calls.append("order") or order
    repos.user.get_by_id.return_value = SimpleNamespace(id=order.user_id)
    repos.product.get_for_update.side_effect = (
        lambda _id: calls.append("product") or SimpleNamespace(id=_id, stock=5)
    )

    service.patch_order(order.id, PatchOrderDTO())

    assert calls == ["order", "product"]
    repos.order.save.assert_not_called()


def test_patch_of_missing_order(service, repos):
    repos.order.get_for_update.return_value = None

    with pytest.raises(OrderNotFound):
        service.patch_order(uuid4(), PatchOrderDTO(quantity=3))

    repos.product.get_for_update.assert_not_called()
