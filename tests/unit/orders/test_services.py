"""Unit tests for OrderService against the test database.

Covers:
- Stock reservation on create, re-sync on update/patch, release on delete.
- Quantity validation before any write.
- Not-found handling for order, user and product.
- Empty patches are no-ops.
- ``order_date`` is set once, at creation.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

import pytest
from freezegun import freeze_time

from modules.orders.constants import PaymentMethod
from modules.orders.dtos import CreateOrderDTO, PatchOrderDTO, UpdateOrderDTO
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidQuantity,
    OrderNotFound,
    ProductNotFound,
    UserNotFound,
)
from modules.orders.models import Order
from modules.products.models import Product

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _create_dto(user, product, quantity=5, **overrides) -> CreateOrderDTO:
    data = {
        "name": "Pedido de teste",
        "description": "Entrega em horário comercial",
        "address": "Rua Augusta, 500",
        "payment_method": PaymentMethod.CREDIT,
        "quantity": quantity,
        "user_id": user.id,
        "product_id": product.id,
    }
    data.update(overrides)
    return CreateOrderDTO(**data)


def _update_dto(quantity: int, **overrides) -> UpdateOrderDTO:
    data = {
        "name": "Pedido atualizado",
        "description": "Nova descrição",
        "address": "Av. Paulista, 1000",
        "payment_method": PaymentMethod.DEBIT,
        "quantity": quantity,
    }
    data.update(overrides)
    return UpdateOrderDTO(**data)


def _stock(product: Product) -> int:
    product.refresh_from_db()
    return product.stock


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class TestCreateOrder:
    def test_reserves_stock(self, order_service, user, product):
        """Stock 10, order 5: succeeds and leaves 5."""
        order = order_service.create_order(_create_dto(user, product, quantity=5))

        assert order.id is not None
        assert order.quantity == 5
        assert _stock(product) == 5
        assert Order.objects.filter(id=order.id).exists()

    def test_insufficient_stock_leaves_stock_untouched(self, order_service, user):
        """Stock 3, order 5: fails and stock stays 3."""
        product = Product.objects.create(
            name="Headset", price=Decimal("299.90"), stock=3
        )

        with pytest.raises(InsufficientStock):
            order_service.create_order(_create_dto(user, product, quantity=5))

        assert _stock(product) == 3
        assert Order.objects.count() == 0

    def test_exact_stock_can_be_ordered(self, order_service, user, product):
        order_service.create_order(_create_dto(user, product, quantity=10))
        assert _stock(product) == 0

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_rejects_quantity_below_one(self, order_service, user, product, quantity):
        with pytest.raises(InvalidQuantity):
            order_service.create_order(_create_dto(user, product, quantity=quantity))

        assert _stock(product) == 10
        assert Order.objects.count() == 0

    def test_unknown_user(self, order_service, product):
        with pytest.raises(UserNotFound):
            order_service.create_order(_create_dto(SimpleNamespace(id=uuid4()), product))

        assert _stock(product) == 10

    def test_unknown_product(self, order_service, user):
        with pytest.raises(ProductNotFound):
            order_service.create_order(_create_dto(user, SimpleNamespace(id=uuid4())))

        assert Order.objects.count() == 0

    @freeze_time("2026-03-01 12:30:00")
    def test_order_date_is_creation_time_in_utc(self, order_service, user, product):
        order = order_service.create_order(_create_dto(user, product))
        order.refresh_from_db()

        assert order.order_date == datetime(2026, 3, 1, 12, 30, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Update (PUT)
# ---------------------------------------------------------------------------


class TestUpdateOrder:
    @pytest.fixture()
    def order(self, order_service, user, product):
        return order_service.create_order(_create_dto(user, product, quantity=5))

    def test_increase_reserves_delta(self, order_service, order, product):
        """Quantity 5 -> 8 with stock 5: delta +3, stock 2."""
        updated = order_service.update_order(order.id, _update_dto(quantity=8))

        assert updated.quantity == 8
        assert _stock(product) == 2

    def test_decrease_releases_delta(self, order_service, order, product):
        """Quantity 5 -> 2 with stock 5: delta -3, stock 8."""
        order_service.update_order(order.id, _update_dto(quantity=2))
        assert _stock(product) == 8

    def test_increase_beyond_stock_fails_without_changes(
        self, order_service, order, product
    ):
        with pytest.raises(InsufficientStock):
            order_service.update_order(order.id, _update_dto(quantity=11))

        order.refresh_from_db()
        assert order.quantity == 5
        assert order.name == "Pedido de teste"
        assert _stock(product) == 5

    def test_replaces_every_mutable_field(self, order_service, order):
        order_service.update_order(order.id, _update_dto(quantity=5))
        order.refresh_from_db()

        assert order.name == "Pedido atualizado"
        assert order.description == "Nova descrição"
        assert order.address == "Av. Paulista, 1000"
        assert order.payment_method == PaymentMethod.DEBIT

    def test_order_date_never_changes(self, order_service, order):
        original = Order.objects.get(id=order.id).order_date
        with freeze_time("2030-01-01"):
            order_service.update_order(order.id, _update_dto(quantity=6))

        assert Order.objects.get(id=order.id).order_date == original

    def test_rejects_quantity_below_one(self, order_service, order, product):
        with pytest.raises(InvalidQuantity):
            order_service.update_order(order.id, _update_dto(quantity=0))
        assert _stock(product) == 5

    def test_unknown_order(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.update_order(uuid4(), _update_dto(quantity=1))


# ---------------------------------------------------------------------------
# Patch
# ---------------------------------------------------------------------------


class TestPatchOrder:
    @pytest.fixture()
    def order(self, order_service, user, product):
        return order_service.create_order(_create_dto(user, product, quantity=5))

    def test_empty_patch_changes_nothing(self, order_service, order, product):
        before = Order.objects.get(id=order.id)

        order_service.patch_order(order.id, PatchOrderDTO())

        after = Order.objects.get(id=order.id)
        assert after.updated_at == before.updated_at
        assert after.quantity == 5
        assert _stock(product) == 5

    def test_only_supplied_fields_change(self, order_service, order, product):
        order_service.patch_order(order.id, PatchOrderDTO(address="Rua Nova, 1"))
        order.refresh_from_db()

        assert order.address == "Rua Nova, 1"
        assert order.name == "Pedido de teste"
        assert order.payment_method == PaymentMethod.CREDIT
        assert _stock(product) == 5

    def test_quantity_patch_resyncs_stock(self, order_service, order, product):
        order_service.patch_order(order.id, PatchOrderDTO(quantity=7))
        assert _stock(product) == 3

        order_service.patch_order(order.id, PatchOrderDTO(quantity=1))
        assert _stock(product) == 9

    def test_quantity_validated_only_when_supplied(self, order_service, order):
        with pytest.raises(InvalidQuantity):
            order_service.patch_order(order.id, PatchOrderDTO(quantity=0))

        # no quantity: nothing to validate
        order_service.patch_order(order.id, PatchOrderDTO(name="Outro nome"))
        order.refresh_from_db()
        assert order.name == "Outro nome"

    def test_quantity_patch_beyond_stock(self, order_service, order, product):
        with pytest.raises(InsufficientStock):
            order_service.patch_order(order.id, PatchOrderDTO(quantity=20))
        assert _stock(product) == 5


# ---------------------------------------------------------------------------
# Delete / Read
# ---------------------------------------------------------------------------


class TestDeleteOrder:
    def test_releases_stock_and_removes_order(self, order_service, user, product):
        """Stock 5 after an order of 5: deleting restores 10."""
        order = order_service.create_order(_create_dto(user, product, quantity=5))

        assert order_service.delete_order(order.id) is True

        assert _stock(product) == 10
        with pytest.raises(OrderNotFound):
            order_service.get_order(order.id)

    def test_round_trip_restores_stock(self, order_service, user, product):
        order = order_service.create_order(_create_dto(user, product, quantity=3))
        order_service.patch_order(order.id, PatchOrderDTO(quantity=6))
        order_service.delete_order(order.id)

        assert _stock(product) == 10

    def test_unknown_order(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.delete_order(uuid4())


class TestQueries:
    def test_get_order(self, order_service, user, product):
        order = order_service.create_order(_create_dto(user, product))
        assert order_service.get_order(order.id).id == order.id

    def test_get_order_with_invalid_id(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.get_order("not-a-uuid")

    def test_list_orders(self, order_service, user, product):
        order_service.create_order(_create_dto(user, product, quantity=1))
        order_service.create_order(_create_dto(user, product, quantity=2))

        assert len(order_service.list_orders()) == 2
        assert len(order_service.list_orders({"quantity": 2})) == 1
