from __future__ import annotations

from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.orders.constants import PaymentMethod
from modules.orders.dtos import CreateOrderDTO, PatchOrderDTO, UpdateOrderDTO

pytestmark = pytest.mark.unit


class TestCreateOrderDTO:
    def test_valid_payload(self):
        dto = CreateOrderDTO(
            name="Pedido",
            address="Rua A, 1",
            payment_method="ON_ARRIVAL",
            quantity=2,
            user_id=str(uuid4()),
            product_id=str(uuid4()),
        )
        assert dto.payment_method is PaymentMethod.ON_ARRIVAL
        assert dto.description == ""

    def test_unknown_payment_method(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO(
                name="Pedido",
                address="Rua A, 1",
                payment_method="PIX",
                quantity=2,
                user_id=uuid4(),
                product_id=uuid4(),
            )

    def test_quantity_range_is_left_to_the_service(self):
        dto = CreateOrderDTO(
            name="Pedido",
            address="Rua A, 1",
            payment_method="DEBIT",
            quantity=0,
            user_id=uuid4(),
            product_id=uuid4(),
        )
        assert dto.quantity == 0

    def test_is_frozen(self):
        dto = CreateOrderDTO(
            name="Pedido",
            address="Rua A, 1",
            payment_method="DEBIT",
            quantity=1,
            user_id=uuid4(),
            product_id=uuid4(),
        )
        with pytest.raises(ValidationError):
            dto.quantity = 3


class TestUpdateOrderDTO:
    def test_every_field_is_required(self):
        with pytest.raises(ValidationError) as exc_info:
            UpdateOrderDTO(name="Pedido")
        missing = {error["loc"][0] for error in exc_info.value.errors()}
        assert missing == {"description", "address", "payment_method", "quantity"}

    def test_changes_cover_every_mutable_field(self):
        dto = UpdateOrderDTO(
            name="Pedido",
            description="",
            address="Rua A, 1",
            payment_method="CREDIT",
            quantity=4,
        )
        assert set(dto.changes()) == {
            "name",
            "description",
            "address",
            "payment_method",
            "quantity",
        }


class TestPatchOrderDTO:
    def test_empty_patch_has_no_changes(self):
        assert PatchOrderDTO().changes() == {}

    def test_only_supplied_fields(self):
        assert PatchOrderDTO(quantity=3, name="Novo").changes() == {
            "quantity": 3,
            "name": "Novo",
        }
