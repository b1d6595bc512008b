from io import StringIO

import pytest
from django.core.management import call_command

from modules.orders.models import Order
from modules.products.models import Product
from modules.users.models import User

pytestmark = pytest.mark.unit


def _seed(**options) -> str:
    out = StringIO()
    call_command("seed_data", stdout=out, **options)
    return out.getvalue()


def test_seeds_users_products_and_orders():
    output = _seed(orders=5)

    assert User.objects.count() == 5
    assert Product.objects.count() == 8
    assert Order.objects.count() == 5
    assert "Seed completed" in output


def test_orders_reserve_stock():
    _seed(orders=0)
    stock_before = sum(Product.objects.values_list("stock", flat=True))

    _seed(orders=4)

    ordered = sum(Order.objects.values_list("quantity", flat=True))
    stock_after = sum(Product.objects.values_list("stock", flat=True))
    assert stock_before - stock_after == ordered


def test_is_idempotent():
    _seed(orders=3)
    output = _seed(orders=3)

    assert User.objects.count() == 5
    assert Order.objects.count() == 3
    assert "Skipping orders" in output
