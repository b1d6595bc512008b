from decimal import Decimal

import pytest

from rest_framework.test import APIClient

from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.users.models import User
from modules.users.repositories.django_repository import UserDjangoRepository


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def user():
    return User.objects.create(
        name="Maria",
        last_name="Silva",
        email="maria.silva@example.com",
        age=34,
        address="Rua Augusta, 500 - São Paulo/SP",
    )


@pytest.fixture()
def product():
    return Product.objects.create(
        name="Notebook 14\"",
        description="Notebook leve para trabalho",
        price=Decimal("3999.00"),
        stock=10,
    )


@pytest.fixture()
def order_service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        user_repository=UserDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )
