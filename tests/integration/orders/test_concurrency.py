"""Stock concurrency integration test.

Proves that ``SELECT FOR UPDATE`` in ``OrderService`` serializes
concurrent stock reservations.  On PostgreSQL or MySQL (``DATABASE_URL``)
blocked writers wait for the row lock; on SQLite they fail fast with
``OrderConflict``, so fewer orders may succeed but stock still adds up.

Scenarios:
- Two concurrent orders of 5 against stock = 5: exactly one succeeds.
- 10 threads buy 1 unit each from stock = 5: at most 5 succeed
  (exactly 5 with row-level locks).
- Final stock is never negative and stock is conserved.

Uses ``TransactionTestCase`` so each thread can see committed data
and row-level locking behaves realistically.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

import django
from django.db import connection
from django.test import TransactionTestCase

from modules.orders.constants import PaymentMethod
from modules.orders.dtos import CreateOrderDTO, PatchOrderDTO
from modules.orders.exceptions import InsufficientStock, OrderConflict
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.users.models import User
from modules.users.repositories.django_repository import UserDjangoRepository

logger = logging.getLogger(__name__)

INITIAL_STOCK = 5
NUM_WORKERS = 10


def _service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        user_repository=UserDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


class TestStockConcurrency(TransactionTestCase):
    """Prove atomic stock reservation under concurrent load."""

    def setUp(self):
        self.user = User.objects.create(
            name="Concurrency",
            last_name="User",
            email="concurrency@example.com",
            age=30,
            address="Rua A, 1",
        )
        self.product = Product.objects.create(
            name="Gamer PC",
            price=Decimal("2999.99"),
            stock=INITIAL_STOCK,
        )

    def _create_in_thread(self, quantity: int, barrier: threading.Barrier) -> str:
        """Attempt to create an order. Returns 'success' or 'rejected'.

        Each thread gets its own DB connection via Django's connection
        handling, ensuring realistic concurrent transactions.
        """
        try:
            barrier.wait()
            _service().create_order(
                CreateOrderDTO(
                    name="Pedido concorrente",
                    address=self.user.address,
                    payment_method=PaymentMethod.DEBIT,
                    quantity=quantity,
                    user_id=self.user.id,
                    product_id=self.product.id,
                )
            )
            return "success"
        except (InsufficientStock, OrderConflict) as exc:
            logger.warning("order rejected: %s", type(exc).__name__)
            return "rejected"
        finally:
            django.db.connections.close_all()

    def _run(self, quantities: list[int]) -> list[str]:
        barrier = threading.Barrier(len(quantities))
        with ThreadPoolExecutor(max_workers=len(quantities)) as pool:
            futures = [
                pool.submit(self._create_in_thread, quantity, barrier)
                for quantity in quantities
            ]
            return [future.result() for future in futures]

    def test_two_orders_for_the_whole_stock(self):
        """Stock 5, two orders of 5: exactly one wins."""
        results = self._run([INITIAL_STOCK, INITIAL_STOCK])

        self.assertEqual(results.count("success"), 1)
        self.assertEqual(results.count("rejected"), 1)
        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 0)
        self.assertEqual(Order.objects.count(), 1)

    def test_concurrent_orders_exhaust_stock(self):
        """10 threads buy 1 unit from stock=5: never more than the stock."""
        results = self._run([1] * NUM_WORKERS)

        successes = results.count("success")
        self.assertGreaterEqual(successes, 1)
        self.assertLessEqual(successes, INITIAL_STOCK)
        self.assertEqual(results.count("rejected"), NUM_WORKERS - successes)
        if connection.features.has_select_for_update:
            self.assertEqual(successes, INITIAL_STOCK)
        self.assertEqual(Order.objects.count(), successes)

        # Invariant: stock never goes negative; conservation holds
        self.product.refresh_from_db()
        self.assertGreaterEqual(self.product.stock, 0)
        self.assertEqual(INITIAL_STOCK, successes + self.product.stock)

    def test_concurrent_patches_keep_stock_consistent(self):
        """Concurrent quantity patches of one order never lose an update."""
        order = _service().create_order(
            CreateOrderDTO(
                name="Pedido",
                address=self.user.address,
                payment_method=PaymentMethod.CREDIT,
                quantity=1,
                user_id=self.user.id,
                product_id=self.product.id,
            )
        )
        barrier = threading.Barrier(4)

        def _patch(quantity: int) -> None:
            try:
                barrier.wait()
                _service().patch_order(order.id, PatchOrderDTO(quantity=quantity))
            except (InsufficientStock, OrderConflict):
                pass
            finally:
                django.db.connections.close_all()

        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(_patch, [2, 3, 4, 5]))

        order.refresh_from_db()
        self.product.refresh_from_db()
        self.assertEqual(order.quantity + self.product.stock, INITIAL_STOCK)
