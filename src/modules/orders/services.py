"""Order service layer (Use Cases).

Orchestrates the order-fulfillment rules: every change to an order's
quantity is mirrored by the inverse change to its product's stock,
inside one atomic unit of work.  The service defines that boundary.

Business rules enforced:
- Quantity is at least 1 on create, update, and on patch when supplied.
- Referenced user and product must exist, including on delete.
- Stock never goes negative: the delta is validated against the stock
  read under a ``SELECT FOR UPDATE`` lock before anything is written.
- Deleting an order gives its whole quantity back to the product.
- Lock order is always Order -> Product, so two mutations of the same
  order cannot deadlock against each other.

Every failure is raised before the first write of the unit of work, and
the surrounding transaction rolls back whatever else was staged.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional
from uuid import UUID

import structlog
from django.db import OperationalError, transaction
from django.utils import timezone

from modules.orders.constants import MIN_ORDER_QUANTITY
from modules.orders.events import OrderDeleted, OrderPlaced, OrderUpdated
from modules.orders.exceptions import (
    InvalidQuantity,
    OrderConflict,
    OrderNotFound,
    ProductNotFound,
    UserNotFound,
)
from modules.orders.models import Order
from modules.orders.stock import StockLedger
from shared.serialization import snapshot_instance

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO, PatchOrderDTO, UpdateOrderDTO
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository
    from modules.users.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


@contextmanager
def order_unit_of_work(operation: str, **context: Any) -> Iterator[None]:
    """Run the block in one transaction; lock failures become ``OrderConflict``.

    The ``except`` sits outside ``atomic`` so the rollback has already
    happened when the conflict is raised.
    """
    try:
        with transaction.atomic():
            yield
    except OperationalError as exc:
        logger.warning(f"order.{operation}_conflict", error=str(exc), **context)
        raise OrderConflict(
            "The order could not be written because of a concurrent update. "
            "Please retry."
        ) from exc


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        user_repository: IUserRepository,
        product_repository: IProductRepository,
        stock_ledger: Optional[StockLedger] = None,
    ) -> None:
        self._order_repo = order_repository
        self._user_repo = user_repository
        self._product_repo = product_repository
        self._ledger = stock_ledger or StockLedger(product_repository)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Place an order and reserve its quantity.

        Steps:
        1. Validate quantity.
        2. Validate the user exists.
        3. Lock the product row and reserve stock (validates the balance).
        4. Persist the order with ``order_date = now``.

        Raises:
            InvalidQuantity: quantity lower than 1.
            UserNotFound: user does not exist.
            ProductNotFound: product does not exist.
            InsufficientStock: product stock lower than quantity.
            OrderConflict: the database aborted the locked section.
        """
        log = logger.bind(user_id=str(dto.user_id), product_id=str(dto.product_id))
        log.info("order.creation_started", quantity=dto.quantity)

        self._validate_quantity(dto.quantity)

        with order_unit_of_work("create", product_id=str(dto.product_id)):
            self._require_user(dto.user_id)
            product = self._lock_product(dto.product_id)
            self._ledger.reserve(product, dto.quantity)

            order = Order(
                name=dto.name,
                description=dto.description,
                address=dto.address,
                payment_method=dto.payment_method,
                quantity=dto.quantity,
                order_date=timezone.now(),
                user_id=dto.user_id,
                product_id=product.id,
            )
            order.add_domain_event(
                OrderPlaced(aggregate_id=order.id, payload=snapshot_instance(order))
            )
            self._order_repo.save(order)

        log.info("order.created", order_id=str(order.id), remaining=product.stock)
        return order

    def update_order(self, order_id: UUID | str, dto: UpdateOrderDTO) -> Order:
        """Replace every mutable field of an order and re-sync the stock.

        Raises:
            InvalidQuantity: quantity lower than 1.
            OrderNotFound / UserNotFound / ProductNotFound.
            InsufficientStock: the quantity increase exceeds the stock.
            OrderConflict: the database aborted the locked section.
        """
        self._validate_quantity(dto.quantity)
        return self._apply_changes("update", order_id, dto.changes())

    def patch_order(self, order_id: UUID | str, dto: PatchOrderDTO) -> Order:
        """Overwrite only the supplied fields.

        Quantity is validated, and stock re-synced, only when supplied.
        An empty patch writes nothing and raises no event.
        """
        changes = dto.changes()
        if "quantity" in changes:
            self._validate_quantity(changes["quantity"])
        return self._apply_changes("patch", order_id, changes)

    def delete_order(self, order_id: UUID | str) -> bool:
        """Delete an order and release its whole quantity.

        The user and product must still resolve: deletion does not go
        past a broken reference.

        Raises:
            OrderNotFound / UserNotFound / ProductNotFound.
            OrderConflict: the database aborted the locked section.
        """
        log = logger.bind(order_id=str(order_id))

        with order_unit_of_work("delete", order_id=str(order_id)):
            order = self._lock_order(order_id)
            self._require_user(order.user_id)
            product = self._lock_product(order.product_id)

            self._ledger.release(product, order.quantity)
            order.add_domain_event(
                OrderDeleted(aggregate_id=order.id, payload=snapshot_instance(order))
            )
            self._order_repo.remove(order)

        log.info("order.removed", released=order.quantity, restored_stock=product.stock)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: UUID | str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Return a list of orders, optionally filtered."""
        return self._order_repo.list(filters)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _apply_changes(
        self, operation: str, order_id: UUID | str, changes: Dict[str, Any]
    ) -> Order:
        log = logger.bind(order_id=str(order_id), operation=operation)

        with order_unit_of_work(operation, order_id=str(order_id)):
            order = self._lock_order(order_id)
            self._require_user(order.user_id)
            product = self._lock_product(order.product_id)

            changed = {
                field: value
                for field, value in changes.items()
                if getattr(order, field) != value
            }
            if not changed:
                log.info("order.unchanged")
                return order

            if "quantity" in changed:
                delta = self._ledger.resync(product, order.quantity, changed["quantity"])
                log.info("order.stock_resynced", delta=delta, stock=product.stock)

            for field, value in changed.items():
                setattr(order, field, value)
            order.add_domain_event(
                OrderUpdated(aggregate_id=order.id, payload=snapshot_instance(order))
            )
            self._order_repo.save(order, update_fields=list(changed))

        log.info("order.updated", fields=sorted(changed))
        return order

    @staticmethod
    def _validate_quantity(quantity: int) -> None:
        if quantity < MIN_ORDER_QUANTITY:
            logger.warning("order.invalid_quantity", quantity=quantity)
            raise InvalidQuantity(
                f"Quantity must be at least {MIN_ORDER_QUANTITY}, got {quantity}."
            )

    def _lock_order(self, order_id: UUID | str) -> Order:
        order = self._order_repo.get_for_update(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _require_user(self, user_id: UUID | str) -> None:
        if not self._user_repo.get_by_id(str(user_id)):
            raise UserNotFound(f"User {user_id} not found.")

    def _lock_product(self, product_id: UUID | str) -> Product:
        product = self._ledger.lock(str(product_id))
        if not product:
            raise ProductNotFound(f"Product {product_id} not found.")
        return product
