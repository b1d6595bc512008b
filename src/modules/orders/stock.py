"""Stock ledger: the only code allowed to move ``Product.stock``.

Every order mutation goes through the same sequence, inside the
transaction opened by ``OrderService``:

1. ``lock`` the product row (``SELECT ... FOR UPDATE``), so a concurrent
   order against the same product waits until this one commits;
2. validate the delta against the stock read *under the lock*;
3. write the new balance.

Because the read and the write happen while the row lock is held, two
transactions can never both pass validation against the same balance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

import structlog

from modules.orders.exceptions import InsufficientStock

if TYPE_CHECKING:
    from modules.products.models import Product
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class StockLedger:
    """Applies stock deltas to product rows locked by :meth:`lock`."""

    def __init__(self, product_repository: IProductRepository) -> None:
        self._product_repo = product_repository

    def lock(self, product_id: str) -> Optional[Product]:
        """Lock and return the product row, or ``None`` when it is missing."""
        return self._product_repo.get_for_update(product_id)

    def reserve(self, product: Product, quantity: int) -> None:
        """Take *quantity* units out of stock.

        Raises:
            InsufficientStock: the product holds fewer than *quantity* units.
        """
        if quantity <= 0:
            raise ValueError("Reserved quantity must be positive.")
        if product.stock < quantity:
            logger.warning(
                "stock.insufficient",
                product_id=str(product.id),
                requested=quantity,
                available=product.stock,
            )
            raise InsufficientStock(
                f"Product {product.id}: requested {quantity}, "
                f"available {product.stock}."
            )
        product.stock -= quantity
        self._product_repo.save_stock(product)
        logger.info(
            "order.stock_reserved",
            product_id=str(product.id),
            quantity=quantity,
            remaining=product.stock,
        )

    def release(self, product: Product, quantity: int) -> None:
        """Give *quantity* units back to stock.  Releasing never fails."""
        if quantity <= 0:
            raise ValueError("Released quantity must be positive.")
        product.stock += quantity
        self._product_repo.save_stock(product)
        logger.info(
            "order.stock_released",
            product_id=str(product.id),
            quantity=quantity,
            restored_stock=product.stock,
        )

    def resync(self, product: Product, old_quantity: int, new_quantity: int) -> int:
        """Mirror an order quantity change on the product's stock.

        Returns the applied delta (``new_quantity - old_quantity``); zero
        leaves the product untouched.
        """
        delta = new_quantity - old_quantity
        if delta > 0:
            self.reserve(product, delta)
        elif delta < 0:
            self.release(product, -delta)
        return delta
