"""Product repository interface.

Extends ``IRepository[Product]`` with the row-lock look-up and the
stock write used by the order engine.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Product]:
        """Retrieve a product with a row-level lock (SELECT FOR UPDATE).

        Used by the order engine for atomic stock reservation/release.
        Must be called inside a transaction.  Returns ``None`` if the
        product does not exist.
        """

    @abstractmethod
    def save_stock(self, entity: Product) -> Product:
        """Persist only the ``stock`` column of an already locked product."""

    @abstractmethod
    def save_catalogue(self, entity: Product, fields: List[str]) -> Product:
        """Persist only the given catalogue columns; ``stock`` is never written."""

    @abstractmethod
    def has_orders(self, id: str) -> bool:
        """Whether any order still references the product."""
