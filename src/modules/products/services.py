"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.

Business rules enforced here:
- Price and initial stock cannot be negative (validated by DTO).
- Stock is never changed by a catalogue update.
- A product referenced by orders cannot be deleted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.products.exceptions import ProductInUse, ProductNotFound
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO, UpdateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a new product with its initial stock."""
        product = Product(
            name=dto.name,
            price=dto.price,
            description=dto.description,
            stock=dto.stock,
        )
        product = self._repo.save(product)
        logger.info("product.created", product_id=str(product.id), stock=product.stock)
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO) -> Product:
        """Update an existing product with the supplied fields.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")

        changed = []
        for field in ("name", "price", "description"):
            value = getattr(dto, field)
            if value is not None and getattr(product, field) != value:
                setattr(product, field, value)
                changed.append(field)

        # only the changed catalogue columns: stock belongs to the order engine
        if changed:
            product = self._repo.save_catalogue(product, changed)
        logger.info("product.updated", product_id=str(id), fields=changed)
        return product

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Delete a product nobody ordered.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductInUse: if orders still reference the product.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        if self._repo.has_orders(id):
            raise ProductInUse(f"Product {id} has orders and cannot be deleted.")
        self._repo.delete(id)
        logger.info("product.deleted", product_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """Return a list of products, optionally filtered."""
        return self._repo.list(filters)

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.retrieved", product_id=str(id))
        return product
