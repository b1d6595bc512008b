"""Order model.

Business rules implemented:
- Quantity is at least 1 for every persisted order (validated by the
  service before any write, backed by a check constraint).
- ``order_date`` is set once, at creation, to the commit-time UTC
  timestamp and never changes afterwards.
- User and Product FKs use PROTECT: an order can never point to a
  missing row, and its product stock can always be released.
- Deletion is physical (no soft delete); the order's quantity is given
  back to the product's stock in the same transaction.
"""

from __future__ import annotations

from typing import Any

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import MIN_ORDER_QUANTITY, PaymentMethod
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root: one product, one quantity, one user."""

    name: models.CharField = models.CharField(max_length=255)
    description: models.TextField = models.TextField(blank=True, default="")
    address: models.TextField = models.TextField()
    payment_method: models.CharField = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
    )
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        validators=[MinValueValidator(MIN_ORDER_QUANTITY)],
    )
    order_date: models.DateTimeField = models.DateTimeField(editable=False)
    user: models.ForeignKey = models.ForeignKey(
        "users.User",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    product: models.ForeignKey = models.ForeignKey(
        "products.Product",
        on_delete=models.PROTECT,
        related_name="orders",
    )

    class Meta:
        db_table = "orders"
        ordering = ["-order_date"]
        indexes = [
            models.Index(fields=["-order_date"], name="orders_order_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=MIN_ORDER_QUANTITY),
                name="orders_quantity_positive",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.quantity is not None and self.quantity < MIN_ORDER_QUANTITY:
            raise ValidationError({"quantity": "Quantity must be at least 1."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args: Any, **kwargs: Any) -> None:
        if self.order_date is None:
            raise ValueError("order_date must be set before an order is saved.")
        super().save(*args, **kwargs)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.name} x{self.quantity}"
