"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

Quantity is deliberately *not* range-checked here: the order engine
owns that rule and reports it as ``InvalidQuantity``.

- ``CreateOrderDTO``: input for placing an order.
- ``UpdateOrderDTO``: full replacement of the mutable order fields.
- ``PatchOrderDTO``: partial update; ``None`` means "leave untouched".
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from modules.orders.constants import PaymentMethod


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""
    address: str
    payment_method: PaymentMethod
    quantity: int
    user_id: UUID
    product_id: UUID


class UpdateOrderDTO(BaseModel):
    """Immutable DTO for full order updates (PUT)."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    address: str
    payment_method: PaymentMethod
    quantity: int

    def changes(self) -> Dict[str, Any]:
        return self.model_dump()


class PatchOrderDTO(BaseModel):
    """Immutable DTO for partial order updates (PATCH)."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    quantity: Optional[int] = None

    def changes(self) -> Dict[str, Any]:
        """Only the fields the caller actually supplied."""
        return self.model_dump(exclude_none=True)
