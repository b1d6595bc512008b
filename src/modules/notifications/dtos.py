"""Notification DTOs.

``OrderNotificationContext`` is everything an order e-mail template
renders.  It is built from the order snapshot carried by the domain
event, so a cancellation mail can still be rendered after the order row
is gone.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, computed_field

from modules.orders.constants import payment_method_label

if TYPE_CHECKING:
    from modules.products.models import Product
    from modules.users.models import User


class OrderNotificationContext(BaseModel):
    """Immutable template context for order confirmation/cancellation mails."""

    model_config = ConfigDict(frozen=True)

    customer_name: str
    customer_email: EmailStr
    customer_address: str
    order_id: UUID
    order_date: datetime
    order_name: str
    order_description: str = ""
    product_name: str
    product_description: str = ""
    product_price: Decimal
    quantity: int
    delivery_address: str
    payment_method: str
    cancellation_date: Optional[datetime] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_price(self) -> Decimal:
        return self.product_price * self.quantity

    @classmethod
    def from_order_snapshot(
        cls,
        order: Dict[str, Any],
        user: User,
        product: Product,
        cancellation_date: Optional[datetime] = None,
    ) -> OrderNotificationContext:
        return cls(
            customer_name=user.full_name,
            customer_email=user.email,
            customer_address=user.address,
            order_id=order["id"],
            order_date=order["order_date"],
            order_name=order["name"],
            order_description=order.get("description") or "",
            product_name=product.name,
            product_description=product.description,
            product_price=product.price,
            quantity=order["quantity"],
            delivery_address=order["address"],
            payment_method=payment_method_label(order.get("payment_method")),
            cancellation_date=cancellation_date,
        )
