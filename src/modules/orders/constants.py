"""Order domain constants.

``PaymentMethod`` labels are the single display table used by every
customer-facing message (confirmation and cancellation e-mails alike).
"""

from django.db import models


class PaymentMethod(models.TextChoices):
    DEBIT = "DEBIT", "Cartão de débito"
    CREDIT = "CREDIT", "Cartão de crédito"
    ON_ARRIVAL = "ON_ARRIVAL", "Pagamento na entrega"
    COUPON = "COUPON", "Cupom"


UNKNOWN_PAYMENT_METHOD_LABEL = "Não informado"

MIN_ORDER_QUANTITY = 1

# Fields a full update (PUT) replaces and a patch may touch.
MUTABLE_ORDER_FIELDS = ("name", "description", "address", "payment_method", "quantity")


def payment_method_label(value: str | None) -> str:
    """Display label for a stored payment method value."""
    try:
        return PaymentMethod(value).label
    except ValueError:
        return UNKNOWN_PAYMENT_METHOD_LABEL
