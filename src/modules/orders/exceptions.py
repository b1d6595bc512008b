"""Order domain exceptions.

Raised by the order engine when a request cannot be fulfilled.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.  Every one of them is terminal: the
transaction has been rolled back and nothing was written.
"""

from __future__ import annotations


class OrderDomainError(Exception):
    """Base class for order engine failures."""


class OrderNotFound(OrderDomainError):
    """The requested order does not exist."""


class UserNotFound(OrderDomainError):
    """The user referenced by the order does not exist."""


class ProductNotFound(OrderDomainError):
    """The product referenced by the order does not exist."""


class InvalidQuantity(OrderDomainError):
    """The requested quantity is lower than 1."""


class InsufficientStock(OrderDomainError):
    """The requested stock delta exceeds the product's available stock."""


class OrderConflict(OrderDomainError):
    """A concurrent write prevented the operation; the client may retry.

    Raised when the database aborts the locked section (lock wait
    timeout, deadlock victim, serialization failure).
    """
