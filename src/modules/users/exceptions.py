"""User domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class UserNotFound(Exception):
    """The requested user does not exist."""


class UserAlreadyExists(Exception):
    """Another user is already registered with the same e-mail."""


class UserInUse(Exception):
    """The user still has orders and cannot be deleted."""
