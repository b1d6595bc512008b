"""Django ORM implementation of the User repository.

Error handling follows the Null Object pattern: look-ups return ``None``
instead of raising — the Service Layer decides how to translate a
missing entity into a domain error.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.users.models import User
from modules.users.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)


class UserDjangoRepository(IUserRepository):
    """Concrete User repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[User]:
        """Retrieve a user by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return User.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[User]:
        queryset = User.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: User) -> User:
        """Persist (create or update) a user."""
        entity.save()
        logger.info("user.saved", user_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete a user by ID.

        Returns ``False`` if no user exists with the given ID.
        """
        user = self.get_by_id(id)
        if not user:
            return False
        user.delete()
        logger.info("user.deleted", user_id=str(id))
        return True

    def get_by_email(self, email: str) -> Optional[User]:
        return User.objects.filter(email__iexact=email.strip()).first()

    def has_orders(self, id: str) -> bool:
        return User.objects.filter(id=id, orders__isnull=False).exists()
