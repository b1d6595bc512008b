"""User service layer (Use Cases).

Orchestrates business logic for the User aggregate, delegating
persistence to the injected ``IUserRepository``.

Business rules enforced here:
- E-mail must be unique.
- A user with orders cannot be deleted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.users.exceptions import UserAlreadyExists, UserInUse, UserNotFound
from modules.users.models import User

if TYPE_CHECKING:
    from modules.users.dtos import CreateUserDTO, UpdateUserDTO
    from modules.users.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)

UPDATABLE_FIELDS = ("name", "last_name", "email", "age", "address")


class UserService:
    """Application service for User use-cases.

    Receives an ``IUserRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IUserRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_user(self, dto: CreateUserDTO) -> User:
        """Create a new user.

        Raises:
            UserAlreadyExists: if the e-mail is already taken.
        """
        if self._repo.get_by_email(dto.email):
            logger.warning("user.duplicate_email")
            raise UserAlreadyExists("Email already registered.")

        user = User(
            name=dto.name,
            last_name=dto.last_name,
            email=dto.email,
            age=dto.age,
            address=dto.address,
        )
        user = self._repo.save(user)
        logger.info("user.created", user_id=str(user.id))
        return user

    @transaction.atomic
    def update_user(self, id: str, dto: UpdateUserDTO) -> User:
        """Update an existing user with the supplied fields.

        Raises:
            UserNotFound: if the user does not exist.
            UserAlreadyExists: if the new e-mail collides with another user.
        """
        user = self._repo.get_by_id(id)
        if not user:
            raise UserNotFound(f"User {id} not found.")

        log = logger.bind(user_id=str(id))

        if dto.email is not None and dto.email != user.email:
            if self._repo.get_by_email(dto.email):
                log.warning("user.duplicate_email")
                raise UserAlreadyExists("Email already registered.")

        for field in UPDATABLE_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(user, field, value)

        user = self._repo.save(user)
        log.info("user.updated")
        return user

    @transaction.atomic
    def delete_user(self, id: str) -> None:
        """Delete a user that has no orders.

        Raises:
            UserNotFound: if the user does not exist.
            UserInUse: if orders still reference the user.
        """
        user = self._repo.get_by_id(id)
        if not user:
            raise UserNotFound(f"User {id} not found.")
        if self._repo.has_orders(id):
            raise UserInUse(f"User {id} has orders and cannot be deleted.")
        self._repo.delete(id)
        logger.info("user.deleted", user_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_users(self, filters: Optional[Dict[str, Any]] = None) -> List[User]:
        """Return a list of users, optionally filtered."""
        return self._repo.list(filters)

    def get_user(self, id: str) -> User:
        """Retrieve a single user by ID.

        Raises:
            UserNotFound: if the user does not exist.
        """
        user = self._repo.get_by_id(id)
        if not user:
            raise UserNotFound(f"User {id} not found.")
        return user
