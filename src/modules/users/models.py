"""User model: the customer placing orders.

Business rules implemented:
- E-mail must be unique in the system.
- Users referenced by orders cannot be deleted (FK uses PROTECT on Order).
- Order logic only reads users; it never mutates them.
"""

from __future__ import annotations

import structlog
from django.core.validators import MaxValueValidator
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class User(BaseModel):
    """Customer identity, contact and shipping address.

    Not to be confused with ``django.contrib.auth`` users: the API has no
    authentication, these are the people orders are placed for.
    """

    name = models.CharField(max_length=150)
    last_name = models.CharField(max_length=150)
    email = models.EmailField(max_length=254, unique=True)
    age = models.PositiveSmallIntegerField(validators=[MaxValueValidator(150)])
    address = models.TextField(blank=True, default="")

    class Meta:
        db_table = "users"
        ordering = ["name", "last_name"]

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.last_name}".strip()

    def save(self, *args, **kwargs) -> None:
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.full_name
