"""User DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class CreateUserDTO(BaseModel):
    """Immutable DTO for user creation requests."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, max_length=150)
    last_name: str = Field(min_length=1, max_length=150)
    email: EmailStr
    age: int = Field(ge=0, le=150)
    address: str = ""

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str) -> str:
        return v.strip().lower()


class UpdateUserDTO(BaseModel):
    """Immutable DTO for user update requests.

    All fields are optional — only supplied fields will be updated.
    """

    model_config = ConfigDict(frozen=True)

    name: str | None = Field(default=None, min_length=1, max_length=150)
    last_name: str | None = Field(default=None, min_length=1, max_length=150)
    email: EmailStr | None = None
    age: int | None = Field(default=None, ge=0, le=150)
    address: str | None = None

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v: str | None) -> str | None:
        return v.strip().lower() if v is not None else v
