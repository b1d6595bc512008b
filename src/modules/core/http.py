"""Small helpers shared by the API views."""

from __future__ import annotations

from typing import Any, Dict, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response


def dto_payload(request: Request, dto_class: Type[BaseModel]) -> Dict[str, Any]:
    """Keep only the request keys the DTO declares (unknown keys are ignored)."""
    data = request.data if hasattr(request.data, "items") else {}
    return {
        key: value for key, value in data.items() if key in dto_class.model_fields
    }


def invalid_payload(exc: PydanticValidationError) -> Response:
    """400 response listing every field error reported by pydantic."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "detail": error["msg"],
        }
        for error in exc.errors(include_url=False)
    ]
    return Response(
        {"detail": "Invalid payload.", "errors": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )
