"""User API views.

Exposes the ``UserService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes — the view never swallows generic exceptions.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.http import dto_payload, invalid_payload
from modules.users.dtos import CreateUserDTO, UpdateUserDTO
from modules.users.exceptions import UserAlreadyExists, UserInUse, UserNotFound
from modules.users.repositories.django_repository import UserDjangoRepository
from modules.users.serializers import UserSerializer
from modules.users.services import UserService

NOT_FOUND = {"detail": "User not found."}


class UserViewSet(ViewSet):
    """ViewSet for User CRUD operations.

    Uses ``UserService`` with ``UserDjangoRepository`` (DIP).
    All ORM access goes through the service/repository layer.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = UserService(repository=UserDjangoRepository())

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/users/"""
        users = self._service.list_users()
        return Response(UserSerializer(users, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/users/{pk}/"""
        try:
            user = self._service.get_user(pk)
        except UserNotFound:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        return Response(UserSerializer(user).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/users/"""
        try:
            dto = CreateUserDTO(**dto_payload(request, CreateUserDTO))
        except PydanticValidationError as exc:
            return invalid_payload(exc)

        try:
            user = self._service.create_user(dto)
        except UserAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/users/{pk}/ — every field is required."""
        try:
            full = CreateUserDTO(**dto_payload(request, CreateUserDTO))
        except PydanticValidationError as exc:
            return invalid_payload(exc)
        return self._apply_update(pk, UpdateUserDTO(**full.model_dump()))

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/users/{pk}/"""
        try:
            dto = UpdateUserDTO(**dto_payload(request, UpdateUserDTO))
        except PydanticValidationError as exc:
            return invalid_payload(exc)
        return self._apply_update(pk, dto)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/users/{pk}/"""
        try:
            self._service.delete_user(pk)
        except UserNotFound:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except UserInUse as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(status=status.HTTP_204_NO_CONTENT)

    def _apply_update(self, pk: str | None, dto: UpdateUserDTO) -> Response:
        try:
            user = self._service.update_user(pk, dto)
        except UserNotFound:
            return Response(NOT_FOUND, status=status.HTTP_404_NOT_FOUND)
        except UserAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(UserSerializer(user).data)
