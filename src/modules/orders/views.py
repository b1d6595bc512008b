"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.http import dto_payload, invalid_payload
from modules.orders.dtos import CreateOrderDTO, PatchOrderDTO, UpdateOrderDTO
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidQuantity,
    OrderConflict,
    OrderDomainError,
    OrderNotFound,
    ProductNotFound,
    UserNotFound,
)
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import OrderSerializer
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.users.repositories.django_repository import UserDjangoRepository

T = TypeVar("T")

# Seconds a client should wait before retrying a conflicting write.
CONFLICT_RETRY_AFTER = "1"

ERROR_STATUS = {
    OrderNotFound: status.HTTP_404_NOT_FOUND,
    UserNotFound: status.HTTP_404_NOT_FOUND,
    ProductNotFound: status.HTTP_404_NOT_FOUND,
    InvalidQuantity: status.HTTP_400_BAD_REQUEST,
    InsufficientStock: status.HTTP_409_CONFLICT,
    OrderConflict: status.HTTP_409_CONFLICT,
}


def error_response(exc: OrderDomainError) -> Response:
    """Translate an order engine failure into its HTTP response."""
    response = Response(
        {"detail": str(exc), "code": type(exc).__name__},
        status=ERROR_STATUS[type(exc)],
    )
    if isinstance(exc, OrderConflict):
        response["Retry-After"] = CONFLICT_RETRY_AFTER
    return response


class OrderViewSet(ViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            user_repository=UserDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/"""
        orders = self._service.list_orders()
        return Response(OrderSerializer(orders, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        return self._run(lambda: self._service.get_order(pk))

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        try:
            dto = CreateOrderDTO(**dto_payload(request, CreateOrderDTO))
        except PydanticValidationError as exc:
            return invalid_payload(exc)
        return self._run(
            lambda: self._service.create_order(dto),
            success_status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/ — full replacement of the mutable fields."""
        try:
            dto = UpdateOrderDTO(**dto_payload(request, UpdateOrderDTO))
        except PydanticValidationError as exc:
            return invalid_payload(exc)
        return self._run(lambda: self._service.update_order(pk, dto))

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/"""
        try:
            dto = PatchOrderDTO(**dto_payload(request, PatchOrderDTO))
        except PydanticValidationError as exc:
            return invalid_payload(exc)
        return self._run(lambda: self._service.patch_order(pk, dto))

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/"""
        try:
            self._service.delete_order(pk)
        except OrderDomainError as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    def _run(
        self,
        operation: Callable[[], T],
        success_status: int = status.HTTP_200_OK,
    ) -> Response:
        try:
            order = operation()
        except OrderDomainError as exc:
            return error_response(exc)
        return Response(OrderSerializer(order).data, status=success_status)
