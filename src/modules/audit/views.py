"""Audit log API views (read-only)."""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.audit.exceptions import InvalidDateRange
from modules.audit.filters import AuditLogFilter
from modules.audit.models import AuditLog
from modules.audit.repositories.django_repository import AuditLogDjangoRepository
from modules.audit.serializers import AuditLogSerializer, DateRangeQuerySerializer
from modules.audit.services import AuditLogService


class AuditLogViewSet(GenericViewSet):
    """ViewSet exposing the audit trail.

    ``list`` accepts the ``AuditLogFilter`` query parameters; the extra
    actions mirror the table, entity and date-range look-ups.
    """

    queryset = AuditLog.objects.none()
    serializer_class = AuditLogSerializer
    filterset_class = AuditLogFilter
    filter_backends = [DjangoFilterBackend]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = AuditLogService(repository=AuditLogDjangoRepository())

    def get_queryset(self):
        return self._service.all_logs()

    def list(self, request: Request) -> Response:
        """GET /api/v1/audit-logs/"""
        logs = self.filter_queryset(self.get_queryset())
        return Response(self.get_serializer(logs, many=True).data)

    @action(detail=False, methods=["get"], url_path=r"table/(?P<table_name>[^/.]+)")
    def by_table(self, request: Request, table_name: str) -> Response:
        """GET /api/v1/audit-logs/table/{table_name}/"""
        logs = self._service.logs_for_table(table_name)
        return Response(self.get_serializer(logs, many=True).data)

    @action(
        detail=False,
        methods=["get"],
        url_path=r"entity/(?P<table_name>[^/.]+)/(?P<entity_id>[^/]+)",
    )
    def by_entity(self, request: Request, table_name: str, entity_id: str) -> Response:
        """GET /api/v1/audit-logs/entity/{table_name}/{entity_id}/"""
        logs = self._service.logs_for_entity(table_name, entity_id)
        return Response(self.get_serializer(logs, many=True).data)

    @action(detail=False, methods=["get"], url_path="date-range")
    def by_date_range(self, request: Request) -> Response:
        """GET /api/v1/audit-logs/date-range/?start_date=...&end_date=..."""
        query = DateRangeQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        try:
            logs = self._service.logs_between(
                query.validated_data["start_date"], query.validated_data["end_date"]
            )
        except InvalidDateRange as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(self.get_serializer(logs, many=True).data)
