"""Audit log URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.audit.views import AuditLogViewSet

router = DefaultRouter(trailing_slash=True)
router.register("audit-logs", AuditLogViewSet, basename="audit-log")

urlpatterns = router.urls
