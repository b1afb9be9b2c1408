"""
Core views for health checks and system status.
"""

import logging

from django.core.cache import cache
from django.db import connection
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from core.domain.exceptions import StorageError
from core.infrastructure.record_store import get_record_store

logger = logging.getLogger(__name__)

SERVICE_NAME = "license-validation-service"


def check_database() -> bool:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        return True
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.warning("Database check failed: %s", e)
        return False


def check_cache() -> bool:
    try:
        cache.set("health_check", "ok", 10)
        return cache.get("health_check") == "ok"
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.warning("Cache check failed: %s", e)
        return False


def check_record_store() -> bool:
    try:
        get_record_store().read("settings")
        return True
    except StorageError as e:
        logger.warning("Record store check failed: %s", e.message)
        return False


@method_decorator(csrf_exempt, name="dispatch")
class HealthView(View):
    """Health check endpoint."""

    def get(self, _request):
        return JsonResponse({"status": "healthy", "service": SERVICE_NAME})


@method_decorator(csrf_exempt, name="dispatch")
class HealthDBView(View):
    """Database health check endpoint."""

    def get(self, _request):
        if check_database():
            return JsonResponse({"status": "healthy", "database": "connected"})
        return JsonResponse({"status": "unhealthy", "database": "disconnected"}, status=503)


@method_decorator(csrf_exempt, name="dispatch")
class HealthCacheView(View):
    """Cache health check endpoint."""

    def get(self, _request):
        if check_cache():
            return JsonResponse({"status": "healthy", "cache": "connected"})
        return JsonResponse({"status": "unhealthy", "cache": "disconnected"}, status=503)


@method_decorator(csrf_exempt, name="dispatch")
class ReadyView(View):
    """Readiness check endpoint."""

    def get(self, _request):
        """Check if service is ready to accept traffic."""
        checks = {
            "database": check_database(),
            "cache": check_cache(),
            "record_store": check_record_store(),
        }
        all_healthy = all(checks.values())
        return JsonResponse(
            {"status": "ready" if all_healthy else "not_ready", "checks": checks},
            status=200 if all_healthy else 503,
        )
