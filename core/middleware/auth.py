"""
Admin API key authentication middleware.

Guards everything under /api/v1/admin/ with the shared secret from the
service settings record. The public validation route is not guarded.
"""

import hmac
import logging
from typing import Optional

from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.utils.deprecation import MiddlewareMixin

from core.domain.exceptions import InvalidAPIKeyError, StorageError
from core.infrastructure.repositories.record_store_settings_repository import (
    RecordStoreSettingsRepository,
)

logger = logging.getLogger(__name__)

ADMIN_API_PREFIX = "/api/v1/admin/"


def _error(code: str, message: str, status: int) -> JsonResponse:
    return JsonResponse({"error": {"code": code, "message": message}}, status=status)


def extract_api_key(request: HttpRequest) -> str:
    """Key from X-API-Key, falling back to an Authorization bearer token."""
    api_key = request.headers.get("X-API-Key")
    if api_key:
        return api_key
    authorization = request.headers.get("Authorization", "")
    if authorization.startswith("Bearer "):
        return authorization[len("Bearer "):].strip()
    return ""


class AdminAPIKeyAuthenticationMiddleware(MiddlewareMixin):
    """
    Middleware for admin API key authentication.

    This middleware:
    1. Returns 401 when the admin API is disabled in the settings record
    2. Returns 401 when the key is missing or does not match
    3. Attaches the loaded ServiceSettings to the request otherwise
    """

    def __init__(self, get_response=None, settings_repository=None):
        super().__init__(get_response)
        self.settings_repository = settings_repository or RecordStoreSettingsRepository()

    def process_request(self, request: HttpRequest) -> Optional[HttpResponse]:
        """
        Process request and validate authentication.

        Args:
            request: HTTP request

        Returns:
            Error response if authentication fails, None otherwise
        """
        if not request.path.startswith(ADMIN_API_PREFIX):
            return None

        try:
            service_settings = self.settings_repository.load()
        except StorageError as e:
            logger.error("Could not load service settings: %s", e.message, exc_info=True)
            return _error(e.code, "Service settings unavailable", 500)

        if not service_settings.admin_api_enabled:
            return _error("ADMIN_API_DISABLED", "Admin API is disabled", 401)

        expected = service_settings.api_key or getattr(settings, "ADMIN_API_KEY", "")
        provided = extract_api_key(request)
        if not provided or not expected or not hmac.compare_digest(provided.encode(), expected.encode()):
            logger.warning(
                "Invalid admin API key attempted",
                extra={"path": request.path, "remote_addr": request.META.get("REMOTE_ADDR")},
            )
            error = InvalidAPIKeyError()
            return _error(error.code, error.message, 401)

        request.service_settings = service_settings  # type: ignore
        return None
