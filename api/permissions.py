"""
DRF permissions for the admin API.
"""

from rest_framework.permissions import BasePermission

from core.domain.exceptions import EndpointDisabledError
from core.infrastructure.repositories.record_store_settings_repository import (
    RecordStoreSettingsRepository,
)


class AdminEndpointEnabled(BasePermission):
    """
    Honors the per-endpoint switches in the service settings record.

    Views declare ``endpoint_toggles``, a mapping of HTTP method to the
    name of the switch under ``adminApiEndpoints``. Methods without a
    mapping are always allowed.
    """

    def has_permission(self, request, view) -> bool:
        toggle = getattr(view, "endpoint_toggles", {}).get(request.method)
        if toggle is None:
            return True
        service_settings = getattr(request, "service_settings", None)
        if service_settings is None:
            service_settings = RecordStoreSettingsRepository().load()
        if not service_settings.endpoint_enabled(toggle):
            raise EndpointDisabledError()
        return True
