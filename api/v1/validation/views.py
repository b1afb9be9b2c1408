"""
Public license validation endpoint.

Called by client software; it carries no admin credential. The caller's
address is taken from the first X-Forwarded-For hop, else REMOTE_ADDR.
"""

from typing import Optional

from asgiref.sync import async_to_sync
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import status_for
from api.v1.validation.serializers import (
    ValidateLicenseRequestSerializer,
    ValidationFailureSerializer,
    build_success_payload,
)
from audit.infrastructure.repositories.record_store_audit_log_repository import (
    RecordStoreAuditLogRepository,
)
from blacklist.infrastructure.repositories.record_store_blacklist_repository import (
    RecordStoreBlacklistRepository,
)
from core.domain.exceptions import DomainException
from core.domain.value_objects import EvidenceKind
from core.infrastructure.repositories.record_store_settings_repository import (
    RecordStoreSettingsRepository,
)
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.infrastructure.repositories.record_store_license_repository import (
    RecordStoreLicenseRepository,
)
from products.infrastructure.repositories.record_store_product_repository import (
    RecordStoreProductRepository,
)
from validation.application.commands.validate_license import ValidateLicenseCommand
from validation.application.handlers.validate_license_handler import ValidateLicenseHandler
from validation.infrastructure.geolocation import GeolocationService

_license_repo = RecordStoreLicenseRepository()
_product_repo = RecordStoreProductRepository()
_blacklist_repo = RecordStoreBlacklistRepository()
_audit_repo = RecordStoreAuditLogRepository()
_settings_repo = RecordStoreSettingsRepository()

tracer = get_tracer(__name__)


def client_ip(request) -> Optional[str]:
    """First X-Forwarded-For hop, falling back to REMOTE_ADDR."""
    forwarded_for = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded_for:
        first_hop = forwarded_for.split(",")[0].strip()
        if first_hop:
            return first_hop
    return request.META.get("REMOTE_ADDR") or None


def failure_response(error: DomainException) -> Response:
    body = {"success": False, "status": "failure", "message": error.message}
    if error.reason is not None:
        body["reason"] = error.reason.value
    return Response(body, status=status_for(error))


class ValidateLicenseView(APIView):
    """Validate a license key and bind the caller's IP/HWID."""

    authentication_classes = []
    permission_classes = []

    @extend_schema(
        operation_id="validate_license",
        summary="Validate License",
        description=(
            "Check a license key for the calling identity. On success the caller's "
            "IP (and HWID for protected products) is bound to the license within "
            "its capacity. Failures carry a stable reason code: not_found, "
            "product_not_found, blacklisted, unauthorized, hwid_required, expired, "
            "inactive, ip_capacity, hwid_capacity."
        ),
        tags=["Validation"],
        request=ValidateLicenseRequestSerializer,
        responses={
            200: {"description": "License is valid; body shaped by the validation response settings"},
            400: ValidationFailureSerializer,
            401: ValidationFailureSerializer,
            403: ValidationFailureSerializer,
            404: ValidationFailureSerializer,
            409: ValidationFailureSerializer,
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_validate)(request)

    async def _handle_validate(self, request: Request) -> Response:
        with tracer.start_as_current_span("validate_license") as span:
            serializer = ValidateLicenseRequestSerializer(data=request.data)
            if not serializer.is_valid():
                span.set_status(Status(StatusCode.ERROR, "Validation failed"))
                return Response(
                    {"success": False, "status": "failure", "message": "Invalid input"},
                    status=status.HTTP_400_BAD_REQUEST,
                )
            data = serializer.validated_data
            command = ValidateLicenseCommand(
                key=data.get("key") or None,
                discord_id=data.get("discord_id") or None,
                ip=client_ip(request),
                hwid=data.get("hwid") or None,
            )
            span.set_attribute("license_key", command.key or "")

            handler = ValidateLicenseHandler(
                license_repository=_license_repo,
                product_repository=_product_repo,
                blacklist_repository=_blacklist_repo,
                audit_log_repository=_audit_repo,
                settings_repository=_settings_repo,
                geolocation=GeolocationService(),
            )
            try:
                result = await handler.handle(command)
            except DomainException as e:
                span.set_attribute("validation.reason", e.reason.value if e.reason else e.code)
                span.set_status(Status(StatusCode.ERROR, e.message))
                return failure_response(e)

            span.set_attribute("validation.ip_admission", result.admission_for(EvidenceKind.IP))
            span.set_attribute("validation.hwid_admission", result.admission_for(EvidenceKind.HWID))
            span.set_status(Status(StatusCode.OK))

            service_settings = await _settings_repo.get()
            return Response(build_success_payload(result, service_settings.validation_response))
