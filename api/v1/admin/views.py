"""
Admin API views.

Authenticated by AdminAPIKeyAuthenticationMiddleware; each view maps its
HTTP methods onto the endpoint switches of the service settings record.
"""

from asgiref.sync import async_to_sync
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.permissions import AdminEndpointEnabled
from api.v1.admin.serializers import (
    BlacklistEntryRequestSerializer,
    BlacklistSerializer,
    CommandUsageSerializer,
    DashboardStatsSerializer,
    IpUsageSerializer,
    IssueLicenseRequestSerializer,
    LicenseDTOSerializer,
    LogCommandUsageRequestSerializer,
    PatchIdentitiesRequestSerializer,
    RenewLicenseRequestSerializer,
    SetLicenseStatusRequestSerializer,
    SubUserRequestSerializer,
)
from audit.application.commands.log_command_usage import LogCommandUsageCommand
from audit.application.handlers.analytics_handlers import GetDashboardStatsHandler, GetIpUsageHandler
from audit.application.handlers.log_command_usage_handler import LogCommandUsageHandler
from audit.infrastructure.repositories.record_store_audit_log_repository import (
    RecordStoreAuditLogRepository,
)
from blacklist.application.commands.blacklist_commands import (
    AddBlacklistEntryCommand,
    BlacklistLicenseIdentifiersCommand,
    BlacklistUserCommand,
    RemoveBlacklistEntryCommand,
    UnblacklistUserCommand,
)
from blacklist.application.handlers.blacklist_handlers import (
    AddBlacklistEntryHandler,
    BlacklistLicenseIdentifiersHandler,
    BlacklistUserHandler,
    GetBlacklistHandler,
    RemoveBlacklistEntryHandler,
    UnblacklistUserHandler,
)
from blacklist.infrastructure.repositories.record_store_blacklist_repository import (
    RecordStoreBlacklistRepository,
)
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.delete_license import DeleteLicenseCommand
from licenses.application.commands.issue_license import IssueLicenseCommand
from licenses.application.commands.manage_sub_users import AddSubUserCommand, RemoveSubUserCommand
from licenses.application.commands.patch_identities import PatchIdentitiesCommand
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.commands.set_license_status import SetLicenseStatusCommand
from licenses.application.handlers.issue_license_handler import IssueLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    AddSubUserHandler,
    DeleteLicenseHandler,
    PatchIdentitiesHandler,
    RemoveSubUserHandler,
    RenewLicenseHandler,
    SetLicenseStatusHandler,
)
from licenses.application.handlers.list_licenses_handler import ListLicensesHandler
from licenses.infrastructure.repositories.record_store_license_repository import (
    RecordStoreLicenseRepository,
)
from products.infrastructure.repositories.record_store_product_repository import (
    RecordStoreProductRepository,
)

# Repositories resolve the configured record store on each call
_license_repo = RecordStoreLicenseRepository()
_product_repo = RecordStoreProductRepository()
_blacklist_repo = RecordStoreBlacklistRepository()
_audit_repo = RecordStoreAuditLogRepository()

tracer = get_tracer(__name__)

API_KEY_PARAMETER = OpenApiParameter(
    name="X-API-Key",
    type=str,
    location=OpenApiParameter.HEADER,
    required=True,
    description="Admin API key (or Authorization: Bearer <key>)",
)


class AdminAPIView(APIView):
    """Base view for the admin API."""

    permission_classes = [AdminEndpointEnabled]
    endpoint_toggles = {}


def _license_response(dto, status_code=status.HTTP_200_OK) -> Response:
    return Response(LicenseDTOSerializer(dto).data, status=status_code)


class LicenseCollectionView(AdminAPIView):
    """List and issue licenses."""

    endpoint_toggles = {"GET": "getLicenses", "POST": "createLicense"}

    @extend_schema(
        operation_id="list_licenses",
        summary="List Licenses",
        description="All licenses, newest first, with product names resolved.",
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        responses={200: LicenseDTOSerializer(many=True), 401: {"description": "Invalid API key"}},
    )
    def get(self, request: Request) -> Response:
        return async_to_sync(self._handle_list)(request)

    async def _handle_list(self, request: Request) -> Response:
        with tracer.start_as_current_span("list_licenses") as span:
            handler = ListLicensesHandler(
                license_repository=_license_repo, product_repository=_product_repo
            )
            result = await handler.handle()
            span.set_attribute("licenses.count", len(result))
            return Response(LicenseDTOSerializer(result, many=True).data)

    @extend_schema(
        operation_id="issue_license",
        summary="Issue License",
        description=(
            "Issue a license for a product to a Discord identity. Capacities use "
            "-1 for unlimited and -2 for untracked; both default to 1."
        ),
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        request=IssueLicenseRequestSerializer,
        responses={
            201: LicenseDTOSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "Product not found"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_issue)(request)

    async def _handle_issue(self, request: Request) -> Response:
        with tracer.start_as_current_span("issue_license") as span:
            serializer = IssueLicenseRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            data = serializer.validated_data
            span.set_attribute("product_id", data["product_id"])

            handler = IssueLicenseHandler(
                license_repository=_license_repo, product_repository=_product_repo
            )
            result = await handler.handle(IssueLicenseCommand(**data))

            span.set_attribute("license_key", result.key)
            span.set_status(Status(StatusCode.OK))
            return _license_response(result, status.HTTP_201_CREATED)


class LicenseDetailView(AdminAPIView):
    """Set status of, or delete, a single license."""

    endpoint_toggles = {"PATCH": "updateLicense", "DELETE": "deleteLicense"}

    @extend_schema(
        operation_id="set_license_status",
        summary="Set License Status",
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        request=SetLicenseStatusRequestSerializer,
        responses={
            200: LicenseDTOSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "License not found"},
        },
    )
    def patch(self, request: Request, key: str) -> Response:
        return async_to_sync(self._handle_set_status)(request, key)

    async def _handle_set_status(self, request: Request, key: str) -> Response:
        with tracer.start_as_current_span("set_license_status") as span:
            span.set_attribute("license_key", key)
            serializer = SetLicenseStatusRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = SetLicenseStatusHandler(
                license_repository=_license_repo, product_repository=_product_repo
            )
            result = await handler.handle(
                SetLicenseStatusCommand(key=key, status=serializer.validated_data["status"])
            )
            span.set_attribute("status", result.status)
            return _license_response(result)

    @extend_schema(
        operation_id="delete_license",
        summary="Delete License",
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        responses={204: None, 404: {"description": "License not found"}},
    )
    def delete(self, request: Request, key: str) -> Response:
        return async_to_sync(self._handle_delete)(request, key)

    async def _handle_delete(self, request: Request, key: str) -> Response:
        with tracer.start_as_current_span("delete_license") as span:
            span.set_attribute("license_key", key)
            await DeleteLicenseHandler(license_repository=_license_repo).handle(
                DeleteLicenseCommand(key=key)
            )
            return Response(status=status.HTTP_204_NO_CONTENT)


class RenewLicenseView(AdminAPIView):
    """Renew a license; the license becomes active."""

    endpoint_toggles = {"PATCH": "renewLicense"}

    @extend_schema(
        operation_id="renew_license",
        summary="Renew License",
        description="Set a new expiration date and reactivate the license.",
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        request=RenewLicenseRequestSerializer,
        responses={
            200: LicenseDTOSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "License not found"},
        },
    )
    def patch(self, request: Request, key: str) -> Response:
        return async_to_sync(self._handle_renew)(request, key)

    async def _handle_renew(self, request: Request, key: str) -> Response:
        with tracer.start_as_current_span("renew_license") as span:
            span.set_attribute("license_key", key)
            serializer = RenewLicenseRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = RenewLicenseHandler(
                license_repository=_license_repo, product_repository=_product_repo
            )
            result = await handler.handle(
                RenewLicenseCommand(
                    key=key, expiration_date=serializer.validated_data["expiration_date"]
                )
            )
            return _license_response(result)


class PatchIdentitiesView(AdminAPIView):
    """Bind an IP and/or HWID to a license by hand."""

    endpoint_toggles = {"PATCH": "updateIdentities"}

    @extend_schema(
        operation_id="patch_license_identities",
        summary="Patch License Identities",
        description=(
            "Add an IP and/or HWID to the license allow-lists, subject to the same "
            "capacity rules as validation. Both are applied or neither is."
        ),
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        request=PatchIdentitiesRequestSerializer,
        responses={
            200: LicenseDTOSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "License not found"},
            409: {"description": "Capacity reached or kind not tracked"},
        },
    )
    def patch(self, request: Request, key: str) -> Response:
        return async_to_sync(self._handle_patch)(request, key)

    async def _handle_patch(self, request: Request, key: str) -> Response:
        with tracer.start_as_current_span("patch_license_identities") as span:
            span.set_attribute("license_key", key)
            serializer = PatchIdentitiesRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = PatchIdentitiesHandler(
                license_repository=_license_repo, product_repository=_product_repo
            )
            result = await handler.handle(
                PatchIdentitiesCommand(
                    key=key,
                    ip=serializer.validated_data.get("ip") or None,
                    hwid=serializer.validated_data.get("hwid") or None,
                )
            )
            return _license_response(result)


class SubUsersView(AdminAPIView):
    """Grant or revoke delegated access to a license."""

    endpoint_toggles = {"POST": "addSubUser", "DELETE": "removeSubUser"}

    @extend_schema(
        operation_id="add_sub_user",
        summary="Add Sub-user",
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        request=SubUserRequestSerializer,
        responses={
            200: LicenseDTOSerializer,
            400: {"description": "Owner cannot be a sub-user"},
            404: {"description": "License not found"},
            409: {"description": "Sub-user already exists"},
        },
    )
    def post(self, request: Request, key: str) -> Response:
        return async_to_sync(self._handle_add)(request, key)

    async def _handle_add(self, request: Request, key: str) -> Response:
        with tracer.start_as_current_span("add_sub_user") as span:
            span.set_attribute("license_key", key)
            serializer = SubUserRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = AddSubUserHandler(
                license_repository=_license_repo, product_repository=_product_repo
            )
            result = await handler.handle(
                AddSubUserCommand(key=key, discord_id=serializer.validated_data["discord_id"])
            )
            return _license_response(result)

    @extend_schema(
        operation_id="remove_sub_user",
        summary="Remove Sub-user",
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        request=SubUserRequestSerializer,
        responses={
            200: LicenseDTOSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "License or sub-user not found"},
        },
    )
    def delete(self, request: Request, key: str) -> Response:
        return async_to_sync(self._handle_remove)(request, key)

    async def _handle_remove(self, request: Request, key: str) -> Response:
        with tracer.start_as_current_span("remove_sub_user") as span:
            span.set_attribute("license_key", key)
            serializer = SubUserRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)

            handler = RemoveSubUserHandler(
                license_repository=_license_repo, product_repository=_product_repo
            )
            result = await handler.handle(
                RemoveSubUserCommand(key=key, discord_id=serializer.validated_data["discord_id"])
            )
            return _license_response(result)


class BlacklistView(AdminAPIView):
    """Read the blacklist, or add/remove single entries."""

    endpoint_toggles = {"GET": "manageBlacklist", "POST": "manageBlacklist", "DELETE": "manageBlacklist"}

    @extend_schema(
        operation_id="get_blacklist",
        summary="Get Blacklist",
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        responses={200: BlacklistSerializer},
    )
    def get(self, request: Request) -> Response:
        blacklist = async_to_sync(GetBlacklistHandler(_blacklist_repo).handle)()
        return Response(BlacklistSerializer(blacklist).data)

    @extend_schema(
        operation_id="add_blacklist_entry",
        summary="Add Blacklist Entry",
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        request=BlacklistEntryRequestSerializer,
        responses={
            200: BlacklistSerializer,
            400: {"description": "Bad Request"},
            409: {"description": "Already blacklisted"},
        },
    )
    def post(self, request: Request) -> Response:
        return async_to_sync(self._handle_entry)(request, AddBlacklistEntryHandler, AddBlacklistEntryCommand)

    @extend_schema(
        operation_id="remove_blacklist_entry",
        summary="Remove Blacklist Entry",
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        request=BlacklistEntryRequestSerializer,
        responses={
            200: BlacklistSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "Entry not found"},
        },
    )
    def delete(self, request: Request) -> Response:
        return async_to_sync(self._handle_entry)(
            request, RemoveBlacklistEntryHandler, RemoveBlacklistEntryCommand
        )

    async def _handle_entry(self, request: Request, handler_class, command_class) -> Response:
        with tracer.start_as_current_span("blacklist_entry") as span:
            serializer = BlacklistEntryRequestSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            entry_type = serializer.validated_data["type"]
            span.set_attribute("blacklist.type", entry_type.value)
            span.set_attribute("blacklist.action", request.method)

            result = await handler_class(_blacklist_repo).handle(
                command_class(entry_type=entry_type, value=serializer.validated_data["value"])
            )
            return Response(BlacklistSerializer(result).data)


class BlacklistUserView(AdminAPIView):
    """Blacklist a user with their bound identifiers, or lift it."""

    endpoint_toggles = {"POST": "manageBlacklist", "DELETE": "manageBlacklist"}

    @extend_schema(
        operation_id="blacklist_user",
        summary="Blacklist User",
        description=(
            "Deactivate every license the user owns, then blacklist the user and "
            "every IP and HWID bound to those licenses."
        ),
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        request=None,
        responses={200: BlacklistSerializer, 409: {"description": "Already blacklisted"}},
    )
    def post(self, request: Request, discord_id: str) -> Response:
        result = async_to_sync(self._handle)(
            BlacklistUserHandler, BlacklistUserCommand(discord_id=discord_id)
        )
        return Response(BlacklistSerializer(result).data)

    @extend_schema(
        operation_id="unblacklist_user",
        summary="Unblacklist User",
        description="Lift the user blacklist. Licenses stay inactive.",
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        request=None,
        responses={200: BlacklistSerializer, 404: {"description": "User not blacklisted"}},
    )
    def delete(self, request: Request, discord_id: str) -> Response:
        result = async_to_sync(self._handle)(
            UnblacklistUserHandler, UnblacklistUserCommand(discord_id=discord_id)
        )
        return Response(BlacklistSerializer(result).data)

    async def _handle(self, handler_class, command):
        with tracer.start_as_current_span("blacklist_user") as span:
            span.set_attribute("discord_id", command.discord_id)
            handler = handler_class(
                blacklist_repository=_blacklist_repo, license_repository=_license_repo
            )
            return await handler.handle(command)


class BlacklistLicenseIdentifiersView(AdminAPIView):
    """Blacklist every IP and HWID bound to a license."""

    endpoint_toggles = {"POST": "manageBlacklist"}

    @extend_schema(
        operation_id="blacklist_license_identifiers",
        summary="Blacklist License Identifiers",
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        request=None,
        responses={200: BlacklistSerializer, 404: {"description": "License not found"}},
    )
    def post(self, request: Request, key: str) -> Response:
        handler = BlacklistLicenseIdentifiersHandler(
            blacklist_repository=_blacklist_repo, license_repository=_license_repo
        )
        result = async_to_sync(handler.handle)(BlacklistLicenseIdentifiersCommand(key=key))
        return Response(BlacklistSerializer(result).data)


class DashboardStatsView(AdminAPIView):
    """Aggregated dashboard statistics."""

    endpoint_toggles = {"GET": "viewStats"}

    @extend_schema(
        operation_id="dashboard_stats",
        summary="Dashboard Statistics",
        description=(
            "Totals, validation counts for the last 7 days, validations by country "
            "and daily bot command usage."
        ),
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        responses={200: DashboardStatsSerializer},
    )
    def get(self, request: Request) -> Response:
        with tracer.start_as_current_span("dashboard_stats"):
            handler = GetDashboardStatsHandler(
                audit_log_repository=_audit_repo,
                license_repository=_license_repo,
                product_repository=_product_repo,
            )
            result = async_to_sync(handler.handle)()
            return Response(DashboardStatsSerializer(result).data)


class IpUsageView(AdminAPIView):
    """IP usage across the licenses a user owns."""

    endpoint_toggles = {"GET": "viewStats"}

    @extend_schema(
        operation_id="user_ip_usage",
        summary="User IP Usage",
        description="Bound IPs against the summed capacity. A null total means unlimited.",
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        responses={200: IpUsageSerializer},
    )
    def get(self, request: Request, discord_id: str) -> Response:
        result = async_to_sync(GetIpUsageHandler(_license_repo).handle)(discord_id)
        return Response(IpUsageSerializer(result).data)


class LogCommandUsageView(AdminAPIView):
    """Record a chat-bot command invocation."""

    endpoint_toggles = {"POST": "logBotUsage"}

    @extend_schema(
        operation_id="log_bot_usage",
        summary="Log Bot Command Usage",
        tags=["Admin API"],
        parameters=[API_KEY_PARAMETER],
        request=LogCommandUsageRequestSerializer,
        responses={200: CommandUsageSerializer, 400: {"description": "Missing command or userId"}},
    )
    def post(self, request: Request) -> Response:
        serializer = LogCommandUsageRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        handler = LogCommandUsageHandler(audit_log_repository=_audit_repo)
        result = async_to_sync(handler.handle)(LogCommandUsageCommand(**serializer.validated_data))
        return Response(CommandUsageSerializer(result).data)
