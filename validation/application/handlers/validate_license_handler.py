"""
ValidateLicenseHandler.

The validation engine: decides whether a validation request is accepted
and, if so, records the client evidence against the license capacity.

Rule order:
    1. license lookup (not_found), product lookup (product_not_found)
    2. blacklist on requester, owner, address and fingerprint (blacklisted)
    3. requester is owner or sub-user (unauthorized)
    4. HWID-protected product without fingerprint (hwid_required)
    5. expiry, then status (expired, inactive)
    6. capacity for every supplied evidence kind, all-or-nothing
       (ip_capacity, hwid_capacity)
Steps 2-6 and the write run inside one atomic update of the license
collection. Every attempt that reaches step 1 is logged exactly once.
"""
import logging
from typing import Dict, Optional

from audit.domain.entries import NOT_AVAILABLE, Location, ValidationLog
from audit.ports.audit_log_repository import AuditLogRepository
from blacklist.domain.blacklist import Blacklist
from blacklist.ports.blacklist_repository import BlacklistRepository
from core.domain.exceptions import (
    BlacklistedError,
    CapacityExceededError,
    DomainException,
    HwidRequiredError,
    InvalidInputError,
    LicenseNotFoundError,
    NotAuthorizedForLicenseError,
    ProductNotFoundError,
)
from core.domain.value_objects import Admission, EvidenceKind, ValidationOutcome
from core.infrastructure.repositories.record_store_settings_repository import (
    RecordStoreSettingsRepository,
)
from core.metrics import capacity_rejections_total, validations_total
from licenses.domain.license import License
from licenses.domain.services import EvidenceBinder
from licenses.ports.license_repository import LicenseRepository
from products.domain.product import Product
from products.ports.product_repository import ProductRepository
from validation.application.commands.validate_license import ValidateLicenseCommand
from validation.application.dto.validation_dto import ValidationResultDTO
from validation.infrastructure.geolocation import GeolocationService

logger = logging.getLogger(__name__)


class ValidateLicenseHandler:
    """Handler for ValidateLicenseCommand."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        product_repository: ProductRepository,
        blacklist_repository: BlacklistRepository,
        audit_log_repository: AuditLogRepository,
        settings_repository: RecordStoreSettingsRepository,
        geolocation: Optional[GeolocationService] = None,
    ):
        """Initialize handler with repositories and collaborators."""
        self.license_repository = license_repository
        self.product_repository = product_repository
        self.blacklist_repository = blacklist_repository
        self.audit_log_repository = audit_log_repository
        self.settings_repository = settings_repository
        self.geolocation = geolocation

    async def handle(self, command: ValidateLicenseCommand) -> ValidationResultDTO:
        """
        Handle validate license command.

        Args:
            command: ValidateLicenseCommand

        Returns:
            ValidationResultDTO with the updated license and per-kind admissions

        Raises:
            InvalidInputError: If the key (or a required identity) is missing
            DomainException: Any failed rule; its ``reason`` is what was logged
        """
        if not command.key:
            raise InvalidInputError("Missing license key")
        service_settings = await self.settings_repository.get()
        if service_settings.require_discord_id and not command.discord_id:
            raise InvalidInputError("Missing discordId")

        location = await self.geolocation.locate(command.ip) if self.geolocation else None
        attempt = _Attempt(command, location)

        try:
            license = await self.license_repository.find_by_key(command.key)
            if not license:
                raise LicenseNotFoundError("Invalid license key")
            attempt.discord_id = command.discord_id or license.discord_id

            product = await self.product_repository.find_by_id(license.product_id)
            if not product:
                raise ProductNotFoundError("Associated product not found")
            attempt.product_name = product.name

            blacklist = await self.blacklist_repository.get()
            admissions: Dict[EvidenceKind, Admission] = {}

            def _validate(current: License) -> License:
                bound, outcomes = self._apply_rules(current, product, blacklist, command)
                admissions.update(outcomes)
                return bound.record_validation()

            updated = await self.license_repository.update(command.key, _validate)
        except DomainException as e:
            await self._record_failure(attempt, e)
            raise

        await self._log(attempt.success())
        validations_total.labels(outcome=ValidationOutcome.SUCCESS.value, reason="").inc()
        logger.info(
            "License validated",
            extra={
                "license_key": updated.key,
                "ip_admission": admissions.get(EvidenceKind.IP, Admission.UNTRACKED).value,
                "hwid_admission": admissions.get(EvidenceKind.HWID, Admission.UNTRACKED).value,
            },
        )
        return ValidationResultDTO(license=updated, product=product, admissions=admissions)

    @staticmethod
    def _apply_rules(
        license: License,
        product: Product,
        blacklist: Blacklist,
        command: ValidateLicenseCommand,
    ):
        if blacklist.blocks(
            identities=(command.discord_id, license.discord_id),
            ip=command.ip,
            hwid=command.hwid,
        ):
            raise BlacklistedError()

        if command.discord_id and not license.is_authorized(command.discord_id):
            raise NotAuthorizedForLicenseError()

        if product.hwid_protection and not command.hwid:
            raise HwidRequiredError()

        license.ensure_usable()

        evidence = {EvidenceKind.IP: command.ip}
        if product.hwid_protection:
            evidence[EvidenceKind.HWID] = command.hwid
        return EvidenceBinder.bind(license, evidence)

    async def _record_failure(self, attempt: "_Attempt", error: DomainException) -> None:
        if error.reason is None:
            # Storage and other non-rule failures carry no reason code.
            logger.error("Validation aborted: %s", error.message, exc_info=True)
            return
        if isinstance(error, CapacityExceededError):
            capacity_rejections_total.labels(kind=error.kind.value).inc()
        validations_total.labels(
            outcome=ValidationOutcome.FAILURE.value, reason=error.reason.value
        ).inc()
        logger.warning(
            "License validation failed: %s",
            error.reason.value,
            extra={"license_key": attempt.command.key, "reason": error.reason.value},
        )
        await self._log(attempt.failure(error))

    async def _log(self, entry: ValidationLog) -> None:
        await self.audit_log_repository.append_validation(entry)


class _Attempt:
    """Log context accumulated while a validation runs."""

    def __init__(self, command: ValidateLicenseCommand, location: Optional[Location]):
        self.command = command
        self.location = location
        self.discord_id = command.discord_id or NOT_AVAILABLE
        self.product_name = NOT_AVAILABLE

    def _fields(self):
        return {
            "license_key": self.command.key,
            "ip_address": self.command.ip,
            "hwid": self.command.hwid or None,
            "discord_id": self.discord_id,
            "product_name": self.product_name,
            "location": self.location,
        }

    def success(self) -> ValidationLog:
        return ValidationLog.success(**self._fields())

    def failure(self, error: DomainException) -> ValidationLog:
        return ValidationLog.failure(error.reason, **self._fields())
