"""
License lifecycle handlers.

Handlers for renew, status, delete, sub-user and identity commands.
Each mutation is a single atomic repository update; the domain entity
raises inside the update so a failed rule never writes anything.
"""
import logging

from core.domain.exceptions import CapacityExceededError, InvalidInputError
from core.domain.value_objects import EvidenceKind
from core.infrastructure.events import event_bus
from core.metrics import (
    capacity_rejections_total,
    license_status_changes_total,
    licenses_deleted_total,
    licenses_renewed_total,
)
from licenses.application.commands.delete_license import DeleteLicenseCommand
from licenses.application.commands.manage_sub_users import (
    AddSubUserCommand,
    RemoveSubUserCommand,
)
from licenses.application.commands.patch_identities import PatchIdentitiesCommand
from licenses.application.commands.renew_license import RenewLicenseCommand
from licenses.application.commands.set_license_status import SetLicenseStatusCommand
from licenses.application.dto.license_dto import LicenseDTO
from licenses.domain.events import (
    LicenseDeleted,
    LicenseIdentitiesPatched,
    LicenseRenewed,
    LicenseStatusChanged,
    SubUserAdded,
    SubUserRemoved,
)
from licenses.domain.license import License
from licenses.domain.services import EvidenceBinder
from licenses.ports.license_repository import LicenseRepository
from products.ports.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class LicenseCommandHandler:
    """Shared wiring for handlers that return a LicenseDTO."""

    def __init__(
        self,
        license_repository: LicenseRepository,
        product_repository: ProductRepository = None,
    ):
        """Initialize handler with repositories."""
        self.license_repository = license_repository
        self.product_repository = product_repository

    async def to_dto(self, license: License) -> LicenseDTO:
        product = None
        if self.product_repository:
            product = await self.product_repository.find_by_id(license.product_id)
        return LicenseDTO.from_entity(license, product.name if product else None)


class RenewLicenseHandler(LicenseCommandHandler):
    """Handler for RenewLicenseCommand."""

    async def handle(self, command: RenewLicenseCommand) -> LicenseDTO:
        """
        Handle renew license command.

        Args:
            command: RenewLicenseCommand

        Returns:
            Renewed license

        Raises:
            LicenseNotFoundError: If license not found
        """
        renewed = await self.license_repository.update(
            command.key, lambda license: license.renew(command.expiration_date)
        )
        licenses_renewed_total.inc()

        await event_bus.publish(
            LicenseRenewed(license_key=renewed.key, new_expiration=command.expiration_date)
        )

        return await self.to_dto(renewed)


class SetLicenseStatusHandler(LicenseCommandHandler):
    """Handler for SetLicenseStatusCommand."""

    async def handle(self, command: SetLicenseStatusCommand) -> LicenseDTO:
        """
        Handle set status command. Expiry is left untouched.

        Raises:
            LicenseNotFoundError: If license not found
        """
        updated = await self.license_repository.update(
            command.key, lambda license: license.with_status(command.status)
        )
        license_status_changes_total.labels(status=command.status.value).inc()

        await event_bus.publish(
            LicenseStatusChanged(license_key=updated.key, status=command.status.value)
        )

        return await self.to_dto(updated)


class DeleteLicenseHandler(LicenseCommandHandler):
    """Handler for DeleteLicenseCommand."""

    async def handle(self, command: DeleteLicenseCommand) -> None:
        """
        Handle delete license command.

        Raises:
            LicenseNotFoundError: If license not found
        """
        deleted = await self.license_repository.delete(command.key)
        licenses_deleted_total.inc()
        logger.info("License deleted", extra={"license_key": deleted.key})

        await event_bus.publish(LicenseDeleted(license_key=deleted.key))


class AddSubUserHandler(LicenseCommandHandler):
    """Handler for AddSubUserCommand."""

    async def handle(self, command: AddSubUserCommand) -> LicenseDTO:
        """
        Handle add sub-user command.

        Raises:
            LicenseNotFoundError: If license not found
            OwnerAsSubUserError: If the identity owns the license
            DuplicateSubUserError: If the identity is already a sub-user
        """
        updated = await self.license_repository.update(
            command.key, lambda license: license.add_sub_user(command.discord_id)
        )

        await event_bus.publish(
            SubUserAdded(license_key=updated.key, discord_id=command.discord_id)
        )

        return await self.to_dto(updated)


class RemoveSubUserHandler(LicenseCommandHandler):
    """Handler for RemoveSubUserCommand."""

    async def handle(self, command: RemoveSubUserCommand) -> LicenseDTO:
        """
        Handle remove sub-user command.

        Raises:
            LicenseNotFoundError: If license not found
            SubUserNotFoundError: If the identity is not a sub-user
        """
        updated = await self.license_repository.update(
            command.key, lambda license: license.remove_sub_user(command.discord_id)
        )

        await event_bus.publish(
            SubUserRemoved(license_key=updated.key, discord_id=command.discord_id)
        )

        return await self.to_dto(updated)


class PatchIdentitiesHandler(LicenseCommandHandler):
    """Handler for PatchIdentitiesCommand."""

    async def handle(self, command: PatchIdentitiesCommand) -> LicenseDTO:
        """
        Bind an IP and/or HWID through the capacity policy.

        Raises:
            InvalidInputError: If neither ip nor hwid is given
            LicenseNotFoundError: If license not found
            CapacityExceededError: If an allow-list is full
            EvidenceNotTrackedError: If tracking is disabled for a given kind
        """
        if not command.ip and not command.hwid:
            raise InvalidInputError("IP or HWID is required")

        evidence = {EvidenceKind.IP: command.ip, EvidenceKind.HWID: command.hwid}
        try:
            updated = await self.license_repository.update(
                command.key,
                lambda license: EvidenceBinder.bind(license, evidence, reject_untracked=True)[0],
            )
        except CapacityExceededError as e:
            capacity_rejections_total.labels(kind=e.kind.value).inc()
            raise

        await event_bus.publish(
            LicenseIdentitiesPatched(license_key=updated.key, ip=command.ip, hwid=command.hwid)
        )

        return await self.to_dto(updated)
