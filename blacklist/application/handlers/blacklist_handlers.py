"""
Blacklist handlers.

Handlers for manual entries and for whole-user blacklisting.
"""
import logging
from typing import Iterable, List, Set, Tuple

from blacklist.application.commands.blacklist_commands import (
    AddBlacklistEntryCommand,
    BlacklistLicenseIdentifiersCommand,
    BlacklistUserCommand,
    RemoveBlacklistEntryCommand,
    UnblacklistUserCommand,
)
from blacklist.domain.blacklist import Blacklist, BlacklistEntryType
from blacklist.domain.events import (
    BlacklistEntryAdded,
    BlacklistEntryRemoved,
    LicenseIdentifiersBlacklisted,
    UserBlacklisted,
    UserUnblacklisted,
)
from blacklist.ports.blacklist_repository import BlacklistRepository
from core.domain.exceptions import (
    BlacklistEntryNotFoundError,
    DuplicateBlacklistEntryError,
    LicenseNotFoundError,
)
from core.domain.value_objects import LicenseStatus
from core.infrastructure.events import event_bus
from core.metrics import blacklist_changes_total
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseRepository

logger = logging.getLogger(__name__)


def _identifiers(licenses: Iterable[License]) -> Tuple[Set[str], Set[str]]:
    ips: Set[str] = set()
    hwids: Set[str] = set()
    for license in licenses:
        ips.update(license.allowed_ips)
        hwids.update(license.allowed_hwids)
    return ips, hwids


def _ordered(licenses: List[License]) -> Tuple[List[str], List[str]]:
    ips: List[str] = []
    hwids: List[str] = []
    for license in licenses:
        ips.extend(ip for ip in license.allowed_ips if ip not in ips)
        hwids.extend(hwid for hwid in license.allowed_hwids if hwid not in hwids)
    return ips, hwids


class BlacklistHandler:
    """Shared wiring for blacklist handlers."""

    def __init__(
        self,
        blacklist_repository: BlacklistRepository,
        license_repository: LicenseRepository = None,
    ):
        """Initialize handler with repositories."""
        self.blacklist_repository = blacklist_repository
        self.license_repository = license_repository


class GetBlacklistHandler(BlacklistHandler):
    """Returns the current blacklist."""

    async def handle(self) -> Blacklist:
        return await self.blacklist_repository.get()


class AddBlacklistEntryHandler(BlacklistHandler):
    """Handler for AddBlacklistEntryCommand."""

    async def handle(self, command: AddBlacklistEntryCommand) -> Blacklist:
        """
        Raises:
            DuplicateBlacklistEntryError: If the value is already listed
        """
        updated = await self.blacklist_repository.update(
            lambda blacklist: blacklist.add(command.entry_type, command.value)
        )
        blacklist_changes_total.labels(action="add").inc()

        await event_bus.publish(
            BlacklistEntryAdded(entry_type=command.entry_type.value, value=command.value)
        )
        return updated


class RemoveBlacklistEntryHandler(BlacklistHandler):
    """Handler for RemoveBlacklistEntryCommand."""

    async def handle(self, command: RemoveBlacklistEntryCommand) -> Blacklist:
        """
        Raises:
            BlacklistEntryNotFoundError: If the value is not listed
        """
        updated = await self.blacklist_repository.update(
            lambda blacklist: blacklist.remove(command.entry_type, command.value)
        )
        blacklist_changes_total.labels(action="remove").inc()

        await event_bus.publish(
            BlacklistEntryRemoved(entry_type=command.entry_type.value, value=command.value)
        )
        return updated


class BlacklistUserHandler(BlacklistHandler):
    """
    Handler for BlacklistUserCommand.

    Deactivates every license the user owns, then blacklists the user and
    every IP and HWID those licenses had bound. Licenses are deactivated
    first so no new evidence can be admitted in between.
    """

    async def handle(self, command: BlacklistUserCommand) -> Blacklist:
        """
        Raises:
            DuplicateBlacklistEntryError: If the user is already blacklisted
        """
        discord_id = command.discord_id
        current = await self.blacklist_repository.get()
        if current.is_blacklisted(discord_id):
            raise DuplicateBlacklistEntryError("User is already blacklisted")

        deactivated = await self.license_repository.update_many(
            lambda license: license.discord_id == discord_id,
            lambda license: license.with_status(LicenseStatus.INACTIVE),
        )
        ips, hwids = _ordered(deactivated)

        def _blacklist(blacklist: Blacklist) -> Blacklist:
            if blacklist.is_blacklisted(discord_id):
                raise DuplicateBlacklistEntryError("User is already blacklisted")
            return blacklist.add(BlacklistEntryType.DISCORD_ID, discord_id).with_identifiers(
                ips, hwids
            )

        updated = await self.blacklist_repository.update(_blacklist)
        blacklist_changes_total.labels(action="blacklist_user").inc()
        logger.info(
            "User blacklisted",
            extra={"discord_id": discord_id, "licenses_deactivated": len(deactivated)},
        )

        await event_bus.publish(
            UserBlacklisted(discord_id=discord_id, license_keys=[lic.key for lic in deactivated])
        )
        return updated


class UnblacklistUserHandler(BlacklistHandler):
    """
    Handler for UnblacklistUserCommand.

    Removes the user and the identifiers bound to their licenses, except
    identifiers also bound to licenses of other blacklisted owners.
    Licenses stay inactive.
    """

    async def handle(self, command: UnblacklistUserCommand) -> Blacklist:
        """
        Raises:
            BlacklistEntryNotFoundError: If the user is not blacklisted
        """
        discord_id = command.discord_id
        licenses = await self.license_repository.list_all()

        def _unblacklist(blacklist: Blacklist) -> Blacklist:
            if not blacklist.is_blacklisted(discord_id):
                raise BlacklistEntryNotFoundError("User is not blacklisted")
            own_ips, own_hwids = _identifiers(
                lic for lic in licenses if lic.discord_id == discord_id
            )
            shared_ips, shared_hwids = _identifiers(
                lic
                for lic in licenses
                if lic.discord_id != discord_id and blacklist.is_blacklisted(lic.discord_id)
            )
            return blacklist.remove(BlacklistEntryType.DISCORD_ID, discord_id).without_identifiers(
                own_ips - shared_ips, own_hwids - shared_hwids
            )

        updated = await self.blacklist_repository.update(_unblacklist)
        blacklist_changes_total.labels(action="unblacklist_user").inc()

        await event_bus.publish(
            UserUnblacklisted(
                discord_id=discord_id,
                license_keys=[lic.key for lic in licenses if lic.discord_id == discord_id],
            )
        )
        return updated


class BlacklistLicenseIdentifiersHandler(BlacklistHandler):
    """Handler for BlacklistLicenseIdentifiersCommand."""

    async def handle(self, command: BlacklistLicenseIdentifiersCommand) -> Blacklist:
        """
        Raises:
            LicenseNotFoundError: If the key is absent
        """
        license = await self.license_repository.find_by_key(command.key)
        if not license:
            raise LicenseNotFoundError()

        updated = await self.blacklist_repository.update(
            lambda blacklist: blacklist.with_identifiers(
                license.allowed_ips, license.allowed_hwids
            )
        )
        blacklist_changes_total.labels(action="blacklist_license").inc()

        await event_bus.publish(LicenseIdentifiersBlacklisted(license_key=license.key))
        return updated
