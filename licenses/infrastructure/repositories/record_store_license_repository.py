"""
Record store implementation of LicenseRepository port.

This adapter converts between domain entities and the camelCase JSON
records kept in the ``licenses`` collection.
"""
from typing import Any, Callable, Dict, List, Optional

from asgiref.sync import sync_to_async

from core.domain.exceptions import DuplicateLicenseKeyError, LicenseNotFoundError
from core.domain.value_objects import Capacity, LicenseStatus
from core.infrastructure.record_store import RecordStore, get_record_store
from core.infrastructure.serialization import parse_instant, to_iso
from licenses.domain.license import License
from licenses.ports.license_repository import LicenseMutator, LicenseRepository

LICENSES_COLLECTION = "licenses"


def license_to_record(license: License) -> Dict[str, Any]:
    """
    Convert a domain entity to its stored record.

    Args:
        license: License domain entity

    Returns:
        JSON-serializable record
    """
    return {
        "id": license.id,
        "key": license.key,
        "productId": license.product_id,
        "discordId": license.discord_id,
        "discordUsername": license.discord_username,
        "email": license.email,
        "platform": license.platform,
        "platformUserId": license.platform_user_id,
        "subUserDiscordIds": list(license.sub_user_discord_ids),
        "status": license.status.value,
        "expiresAt": to_iso(license.expires_at),
        "allowedIps": list(license.allowed_ips),
        "maxIps": license.max_ips.to_sentinel(),
        "allowedHwids": list(license.allowed_hwids),
        "maxHwids": license.max_hwids.to_sentinel(),
        "validations": license.validations,
        "createdAt": to_iso(license.created_at),
        "updatedAt": to_iso(license.updated_at),
    }


# Older records carry an "expired" status; expiry now lives in expiresAt.
LEGACY_STATUSES = {"expired": LicenseStatus.INACTIVE}


def _status_from_record(value: Optional[str]) -> LicenseStatus:
    if value is None:
        return LicenseStatus.ACTIVE
    return LEGACY_STATUSES.get(value) or LicenseStatus(value)


def license_from_record(record: Dict[str, Any]) -> License:
    """
    Convert a stored record to a domain entity.

    Args:
        record: Stored license record

    Returns:
        License domain entity
    """
    owner = record["discordId"]
    created_at = parse_instant(record.get("createdAt"))
    return License(
        id=record["id"],
        key=record["key"],
        product_id=record["productId"],
        discord_id=owner,
        discord_username=record.get("discordUsername"),
        email=record.get("email"),
        platform=record.get("platform") or "custom",
        platform_user_id=record.get("platformUserId"),
        sub_user_discord_ids=tuple(
            i for i in record.get("subUserDiscordIds") or [] if i != owner
        ),
        status=_status_from_record(record.get("status")),
        expires_at=parse_instant(record.get("expiresAt")),
        allowed_ips=tuple(record.get("allowedIps") or []),
        max_ips=Capacity.from_sentinel(record.get("maxIps", 1)),
        allowed_hwids=tuple(record.get("allowedHwids") or []),
        max_hwids=Capacity.from_sentinel(record.get("maxHwids", 1)),
        validations=int(record.get("validations") or 0),
        created_at=created_at,
        updated_at=parse_instant(record.get("updatedAt")) or created_at,
    )


def _index_of(records: List[Dict[str, Any]], key: str) -> int:
    for index, record in enumerate(records):
        if record.get("key") == key:
            return index
    raise LicenseNotFoundError()


class RecordStoreLicenseRepository(LicenseRepository):
    """
    Record store implementation of LicenseRepository.

    Reads work on snapshots; every write is a single transform() of the
    license collection.
    """

    def __init__(self, store: Optional[RecordStore] = None):
        """
        Initialize repository.

        Args:
            store: Record store (defaults to the process-wide store)
        """
        self._store = store

    @property
    def store(self) -> RecordStore:
        return self._store or get_record_store()

    def _snapshot(self) -> List[License]:
        return [license_from_record(r) for r in self.store.read(LICENSES_COLLECTION)]

    async def list_all(self) -> List[License]:
        return await sync_to_async(self._snapshot)()

    async def find_by_key(self, key: str) -> Optional[License]:
        for license in await self.list_all():
            if license.key == key:
                return license
        return None

    async def find_by_owner(self, discord_id: str) -> List[License]:
        return [lic for lic in await self.list_all() if lic.discord_id == discord_id]

    async def add(self, license: License) -> License:
        def _add(records):
            if any(r.get("key") == license.key for r in records):
                raise DuplicateLicenseKeyError()
            records.insert(0, license_to_record(license))
            return license

        return await sync_to_async(self.store.transform)(LICENSES_COLLECTION, _add)

    async def update(self, key: str, mutator: LicenseMutator) -> License:
        def _update(records):
            index = _index_of(records, key)
            updated = mutator(license_from_record(records[index]))
            records[index] = license_to_record(updated)
            return updated

        return await sync_to_async(self.store.transform)(LICENSES_COLLECTION, _update)

    async def update_many(
        self, predicate: Callable[[License], bool], mutator: LicenseMutator
    ) -> List[License]:
        def _update_many(records):
            updated = []
            for index, record in enumerate(records):
                license = license_from_record(record)
                if predicate(license):
                    license = mutator(license)
                    records[index] = license_to_record(license)
                    updated.append(license)
            return updated

        return await sync_to_async(self.store.transform)(LICENSES_COLLECTION, _update_many)

    async def delete(self, key: str) -> License:
        def _delete(records):
            return license_from_record(records.pop(_index_of(records, key)))

        return await sync_to_async(self.store.transform)(LICENSES_COLLECTION, _delete)
