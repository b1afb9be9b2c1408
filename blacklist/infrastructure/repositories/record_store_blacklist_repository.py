"""
Record store implementation of BlacklistRepository port.

The ``blacklist`` collection holds a single record.
"""
from typing import Any, Callable, Dict, List, Optional

from asgiref.sync import sync_to_async

from blacklist.domain.blacklist import Blacklist
from blacklist.ports.blacklist_repository import BlacklistRepository
from core.infrastructure.record_store import RecordStore, get_record_store

BLACKLIST_COLLECTION = "blacklist"


def blacklist_to_record(blacklist: Blacklist) -> Dict[str, Any]:
    return {
        "ips": list(blacklist.ips),
        "hwids": list(blacklist.hwids),
        "discordIds": list(blacklist.discord_ids),
    }


def blacklist_from_records(records: List[Dict[str, Any]]) -> Blacklist:
    if not records:
        return Blacklist()
    record = records[0]
    return Blacklist(
        ips=tuple(record.get("ips") or []),
        hwids=tuple(record.get("hwids") or []),
        discord_ids=tuple(record.get("discordIds") or []),
    )


class RecordStoreBlacklistRepository(BlacklistRepository):
    """Record store implementation of BlacklistRepository."""

    def __init__(self, store: Optional[RecordStore] = None):
        self._store = store

    @property
    def store(self) -> RecordStore:
        return self._store or get_record_store()

    def _read(self) -> Blacklist:
        return blacklist_from_records(self.store.read(BLACKLIST_COLLECTION))

    async def get(self) -> Blacklist:
        return await sync_to_async(self._read)()

    async def update(self, mutator: Callable[[Blacklist], Blacklist]) -> Blacklist:
        def _update(records):
            updated = mutator(blacklist_from_records(records))
            records[:] = [blacklist_to_record(updated)]
            return updated

        return await sync_to_async(self.store.transform)(BLACKLIST_COLLECTION, _update)
