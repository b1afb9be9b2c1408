"""
Record store access to the service settings document.

The ``settings`` collection holds a single record.
"""
from typing import Any, Callable, Dict, Optional

from asgiref.sync import sync_to_async

from core.domain.service_settings import DEFAULT_SETTINGS, ServiceSettings, merge_defaults
from core.infrastructure.record_store import RecordStore, get_record_store

SETTINGS_COLLECTION = "settings"


class RecordStoreSettingsRepository:
    """Loads and updates the service settings document."""

    def __init__(self, store: Optional[RecordStore] = None):
        self._store = store

    @property
    def store(self) -> RecordStore:
        return self._store or get_record_store()

    def load(self) -> ServiceSettings:
        """Synchronous load, for middleware and management commands."""
        records = self.store.read(SETTINGS_COLLECTION)
        return ServiceSettings.from_record(records[0] if records else None)

    async def get(self) -> ServiceSettings:
        return await sync_to_async(self.load)()

    def save(self, mutator: Callable[[Dict[str, Any]], None]) -> ServiceSettings:
        """
        Atomically edit the merged settings document in place.

        Args:
            mutator: Function receiving the document dict to modify

        Returns:
            The stored settings
        """

        def _save(records):
            document = merge_defaults(records[0] if records else {}, DEFAULT_SETTINGS)
            mutator(document)
            records[:] = [document]
            return ServiceSettings(document)

        return self.store.transform(SETTINGS_COLLECTION, _save)
