"""
Record store abstraction (port) and in-memory implementation.

The record store maps a collection name to an ordered list of JSON-like
records. There is no partial update: callers take a snapshot with read()
or mutate a working copy inside transform(), which holds the collection
lock across the whole read, mutate and write cycle.
"""
import copy
import logging
import threading
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, TypeVar

from django.conf import settings
from django.utils.module_loading import import_string

from core.metrics import record_store_transform_duration_seconds

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
T = TypeVar("T")


class RecordStore(ABC):
    """
    Abstract record store port.

    Implementations own the durable bytes and guarantee that transform()
    calls on the same collection never interleave.
    """

    @abstractmethod
    def read(self, collection: str) -> List[Record]:
        """
        Return a snapshot of a collection.

        Args:
            collection: Collection name

        Returns:
            Deep copy of the records (empty list for unknown collections)
        """
        pass

    @abstractmethod
    def transform(self, collection: str, fn: Callable[[List[Record]], T]) -> T:
        """
        Atomically mutate a collection.

        ``fn`` receives a working copy of the records and mutates it in
        place. If it returns, the whole list replaces the stored collection
        and its return value is passed through. If it raises, nothing is
        written and the exception propagates.

        Args:
            collection: Collection name
            fn: Mutation callback

        Returns:
            Whatever ``fn`` returned
        """
        pass

    def append(self, collection: str, record: Record, limit: Optional[int] = None) -> Record:
        """
        Append a record, dropping the oldest ones beyond ``limit``.

        Args:
            collection: Collection name
            record: Record to append
            limit: Maximum number of records to keep (None keeps all)

        Returns:
            The appended record
        """

        def _append(records: List[Record]) -> Record:
            records.append(record)
            if limit is not None and len(records) > limit:
                del records[: len(records) - limit]
            return record

        return self.transform(collection, _append)


class CollectionLocks:
    """Lazily created per-collection locks."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}

    def __call__(self, collection: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(collection)
            if lock is None:
                lock = self._locks[collection] = threading.Lock()
            return lock


class InMemoryRecordStore(RecordStore):
    """
    Process-local record store.

    Used by the test suite and by single-process deployments that do not
    need durability across restarts.
    """

    def __init__(self, initial: Optional[Dict[str, List[Record]]] = None):
        """Initialize the store with optional seed collections."""
        self._collections: Dict[str, List[Record]] = copy.deepcopy(initial or {})
        self._lock_for = CollectionLocks()

    def read(self, collection: str) -> List[Record]:
        with self._lock_for(collection):
            return copy.deepcopy(self._collections.get(collection, []))

    def transform(self, collection: str, fn: Callable[[List[Record]], T]) -> T:
        timer = record_store_transform_duration_seconds.labels(collection=collection)
        with self._lock_for(collection), timer.time():
            working = copy.deepcopy(self._collections.get(collection, []))
            result = fn(working)
            self._collections[collection] = working
            return result


@lru_cache(maxsize=None)
def get_record_store() -> RecordStore:
    """
    Return the process-wide record store configured by RECORD_STORE_BACKEND.

    Returns:
        RecordStore instance (created once per process)
    """
    backend = getattr(
        settings,
        "RECORD_STORE_BACKEND",
        "core.infrastructure.record_store.InMemoryRecordStore",
    )
    logger.info("Using record store backend %s", backend)
    return import_string(backend)()
