"""
Django implementation of the RecordStore port.

Each collection is one StoredCollection row. A transform takes the
in-process collection lock, then opens a transaction and locks the row
with SELECT ... FOR UPDATE, so writers are serialized both between
threads of one worker and between worker processes sharing a database.
"""
import copy
import logging
from typing import Callable, List, TypeVar

from django.db import DatabaseError, transaction

from core.domain.exceptions import StorageError
from core.infrastructure.models import StoredCollection
from core.infrastructure.record_store import CollectionLocks, Record, RecordStore
from core.metrics import record_store_transform_duration_seconds

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DjangoRecordStore(RecordStore):
    """Record store backed by the default Django database."""

    def __init__(self):
        self._lock_for = CollectionLocks()

    def read(self, collection: str) -> List[Record]:
        try:
            row = StoredCollection.objects.filter(name=collection).first()
        except DatabaseError as e:
            logger.error("Failed to read collection %s: %s", collection, e, exc_info=True)
            raise StorageError(f"Could not read collection {collection}") from e
        return copy.deepcopy(row.records) if row else []

    def transform(self, collection: str, fn: Callable[[List[Record]], T]) -> T:
        timer = record_store_transform_duration_seconds.labels(collection=collection)
        with self._lock_for(collection), timer.time():
            try:
                with transaction.atomic():
                    row, _ = StoredCollection.objects.select_for_update().get_or_create(
                        name=collection, defaults={"records": []}
                    )
                    working = copy.deepcopy(row.records)
                    result = fn(working)
                    row.records = working
                    row.save(update_fields=["records", "updated_at"])
                    return result
            except DatabaseError as e:
                logger.error(
                    "Failed to write collection %s: %s", collection, e, exc_info=True
                )
                raise StorageError(f"Could not write collection {collection}") from e
