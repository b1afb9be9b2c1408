"""
Unit tests for the in-memory record store.
"""
import threading

import pytest

from core.infrastructure.record_store import InMemoryRecordStore, get_record_store


class TestInMemoryRecordStore:
    """Tests for InMemoryRecordStore."""

    def test_unknown_collection_reads_empty(self):
        """Test reading a collection that was never written."""
        assert InMemoryRecordStore().read("licenses") == []

    def test_read_returns_snapshot(self):
        """Test callers cannot mutate stored records through a read."""
        store = InMemoryRecordStore({"licenses": [{"key": "A"}]})
        snapshot = store.read("licenses")
        snapshot[0]["key"] = "B"
        snapshot.append({"key": "C"})
        assert store.read("licenses") == [{"key": "A"}]

    def test_initial_collections_are_copied(self):
        """Test seed data is not shared with the caller."""
        seed = {"licenses": [{"key": "A"}]}
        store = InMemoryRecordStore(seed)
        seed["licenses"].append({"key": "B"})
        assert len(store.read("licenses")) == 1

    def test_transform_writes_and_returns(self):
        """Test a transform replaces the collection and passes its result through."""
        store = InMemoryRecordStore()

        def _add(records):
            records.append({"key": "A"})
            return len(records)

        assert store.transform("licenses", _add) == 1
        assert store.read("licenses") == [{"key": "A"}]

    def test_failed_transform_writes_nothing(self):
        """Test an exception inside the callback leaves the collection untouched."""
        store = InMemoryRecordStore({"licenses": [{"key": "A"}]})

        def _fail(records):
            records.clear()
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            store.transform("licenses", _fail)
        assert store.read("licenses") == [{"key": "A"}]

    def test_append_trims_oldest(self):
        """Test append keeps only the newest records beyond the limit."""
        store = InMemoryRecordStore()
        for index in range(5):
            store.append("logs", {"n": index}, limit=3)
        assert store.read("logs") == [{"n": 2}, {"n": 3}, {"n": 4}]

    def test_append_without_limit_keeps_everything(self):
        """Test append without a limit."""
        store = InMemoryRecordStore()
        for index in range(5):
            store.append("logs", {"n": index})
        assert len(store.read("logs")) == 5

    def test_concurrent_transforms_do_not_lose_updates(self):
        """Test read-modify-write cycles on one collection never interleave."""
        store = InMemoryRecordStore({"counters": [{"value": 0}]})

        def _increment(records):
            records[0]["value"] += 1

        def _worker():
            for _ in range(200):
                store.transform("counters", _increment)

        threads = [threading.Thread(target=_worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert store.read("counters") == [{"value": 1600}]


class TestGetRecordStore:
    """Tests for the process-wide store."""

    def test_uses_configured_backend(self):
        """Test the test settings select the in-memory backend."""
        assert isinstance(get_record_store(), InMemoryRecordStore)

    def test_is_cached(self):
        """Test the store is created once per process."""
        assert get_record_store() is get_record_store()
