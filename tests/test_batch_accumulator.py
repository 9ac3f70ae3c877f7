"""Tests for the batch queue and its persisted cache."""

import json

import pytest

from conftest import make_record
from snapcrop.core.batch_accumulator import BatchAccumulator
from snapcrop.core.errors import StorageFailure, ValidationFailure
from snapcrop.core.storage import BATCH_KEY, BatchStorage


class FailingStorage(BatchStorage):
    """Storage whose writes always fail."""

    def save_batch(self, crops):
        raise StorageFailure("storage write failed: quota exceeded")


class TestBatchAccumulator:
    """Tests for BatchAccumulator."""

    def test_append_preserves_order(self, storage):
        """Test records come back in insertion order."""
        acc = BatchAccumulator(storage)
        for url in ("https://a.test", "https://b.test", "https://c.test"):
            acc.append(make_record(pageUrl=url))

        assert acc.count() == 3
        assert [r.page_url for r in acc.drain_for_export()] == [
            "https://a.test", "https://b.test", "https://c.test",
        ]

    def test_append_returns_count(self, storage):
        acc = BatchAccumulator(storage)

        first = acc.append(make_record())
        second = acc.append(make_record())

        assert first.count == 1
        assert second == (2, True)

    def test_invalid_record_leaves_queue_unchanged(self, storage):
        """Test a rejected record is not appended."""
        acc = BatchAccumulator(storage)
        acc.append(make_record())

        with pytest.raises(ValidationFailure):
            acc.append(make_record(height=None))

        assert acc.count() == 1

    def test_persisted_and_restored(self, storage):
        """Test a new accumulator restores the stored queue."""
        acc = BatchAccumulator(storage)
        acc.append(make_record(pageUrl="https://a.test"))
        acc.append(make_record(pageUrl="https://b.test"))

        with open(storage.path, encoding="utf-8") as f:
            assert len(json.load(f)[BATCH_KEY]) == 2

        restored = BatchAccumulator(BatchStorage(storage.path))
        assert [r.page_url for r in restored] == ["https://a.test", "https://b.test"]

    def test_restore_skips_invalid(self, storage):
        """Test corrupt stored entries are dropped on restore."""
        storage.save_batch([make_record(), {"dataUri": "bogus"}, make_record()])

        assert BatchAccumulator(storage).count() == 2

    def test_restore_from_corrupt_file(self, storage):
        """Test an unreadable store starts an empty queue."""
        with open(storage.path, "w", encoding="utf-8") as f:
            f.write("{not json")

        acc = BatchAccumulator(storage)

        assert acc.count() == 0
        assert acc.append(make_record()).persisted is True

    def test_persistence_failure_not_rolled_back(self, tmp_path):
        """Test memory stays authoritative when the store cannot be written."""
        acc = BatchAccumulator(FailingStorage(str(tmp_path / "batch.json")))

        result = acc.append(make_record())

        assert result.persisted is False
        assert acc.count() == 1

    def test_drain_does_not_clear(self, storage):
        """Test drain_for_export returns a copy and keeps the queue."""
        acc = BatchAccumulator(storage)
        acc.append(make_record())

        drained = acc.drain_for_export()
        drained.clear()

        assert acc.count() == 1

    def test_clear(self, storage):
        acc = BatchAccumulator(storage)
        acc.append(make_record())

        assert acc.clear() is True
        assert acc.count() == 0
        assert storage.load_batch() == []

    def test_without_storage(self):
        acc = BatchAccumulator()

        assert acc.append(make_record()) == (1, True)
