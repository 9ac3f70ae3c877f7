"""Tests for batch count polling."""

from conftest import make_record, pump
from snapcrop.core.batch_accumulator import BatchAccumulator
from snapcrop.core.capture_coordinator import CaptureCoordinator
from snapcrop.core.channel import MessageChannel
from snapcrop.core.messages import StoreCropForBatch
from snapcrop.ui.batch_monitor import BatchCountMonitor


def test_monitor_tracks_count(qapp, settings, capture_provider, storage):
    """Test the monitor reports the count held by the coordinator."""
    channel = MessageChannel()
    coordinator = CaptureCoordinator(settings, capture_provider, BatchAccumulator(storage), channel)
    monitor = BatchCountMonitor(channel, interval_ms=10)
    counts = []
    monitor.count_changed.connect(counts.append)

    coordinator.handle(StoreCropForBatch(make_record()))
    coordinator.handle(StoreCropForBatch(make_record()))
    monitor.start()

    assert pump(lambda: counts)
    assert counts == [2]
    assert monitor.active

    coordinator.accumulator.clear()
    assert pump(lambda: counts[-1] == 0)
    monitor.stop()
    assert not monitor.active
