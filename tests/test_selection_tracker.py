"""Tests for the Alt-drag selection state machine."""

import pytest

from snapcrop.models.geometry import Rectangle, ViewportMetrics
from snapcrop.page.selection_tracker import ESCAPE, MODIFIER, SelectionTracker, TrackerState


@pytest.fixture
def tracker(qapp):
    metrics = ViewportMetrics(1000, 800, scroll_x=0, scroll_y=40)
    t = SelectionTracker(lambda: metrics)
    t.finalized = []
    t.selection_finalized.connect(lambda rect, m: t.finalized.append((rect, m)))
    return t


class TestSelectionTracker:
    """Tests for SelectionTracker."""

    def test_drag_emits_once(self, tracker):
        """Test a drag ending in pointer-up emits exactly one selection."""
        tracker.key_down(MODIFIER, alt=True)
        tracker.pointer_down(10, 10, alt=True)
        tracker.pointer_move(50, 40)
        tracker.pointer_move(110, 60)
        tracker.pointer_up(110, 60)

        assert len(tracker.finalized) == 1
        rect, metrics = tracker.finalized[0]
        assert rect == Rectangle(10, 10, 100, 50)
        assert metrics.scroll_y == 40
        assert tracker.state == TrackerState.IDLE

    def test_reverse_drag_normalised(self, tracker):
        """Test dragging up-left still yields a top-left origin."""
        tracker.pointer_down(200, 150, alt=True)
        rect = tracker.pointer_up(50, 100)

        assert rect == Rectangle(50, 100, 150, 50)

    def test_negative_coordinates_clamped(self, tracker):
        """Test pointer positions left of or above the viewport clamp to zero."""
        tracker.pointer_down(30, 20, alt=True)
        rect = tracker.pointer_up(-15, -40)

        assert rect.x == 0
        assert rect.y == 0
        assert rect.width == 30
        assert rect.height == 20

    def test_pointer_down_without_modifier_ignored(self, tracker):
        """Test a plain click does not start a selection."""
        tracker.pointer_down(10, 10, alt=False)

        assert tracker.state == TrackerState.IDLE
        assert tracker.pointer_up(100, 100) is None
        assert tracker.finalized == []

    def test_escape_aborts_without_emitting(self, tracker):
        """Test Escape during a drag resets and emits nothing."""
        cleared = []
        tracker.bbox_changed.connect(cleared.append)
        tracker.pointer_down(10, 10, alt=True)
        tracker.pointer_move(80, 80)
        tracker.key_down(ESCAPE)

        assert tracker.state == TrackerState.IDLE
        assert cleared[-1] is None
        assert tracker.pointer_up(80, 80) is None
        assert tracker.finalized == []

    def test_modifier_release_while_armed(self, tracker):
        """Test releasing Alt before dragging returns to idle."""
        tracker.key_down(MODIFIER, alt=True)
        assert tracker.state == TrackerState.ARMING
        assert tracker.selectable is False

        tracker.key_up(MODIFIER, alt=False)

        assert tracker.state == TrackerState.IDLE
        assert tracker.selectable is True

    def test_modifier_release_while_dragging_keeps_drag(self, tracker):
        """Test releasing Alt mid-drag does not cancel the selection."""
        tracker.key_down(MODIFIER, alt=True)
        tracker.pointer_down(0, 0, alt=True)
        tracker.key_up(MODIFIER, alt=False)
        tracker.pointer_up(20, 20)

        assert len(tracker.finalized) == 1

    def test_activate_allows_drag_without_modifier(self, tracker):
        """Test the activate command arms the tracker without Alt."""
        tracker.activate()
        tracker.pointer_down(5, 5)
        tracker.pointer_up(25, 15)

        assert tracker.finalized[0][0] == Rectangle(5, 5, 20, 10)

    def test_zero_area_drag_still_emits(self, tracker):
        """Test a click-release still finalizes (rejected later by the cropper)."""
        tracker.pointer_down(40, 40, alt=True)
        rect = tracker.pointer_up(40, 40)

        assert rect.area == 0
        assert len(tracker.finalized) == 1
