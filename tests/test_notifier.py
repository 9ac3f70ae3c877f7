"""Tests for transient notifications."""

from conftest import pump
from snapcrop.page.notifier import Notifier


class TestNotifier:
    """Tests for Notifier."""

    def test_show_then_removed(self, qapp):
        """Test a toast fades and is removed after its timers fire."""
        notifier = Notifier(display_ms=10, fade_ms=10)
        fading, removed = [], []
        notifier.toast_fading.connect(fading.append)
        notifier.toast_removed.connect(removed.append)

        toast = notifier.show("Saved", "success")
        assert notifier.active == [toast]

        assert pump(lambda: removed)
        assert fading == [toast.toast_id]
        assert removed == [toast.toast_id]
        assert notifier.active == []

    def test_unknown_kind_falls_back_to_info(self, qapp):
        notifier = Notifier()

        assert notifier.show("hi", "warning").kind == "info"
        notifier.clear()

    def test_dismiss_stops_timer(self, qapp):
        """Test early removal cancels the pending timer."""
        notifier = Notifier(display_ms=20, fade_ms=20)
        removed = []
        notifier.toast_removed.connect(removed.append)
        fading = []
        notifier.toast_fading.connect(fading.append)

        toast = notifier.show("bye")
        assert notifier.dismiss(toast.toast_id) is True

        pump(timeout=0.2)
        assert removed == [toast.toast_id]
        assert fading == []
        assert notifier.dismiss(toast.toast_id) is False

    def test_ids_unique(self, qapp):
        notifier = Notifier()
        ids = {notifier.show(str(i)).toast_id for i in range(5)}

        assert len(ids) == 5
        notifier.clear()
        assert notifier.active == []
