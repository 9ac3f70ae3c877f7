"""Tests for the page context wiring."""

import pytest

from conftest import pump
from snapcrop.core.channel import BACKGROUND, PAGE, MessageChannel
from snapcrop.core.messages import ActivateSelection, ShowNotification
from snapcrop.models.geometry import ViewportMetrics
from snapcrop.page.page_context import PageContext
from snapcrop.page.selection_tracker import TrackerState


@pytest.fixture
def channel(qapp):
    return MessageChannel()


@pytest.fixture
def page(channel):
    return PageContext(channel, lambda: ViewportMetrics(1000, 800, 0, 120),
                       page_url_provider=lambda: "https://a.test")


class TestPageContext:
    """Tests for PageContext."""

    def test_selection_sent_to_background(self, channel, page):
        """Test a finalized drag becomes one capture-with-coordinates message."""
        received = []
        channel.register(BACKGROUND, received.append)

        page.tracker.pointer_down(10, 20, alt=True)
        page.tracker.pointer_up(60, 70)

        assert pump(lambda: received)
        assert received[0]["type"] == "capture-with-coordinates"
        assert received[0]["rect"] == {"x": 10, "y": 20, "width": 50, "height": 50}
        assert received[0]["viewportMetrics"]["scrollY"] == 120
        assert received[0]["pageUrl"] == "https://a.test"

    def test_show_notification(self, channel, page):
        shown = []
        page.notifier.toast_shown.connect(shown.append)

        channel.send(PAGE, ShowNotification("Crop stored", "success"))

        assert pump(lambda: shown)
        assert shown[0].message == "Crop stored"
        assert shown[0].kind == "success"
        page.notifier.clear()

    def test_activate_selection(self, channel, page):
        responses = []

        channel.send(PAGE, ActivateSelection(), responses.append)

        assert pump(lambda: responses)
        assert responses == [{"success": True}]
        assert page.tracker.state == TrackerState.ARMING
        assert len(page.notifier.active) == 1
        page.notifier.clear()

    def test_background_message_rejected(self, page):
        response = page.handle({"type": "clear-batch"})

        assert response["success"] is False
