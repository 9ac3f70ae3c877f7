"""Pytest configuration and fixtures for snapcrop tests."""

import io
import os
import time

import pytest
from PIL import Image

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt5.QtCore import QCoreApplication  # noqa: E402

from snapcrop.config.settings import Settings  # noqa: E402
from snapcrop.core.storage import BatchStorage  # noqa: E402
from snapcrop.models.crop import now_millis  # noqa: E402
from snapcrop.utils.helpers import encode_data_uri  # noqa: E402


@pytest.fixture(scope="session")
def qapp():
    """One Qt application for the whole session (queued signals and timers need it)."""
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


def pump(condition=None, timeout=2.0):
    """Run the Qt event loop until condition() is true or timeout expires."""
    app = QCoreApplication.instance()
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        app.processEvents()
        if condition is not None and condition():
            return True
        time.sleep(0.005)
    return condition() if condition is not None else True


def make_png_uri(width=200, height=100, color=(200, 40, 40)):
    """Encode a solid-colour PNG as a data URI."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return encode_data_uri(buffer.getvalue(), "image/png")


def make_record(**overrides):
    """A valid crop record dict in wire format."""
    record = {
        "dataUri": make_png_uri(10, 10),
        "timestamp": now_millis(),
        "pageUrl": "https://example.com/page",
        "width": 10,
        "height": 10,
        "x": 0,
        "y": 0,
    }
    record.update(overrides)
    return record


@pytest.fixture
def png_uri():
    return make_png_uri


@pytest.fixture
def settings(tmp_path):
    """Settings backed by a temp file, writing output into tmp_path."""
    s = Settings(str(tmp_path / "settings.json"))
    s.set("output_dir", str(tmp_path / "out"))
    return s


@pytest.fixture
def storage(tmp_path):
    return BatchStorage(str(tmp_path / "batch_crops.json"))


class FakeCaptureProvider:
    """Capture provider that answers synchronously with a fixed image."""

    def __init__(self, uri=None):
        self.uri = uri
        self.calls = 0

    def __call__(self, callback):
        self.calls += 1
        callback(self.uri)


@pytest.fixture
def capture_provider():
    return FakeCaptureProvider(make_png_uri(400, 300))


class DeferredCaptureProvider(FakeCaptureProvider):
    """Capture provider that answers on a later event-loop turn, like PageView."""

    def __call__(self, callback):
        from PyQt5.QtCore import QTimer

        self.calls += 1
        uri = self.uri
        QTimer.singleShot(0, lambda: callback(uri))
