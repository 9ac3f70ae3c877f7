"""Unit tests for selection → screenshot pixel mapping."""

import pytest

from snapcrop.core.coordinate_mapper import compute_scale, map_selection
from snapcrop.core.errors import DimensionProbeFailure
from snapcrop.models.geometry import PixelRect, Rectangle, ViewportMetrics


class TestComputeScale:
    """Tests for compute_scale."""

    def test_device_pixel_ratio(self):
        """Test a 2x capture gives scale 2."""
        assert compute_scale(ViewportMetrics(1000, 800), 2000) == pytest.approx(2.0)

    @pytest.mark.parametrize("viewport_width,captured_width", [(0, 100), (100, 0), (-5, 100)])
    def test_non_positive_widths(self, viewport_width, captured_width):
        """Test zero or negative widths are rejected."""
        with pytest.raises(DimensionProbeFailure):
            compute_scale(ViewportMetrics(viewport_width, 800), captured_width)


class TestMapSelection:
    """Tests for map_selection."""

    def test_scroll_and_scale(self):
        """Test scroll offset is added before scaling."""
        rect = Rectangle(x=100, y=50, width=200, height=100)
        metrics = ViewportMetrics(width=1000, height=800, scroll_x=50, scroll_y=0)

        result = map_selection(rect, metrics, 2000)

        assert result == PixelRect(x=300, y=100, width=400, height=200)

    def test_identity_scale(self):
        """Test scale 1 without scroll leaves the rectangle unchanged."""
        rect = Rectangle(10, 20, 30, 40)
        result = map_selection(rect, ViewportMetrics(800, 600), 800)

        assert result == PixelRect(10, 20, 30, 40)

    def test_fractional_scale_floors(self):
        """Test every component is floored independently."""
        rect = Rectangle(x=3, y=3, width=3, height=3)
        result = map_selection(rect, ViewportMetrics(width=1000, height=800), 1250)

        # 3 * 1.25 = 3.75
        assert result == PixelRect(3, 3, 3, 3)

    def test_fractional_scale_stays_in_bounds(self):
        """Test a full-viewport selection never exceeds the captured width."""
        rect = Rectangle(0, 0, 1366, 768)
        result = map_selection(rect, ViewportMetrics(1366, 768), 1707)

        assert result.right <= 1707

    def test_deterministic(self):
        """Test the same inputs always map to the same rectangle."""
        rect = Rectangle(12.5, 7.25, 99.9, 48.1)
        metrics = ViewportMetrics(1280, 720, scroll_x=3.5, scroll_y=120)

        results = {map_selection(rect, metrics, 1920) for _ in range(5)}

        assert len(results) == 1

    def test_missing_scroll_treated_as_zero(self):
        """Test metrics without scroll fields map like zero scroll."""
        metrics = ViewportMetrics.from_dict({"width": 500, "height": 400})
        result = map_selection(Rectangle(10, 10, 20, 20), metrics, 1000)

        assert result == PixelRect(20, 20, 40, 40)
