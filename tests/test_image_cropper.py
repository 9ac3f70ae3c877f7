"""Tests for decoding, clamping and re-encoding crops."""

import io

import pytest
from PIL import Image

from conftest import make_png_uri
from snapcrop.core.errors import DimensionProbeFailure, EmptyCropError
from snapcrop.core.image_cropper import ImageCropper, probe_dimensions
from snapcrop.models.geometry import PixelRect
from snapcrop.utils.helpers import decode_data_uri


def _decode(uri):
    return Image.open(io.BytesIO(decode_data_uri(uri)))


class TestProbeDimensions:
    """Tests for probe_dimensions."""

    def test_native_size(self):
        """Test the probe reports the encoded image size."""
        image = probe_dimensions(make_png_uri(640, 360))

        assert (image.width, image.height) == (640, 360)

    @pytest.mark.parametrize("uri", [
        "not a data uri",
        "data:image/png;base64,@@@",
        "data:image/png;base64,aGVsbG8=",
    ])
    def test_undecodable(self, uri):
        """Test malformed or non-image payloads raise DimensionProbeFailure."""
        with pytest.raises(DimensionProbeFailure):
            probe_dimensions(uri)


class TestImageCropper:
    """Tests for ImageCropper.crop."""

    def test_crop_inside(self):
        """Test an in-bounds crop keeps the requested size."""
        image = probe_dimensions(make_png_uri(200, 100))
        result = ImageCropper().crop(image, PixelRect(10, 20, 50, 30))

        assert (result.width, result.height, result.x, result.y) == (50, 30, 10, 20)
        assert result.data_uri.startswith("data:image/jpeg;base64,")
        decoded = _decode(result.data_uri)
        assert decoded.size == (50, 30)
        assert decoded.format == "JPEG"

    def test_crop_clamped_to_image(self):
        """Test a rectangle overhanging the edge is intersected with the image."""
        image = probe_dimensions(make_png_uri(200, 100))
        result = ImageCropper().crop(image, PixelRect(150, 80, 100, 100))

        assert (result.x, result.y, result.width, result.height) == (150, 80, 50, 20)
        assert _decode(result.data_uri).size == (50, 20)

    def test_negative_origin_clamped(self):
        """Test a rectangle starting before the origin is clipped to it."""
        image = probe_dimensions(make_png_uri(100, 100))
        result = ImageCropper().crop(image, PixelRect(-10, -10, 30, 30))

        assert (result.x, result.y, result.width, result.height) == (0, 0, 20, 20)

    def test_zero_area(self):
        """Test a zero-size rectangle raises EmptyCropError."""
        image = probe_dimensions(make_png_uri(100, 100))

        with pytest.raises(EmptyCropError):
            ImageCropper().crop(image, PixelRect(10, 10, 0, 25))

    def test_fully_outside(self):
        """Test a rectangle entirely outside the image raises EmptyCropError."""
        image = probe_dimensions(make_png_uri(100, 100))

        with pytest.raises(EmptyCropError):
            ImageCropper().crop(image, PixelRect(150, 150, 20, 20))

    def test_alpha_source_converted(self):
        """Test an RGBA capture can still be encoded as JPEG."""
        buffer = io.BytesIO()
        Image.new("RGBA", (40, 40), (0, 0, 255, 128)).save(buffer, format="PNG")
        from snapcrop.utils.helpers import encode_data_uri
        image = probe_dimensions(encode_data_uri(buffer.getvalue(), "image/png"))

        result = ImageCropper(quality=80).crop(image, PixelRect(0, 0, 40, 40))

        assert _decode(result.data_uri).mode == "RGB"
