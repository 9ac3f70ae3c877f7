# -*- coding: utf-8 -*-
"""
切图引擎
根据像素矩形裁剪截图，并重新编码为有损格式
"""

import io
import logging

from PIL import Image, UnidentifiedImageError

from .errors import DimensionProbeFailure, EmptyCropError
from ..models.crop import CropResult
from ..models.geometry import CapturedImage, PixelRect
from ..utils.helpers import decode_data_uri, encode_data_uri

logger = logging.getLogger(__name__)


def _open_image(uri: str) -> Image.Image:
    """解码 data URI 为 PIL 图像"""
    try:
        data = decode_data_uri(uri)
        image = Image.open(io.BytesIO(data))
        image.load()
        return image
    except (ValueError, OSError, UnidentifiedImageError) as e:
        raise DimensionProbeFailure(f"Failed to load image dimensions: {e}") from e


def probe_dimensions(uri: str) -> CapturedImage:
    """
    读取截图的原生像素尺寸

    Raises:
        DimensionProbeFailure: 无法解码
    """
    image = _open_image(uri)
    return CapturedImage(uri=uri, width=image.width, height=image.height)


class ImageCropper:
    """切图引擎"""

    def __init__(self, quality: int = 92, image_format: str = "JPEG"):
        self.quality = quality
        self.image_format = image_format

    @property
    def mime(self) -> str:
        return f"image/{self.image_format.lower()}"

    def crop(self, image: CapturedImage, rect: PixelRect) -> CropResult:
        """
        裁剪单个矩形

        越界部分裁到图像边界内，不报错；裁边后面积为0才失败。

        Args:
            image: 截图
            rect: 截图像素空间中的矩形

        Returns:
            CropResult，尺寸等于裁边后的矩形

        Raises:
            EmptyCropError: 裁边后面积为0
            DimensionProbeFailure: 截图无法解码
        """
        clamped = rect.clamped_to(image.width, image.height)
        if clamped.area == 0:
            raise EmptyCropError(f"Crop {rect} is empty inside {image.width}x{image.height}")
        if clamped != rect:
            logger.info("[Crop] clamped %s -> %s", rect, clamped)

        source = _open_image(image.uri)
        cropped = source.crop(clamped.as_box())

        # JPEG 不支持透明通道
        if self.image_format.upper() == "JPEG" and cropped.mode not in ("RGB", "L"):
            cropped = cropped.convert("RGB")

        buffer = io.BytesIO()
        cropped.save(buffer, format=self.image_format, quality=self.quality)

        return CropResult(
            data_uri=encode_data_uri(buffer.getvalue(), self.mime),
            width=clamped.width,
            height=clamped.height,
            x=clamped.x,
            y=clamped.y,
        )
