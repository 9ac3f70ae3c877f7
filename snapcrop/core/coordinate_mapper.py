# -*- coding: utf-8 -*-
"""
坐标映射
CSS像素选区 + 视口快照 → 截图像素空间的矩形
"""

import math

from .errors import DimensionProbeFailure
from ..models.geometry import Rectangle, ViewportMetrics, PixelRect


def compute_scale(metrics: ViewportMetrics, captured_width: int) -> float:
    """截图宽度与视口CSS宽度之比（已包含设备像素比）"""
    if metrics.width <= 0:
        raise DimensionProbeFailure(f"Viewport width must be positive, got {metrics.width}")
    if captured_width <= 0:
        raise DimensionProbeFailure(f"Captured width must be positive, got {captured_width}")
    return captured_width / metrics.width


def map_selection(rect: Rectangle, metrics: ViewportMetrics, captured_width: int) -> PixelRect:
    """
    将选区映射到截图像素坐标

    所有分量都向下取整，比例为小数时结果不会超出图像。
    滚动偏移取自选区完成时的快照，截图前不会重新读取。

    Args:
        rect: CSS像素选区
        metrics: 选区完成时的视口快照
        captured_width: 截图的原生像素宽度

    Returns:
        PixelRect
    """
    scale = compute_scale(metrics, captured_width)
    return PixelRect(
        x=math.floor((rect.x + metrics.scroll_x) * scale),
        y=math.floor((rect.y + metrics.scroll_y) * scale),
        width=math.floor(rect.width * scale),
        height=math.floor(rect.height * scale),
    )
