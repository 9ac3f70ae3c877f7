# -*- coding: utf-8 -*-
"""
数据模型
"""

from .geometry import Rectangle, ViewportMetrics, CapturedImage, PixelRect
from .crop import CropRecord, CropResult, ExportOptions, now_millis
from .workbook import Sheet, Workbook

__all__ = [
    'Rectangle', 'ViewportMetrics', 'CapturedImage', 'PixelRect',
    'CropRecord', 'CropResult', 'ExportOptions', 'now_millis',
    'Sheet', 'Workbook',
]
