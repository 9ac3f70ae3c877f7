# -*- coding: utf-8 -*-
"""
核心功能模块

各子模块按需直接导入（utils.validators 依赖 core.errors，
这里只导出错误类型以避免循环导入）
"""

from .errors import (
    SnapcropError, CaptureFailure, DimensionProbeFailure, EmptyCropError,
    ValidationFailure, EmptyBatchError, ExportWriteFailure, StorageFailure,
)

__all__ = [
    'SnapcropError', 'CaptureFailure', 'DimensionProbeFailure', 'EmptyCropError',
    'ValidationFailure', 'EmptyBatchError', 'ExportWriteFailure', 'StorageFailure',
]
