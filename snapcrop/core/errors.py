# -*- coding: utf-8 -*-
"""
错误类型
截图 → 裁剪 → 批量 → 导出 流水线中的各类失败
"""


class SnapcropError(Exception):
    """所有流水线错误的基类"""


class CaptureFailure(SnapcropError):
    """截图接口没有返回图像（无活动页面、权限被拒等）"""


class DimensionProbeFailure(SnapcropError):
    """解码截图以读取像素尺寸失败"""


class EmptyCropError(SnapcropError):
    """映射后的矩形在裁边后面积为0"""


class ValidationFailure(SnapcropError):
    """CropRecord / ExportOptions 格式错误"""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class EmptyBatchError(SnapcropError):
    """批量队列为空时尝试导出"""


class ExportWriteFailure(SnapcropError):
    """工作簿构建或写入失败"""


class StorageFailure(SnapcropError):
    """持久化存储读写失败"""
