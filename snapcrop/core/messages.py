# -*- coding: utf-8 -*-
"""
跨上下文消息
封闭的消息类型集合；通道上只传输可序列化的字典
"""

from dataclasses import dataclass
from typing import ClassVar, Dict, Optional, Union

from .errors import ValidationFailure
from ..models.geometry import Rectangle, ViewportMetrics


def _check_numbers(data: Dict, fields, prefix: str, required=()):
    """字段存在时必须是数字（bool 不算）"""
    for name in fields:
        value = data.get(name)
        if value is None:
            if name in required:
                raise ValidationFailure(f"Missing required field: {prefix}.{name}", field=f"{prefix}.{name}")
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationFailure(f"Invalid {prefix}.{name}: must be a number", field=f"{prefix}.{name}")


# ==================== 后台（特权上下文）处理的消息 ====================

@dataclass(frozen=True)
class CaptureWithCoordinates:
    """选区完成，请求截图并裁剪（无需回复）"""
    TYPE: ClassVar[str] = "capture-with-coordinates"
    rect: Rectangle
    viewport_metrics: ViewportMetrics
    page_url: str = ""

    def to_dict(self) -> Dict:
        return {
            "type": self.TYPE,
            "rect": self.rect.to_dict(),
            "viewportMetrics": self.viewport_metrics.to_dict(),
            "pageUrl": self.page_url,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'CaptureWithCoordinates':
        rect = data.get("rect")
        metrics = data.get("viewportMetrics")
        if not isinstance(rect, dict):
            raise ValidationFailure("Missing required field: rect", field="rect")
        if not isinstance(metrics, dict):
            raise ValidationFailure("Missing required field: viewportMetrics", field="viewportMetrics")
        _check_numbers(rect, ("x", "y", "width", "height"), "rect")
        _check_numbers(metrics, ("width", "height", "scrollX", "scrollY"), "viewportMetrics",
                       required=("width", "height"))
        return cls(Rectangle.from_dict(rect), ViewportMetrics.from_dict(metrics),
                   data.get("pageUrl") or "")


@dataclass(frozen=True)
class ExportSingleToWorkbook:
    """单张截图导出为工作簿"""
    TYPE: ClassVar[str] = "export-single-to-workbook"
    data_uri: str
    page_url: str
    width: int
    height: int
    x: int
    y: int
    filename: Optional[str] = None
    include_metadata: Optional[bool] = None

    def to_dict(self) -> Dict:
        return {
            "type": self.TYPE,
            "dataUri": self.data_uri,
            "pageUrl": self.page_url,
            "width": self.width,
            "height": self.height,
            "x": self.x,
            "y": self.y,
            "filename": self.filename,
            "includeMetadata": self.include_metadata,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'ExportSingleToWorkbook':
        return cls(
            data_uri=data.get("dataUri"),
            page_url=data.get("pageUrl"),
            width=data.get("width"),
            height=data.get("height"),
            x=data.get("x"),
            y=data.get("y"),
            filename=data.get("filename"),
            include_metadata=data.get("includeMetadata"),
        )

    def record_fields(self, timestamp: int) -> Dict:
        """用于校验的记录字段"""
        return {
            "dataUri": self.data_uri,
            "timestamp": timestamp,
            "pageUrl": self.page_url,
            "width": self.width,
            "height": self.height,
            "x": self.x,
            "y": self.y,
        }


@dataclass(frozen=True)
class StoreCropForBatch:
    """保存一条裁剪到批量队列"""
    TYPE: ClassVar[str] = "store-crop-for-batch"
    fields: Dict

    def to_dict(self) -> Dict:
        result = dict(self.fields)
        result["type"] = self.TYPE
        return result

    @classmethod
    def from_dict(cls, data: Dict) -> 'StoreCropForBatch':
        return cls({k: v for k, v in data.items() if k != "type"})


@dataclass(frozen=True)
class BatchExportToWorkbook:
    """导出批量队列"""
    TYPE: ClassVar[str] = "batch-export-to-workbook"
    filename: Optional[str] = None
    include_metadata: Optional[bool] = None

    def to_dict(self) -> Dict:
        return {"type": self.TYPE, "filename": self.filename,
                "includeMetadata": self.include_metadata}

    @classmethod
    def from_dict(cls, data: Dict) -> 'BatchExportToWorkbook':
        return cls(data.get("filename"), data.get("includeMetadata"))


@dataclass(frozen=True)
class GetBatchCount:
    TYPE: ClassVar[str] = "get-batch-count"

    def to_dict(self) -> Dict:
        return {"type": self.TYPE}

    @classmethod
    def from_dict(cls, data: Dict) -> 'GetBatchCount':
        return cls()


@dataclass(frozen=True)
class ClearBatch:
    TYPE: ClassVar[str] = "clear-batch"

    def to_dict(self) -> Dict:
        return {"type": self.TYPE}

    @classmethod
    def from_dict(cls, data: Dict) -> 'ClearBatch':
        return cls()


# ==================== 页面上下文处理的消息 ====================

@dataclass(frozen=True)
class ShowNotification:
    """在页面上显示临时提示"""
    TYPE: ClassVar[str] = "show-notification"
    message: str
    notification_type: str = "info"

    def to_dict(self) -> Dict:
        return {"type": self.TYPE, "message": self.message,
                "notificationType": self.notification_type}

    @classmethod
    def from_dict(cls, data: Dict) -> 'ShowNotification':
        return cls(str(data.get("message", "")), data.get("notificationType") or "info")


@dataclass(frozen=True)
class ActivateSelection:
    """快捷键：进入框选模式"""
    TYPE: ClassVar[str] = "activate-selection"

    def to_dict(self) -> Dict:
        return {"type": self.TYPE}

    @classmethod
    def from_dict(cls, data: Dict) -> 'ActivateSelection':
        return cls()


BackgroundMessage = Union[
    CaptureWithCoordinates, ExportSingleToWorkbook, StoreCropForBatch,
    BatchExportToWorkbook, GetBatchCount, ClearBatch,
]
PageMessage = Union[ShowNotification, ActivateSelection]

BACKGROUND_MESSAGES = (
    CaptureWithCoordinates, ExportSingleToWorkbook, StoreCropForBatch,
    BatchExportToWorkbook, GetBatchCount, ClearBatch,
)
PAGE_MESSAGES = (ShowNotification, ActivateSelection)

_REGISTRY = {cls.TYPE: cls for cls in BACKGROUND_MESSAGES + PAGE_MESSAGES}


def parse_message(data: Dict):
    """
    字典 → 消息对象

    Raises:
        ValidationFailure: 不是字典、缺少 type 或类型未知
    """
    if not isinstance(data, dict):
        raise ValidationFailure("Message must be an object")
    message_type = data.get("type")
    cls = _REGISTRY.get(message_type)
    if cls is None:
        raise ValidationFailure(f"Unknown message type: {message_type}", field="type")
    return cls.from_dict(data)


def check_handlers(handlers: Dict, variants) -> None:
    """确认每种消息都有处理函数，避免消息被静默忽略"""
    missing = [cls.__name__ for cls in variants if cls not in handlers]
    if missing:
        raise TypeError(f"No handler for message types: {', '.join(missing)}")
