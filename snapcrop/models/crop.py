# -*- coding: utf-8 -*-
"""
裁剪数据模型
CropResult（裁剪输出）、CropRecord（带来源信息的批量记录）、ExportOptions
"""

import time
from dataclasses import dataclass
from typing import Dict, Optional


def now_millis() -> int:
    """当前时间（毫秒）"""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CropRecord:
    """已完成的裁剪 + 来源信息，创建后不可变"""
    data_uri: str
    timestamp: int
    page_url: str
    width: int
    height: int
    x: int
    y: int

    def to_dict(self) -> Dict:
        return {
            "dataUri": self.data_uri,
            "timestamp": self.timestamp,
            "pageUrl": self.page_url,
            "width": self.width,
            "height": self.height,
            "x": self.x,
            "y": self.y,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'CropRecord':
        """从字典创建，调用方负责先做校验"""
        return cls(
            data_uri=data["dataUri"],
            timestamp=data["timestamp"],
            page_url=data["pageUrl"],
            width=data["width"],
            height=data["height"],
            x=data["x"],
            y=data["y"],
        )

    @property
    def position(self) -> str:
        return f"({self.x}, {self.y})"

    def __str__(self) -> str:
        return f"CropRecord({self.page_url}: {self.x},{self.y} {self.width}x{self.height})"


@dataclass(frozen=True)
class CropResult:
    """裁剪并重新编码后的图像，以及实际使用的像素矩形"""
    data_uri: str
    width: int
    height: int
    x: int
    y: int

    def to_record(self, page_url: str, timestamp: Optional[int] = None) -> CropRecord:
        return CropRecord(
            data_uri=self.data_uri,
            timestamp=timestamp or now_millis(),
            page_url=page_url,
            width=self.width,
            height=self.height,
            x=self.x,
            y=self.y,
        )


@dataclass
class ExportOptions:
    """单次导出的配置"""
    include_metadata: bool = True
    filename: Optional[str] = None
    timestamp: Optional[int] = None

    def to_dict(self) -> Dict:
        result = {"includeMetadata": self.include_metadata}
        if self.filename is not None:
            result["filename"] = self.filename
        if self.timestamp is not None:
            result["timestamp"] = self.timestamp
        return result

    @classmethod
    def from_dict(cls, data: Dict) -> 'ExportOptions':
        return cls(
            include_metadata=data.get("includeMetadata", True),
            filename=data.get("filename"),
            timestamp=data.get("timestamp"),
        )
