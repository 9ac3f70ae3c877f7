# -*- coding: utf-8 -*-
"""
几何数据模型
选区矩形（CSS像素）、视口快照、截图、像素矩形（截图像素空间）
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class Rectangle:
    """选区矩形 - 相对可见视口的CSS像素坐标"""
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0

    @classmethod
    def from_points(cls, x1: float, y1: float, x2: float, y2: float) -> 'Rectangle':
        """由两个点构造，始终以左上角为原点"""
        return cls(
            x=min(x1, x2),
            y=min(y1, y2),
            width=abs(x1 - x2),
            height=abs(y1 - y2),
        )

    @property
    def area(self) -> float:
        return self.width * self.height

    def to_dict(self) -> Dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @classmethod
    def from_dict(cls, data: Dict) -> 'Rectangle':
        return cls(
            x=data.get("x", 0),
            y=data.get("y", 0),
            width=data.get("width", 0),
            height=data.get("height", 0),
        )

    def __str__(self) -> str:
        return f"Rectangle({self.x},{self.y} {self.width}x{self.height})"


@dataclass(frozen=True)
class ViewportMetrics:
    """选区完成瞬间的视口尺寸与滚动偏移"""
    width: float
    height: float
    scroll_x: float = 0
    scroll_y: float = 0

    def to_dict(self) -> Dict:
        return {
            "width": self.width,
            "height": self.height,
            "scrollX": self.scroll_x,
            "scrollY": self.scroll_y,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'ViewportMetrics':
        # 旧消息可能没有滚动字段
        return cls(
            width=data.get("width", 0),
            height=data.get("height", 0),
            scroll_x=data.get("scrollX") or 0,
            scroll_y=data.get("scrollY") or 0,
        )


@dataclass(frozen=True)
class CapturedImage:
    """可见视口的截图，width/height 为图像原生像素尺寸"""
    uri: str
    width: int
    height: int


@dataclass(frozen=True)
class PixelRect:
    """截图像素空间中的整数矩形"""
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def clamped_to(self, image_width: int, image_height: int) -> 'PixelRect':
        """与图像边界求交；完全越界时得到零面积矩形"""
        left = min(max(self.x, 0), image_width)
        top = min(max(self.y, 0), image_height)
        right = min(max(self.right, 0), image_width)
        bottom = min(max(self.bottom, 0), image_height)
        return PixelRect(left, top, max(right - left, 0), max(bottom - top, 0))

    def as_box(self):
        """PIL 裁剪框 (left, upper, right, lower)"""
        return (self.x, self.y, self.right, self.bottom)

    def __str__(self) -> str:
        return f"PixelRect({self.x},{self.y} {self.width}x{self.height})"
