# -*- coding: utf-8 -*-
"""
选区跟踪器（页面上下文）
把按键/鼠标事件转换为最终的选区矩形

状态机：
┌──────────┬──────────────────────────────┬──────────┐
│   状态   │             事件             │  新状态  │
├──────────┼──────────────────────────────┼──────────┤
│ IDLE     │ Alt 按下                     │ ARMING   │
│ IDLE/ARM │ 按住 Alt 时鼠标按下          │ DRAGGING │
│ DRAGGING │ 鼠标移动（重算矩形）         │ DRAGGING │
│ DRAGGING │ 鼠标松开（发出选区）         │ IDLE     │
│ 任意     │ Escape（不发出）             │ IDLE     │
│ ARMING   │ Alt 松开且未在拖动           │ IDLE     │
└──────────┴──────────────────────────────┴──────────┘
"""

import logging
from enum import Enum
from typing import Callable, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from ..models.geometry import Rectangle, ViewportMetrics

logger = logging.getLogger(__name__)

ESCAPE = "Escape"
MODIFIER = "Alt"


class TrackerState(Enum):
    IDLE = "idle"
    ARMING = "arming"
    DRAGGING = "dragging"


def clamp_point(x: float, y: float):
    """负坐标截断为0"""
    return max(x, 0), max(y, 0)


class SelectionTracker(QObject):
    """
    选区跟踪器

    信号:
        selection_finalized: (Rectangle, ViewportMetrics) 每次以鼠标松开结束的拖动发出一次
        selectable_changed: 页面文本是否可选
        bbox_changed: 当前选框（None 表示清除）
    """

    selection_finalized = pyqtSignal(object, object)
    selectable_changed = pyqtSignal(bool)
    bbox_changed = pyqtSignal(object)

    def __init__(self, viewport_provider: Callable[[], ViewportMetrics], parent=None):
        super().__init__(parent)
        self.viewport_provider = viewport_provider
        self.state = TrackerState.IDLE
        self.start_x: Optional[float] = None
        self.start_y: Optional[float] = None
        self.rect: Optional[Rectangle] = None
        self.selectable = True
        self._armed_by_key = False

    # ==================== 内部 ====================

    def _set_selectable(self, selectable: bool):
        if self.selectable != selectable:
            self.selectable = selectable
            self.selectable_changed.emit(selectable)

    def reset(self):
        """回到 IDLE，清除选框"""
        self.state = TrackerState.IDLE
        self._armed_by_key = False
        self.start_x = None
        self.start_y = None
        had_rect = self.rect is not None
        self.rect = None
        self._set_selectable(True)
        if had_rect:
            self.bbox_changed.emit(None)

    @property
    def is_dragging(self) -> bool:
        return self.state == TrackerState.DRAGGING

    # ==================== 键盘 ====================

    def activate(self):
        """快捷键命令：不按 Alt 直接进入框选模式"""
        if self.state == TrackerState.IDLE:
            self.state = TrackerState.ARMING
            self._set_selectable(False)

    def key_down(self, key: str, alt: bool = False):
        if key == ESCAPE:
            if self.state != TrackerState.IDLE:
                logger.info("[Page] selection aborted")
            self.reset()
        elif alt or key == MODIFIER:
            if self.state == TrackerState.IDLE:
                self.state = TrackerState.ARMING
                self._armed_by_key = True
            self._set_selectable(False)

    def key_up(self, key: str, alt: bool = False):
        # 拖动中松开 Alt 不会中断拖动
        if self.state == TrackerState.ARMING and self._armed_by_key and not alt:
            self.reset()

    # ==================== 鼠标 ====================

    def pointer_down(self, x: float, y: float, alt: bool = False):
        if not alt and self.state != TrackerState.ARMING:
            return
        self._set_selectable(False)
        self.state = TrackerState.DRAGGING
        self.start_x, self.start_y = clamp_point(x, y)
        self.rect = Rectangle(self.start_x, self.start_y, 0, 0)
        self.bbox_changed.emit(self.rect)

    def pointer_move(self, x: float, y: float):
        if self.state != TrackerState.DRAGGING:
            return
        cur_x, cur_y = clamp_point(x, y)
        self.rect = Rectangle.from_points(self.start_x, self.start_y, cur_x, cur_y)
        self.bbox_changed.emit(self.rect)

    def pointer_up(self, x: float, y: float) -> Optional[Rectangle]:
        """
        结束拖动

        Returns:
            最终选区；不在拖动中时返回 None
        """
        if self.state != TrackerState.DRAGGING:
            return None
        cur_x, cur_y = clamp_point(x, y)
        rect = Rectangle.from_points(self.start_x, self.start_y, cur_x, cur_y)
        # 视口快照在松开的这一刻读取
        metrics = self.viewport_provider()

        self.reset()
        logger.info("[Page] selection finalized %s", rect)
        self.selection_finalized.emit(rect, metrics)
        return rect
