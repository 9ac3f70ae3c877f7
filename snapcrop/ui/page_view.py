# -*- coding: utf-8 -*-
"""
页面视图组件
显示页面图像（可滚动），把鼠标/键盘事件交给选区跟踪器，
绘制选框和临时提示，并提供可见视口截图

交互：
┌──────────┬─────────────┬──────────────────────────┐
│ Alt状态  │    光标     │         左键操作         │
├──────────┼─────────────┼──────────────────────────┤
│ 松开     │ ArrowCursor │ 无                       │
│ 按住     │ CrossCursor │ 拖拽框选，松开完成截图   │
│ 任意     │ -           │ Esc 取消当前框选         │
└──────────┴─────────────┴──────────────────────────┘
"""

import logging
from typing import Callable, Dict, Optional

from PyQt5.QtCore import QBuffer, QByteArray, QIODevice, QRect, Qt, QTimer
from PyQt5.QtGui import QColor, QFont, QPainter, QPen, QPixmap
from PyQt5.QtWidgets import QWidget

from ..models.geometry import Rectangle, ViewportMetrics
from ..page.notifier import Notifier, Toast
from ..page.selection_tracker import ESCAPE, MODIFIER, SelectionTracker
from ..utils.helpers import encode_data_uri

logger = logging.getLogger(__name__)

TOAST_COLORS = {
    "success": "#10b981",
    "error": "#ef4444",
    "info": "#3b82f6",
}
SCROLL_STEP = 60


class PageView(QWidget):
    """页面视图"""

    def __init__(self, parent=None):
        super().__init__(parent)

        self.page_pixmap: Optional[QPixmap] = None
        self.page_url = ""
        self.scroll_x = 0
        self.scroll_y = 0

        self.tracker: Optional[SelectionTracker] = None
        self.notifier: Optional[Notifier] = None
        self.bbox: Optional[Rectangle] = None
        self._toasts: Dict[str, Toast] = {}
        self._fading = set()

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setMinimumSize(400, 300)

    # ==================== 连接 ====================

    def attach(self, tracker: SelectionTracker, notifier: Notifier):
        """连接页面上下文的跟踪器和提示服务"""
        self.tracker = tracker
        self.notifier = notifier
        tracker.bbox_changed.connect(self._on_bbox_changed)
        tracker.selectable_changed.connect(self._on_selectable_changed)
        notifier.toast_shown.connect(self._on_toast_shown)
        notifier.toast_fading.connect(self._on_toast_fading)
        notifier.toast_removed.connect(self._on_toast_removed)

    def set_page(self, pixmap: QPixmap, page_url: str = ""):
        """设置页面图像"""
        self.page_pixmap = pixmap
        self.page_url = page_url
        self.scroll_x = 0
        self.scroll_y = 0
        self.update()

    def viewport_metrics(self) -> ViewportMetrics:
        """当前视口快照（CSS像素 = 逻辑像素）"""
        return ViewportMetrics(self.width(), self.height(), self.scroll_x, self.scroll_y)

    def capture_visible(self, callback: Callable[[Optional[str]], None]):
        """
        截取可见视口，下一轮事件循环中以 PNG data URI 回调
        没有页面时回调 None
        """
        if self.page_pixmap is None or self.page_pixmap.isNull():
            QTimer.singleShot(0, lambda: callback(None))
            return

        # 截图时不绘制提示
        toasts, self._toasts = self._toasts, {}
        pixmap = self.grab()
        self._toasts = toasts

        data = QByteArray()
        buffer = QBuffer(data)
        buffer.open(QIODevice.WriteOnly)
        pixmap.save(buffer, "PNG")
        buffer.close()

        uri = encode_data_uri(bytes(data), "image/png")
        logger.info("[Page] captured viewport %dx%d", pixmap.width(), pixmap.height())
        QTimer.singleShot(0, lambda: callback(uri))

    # ==================== 信号处理 ====================

    def _on_bbox_changed(self, rect):
        self.bbox = rect
        self.update()

    def _on_selectable_changed(self, selectable: bool):
        self.setCursor(Qt.ArrowCursor if selectable else Qt.CrossCursor)

    def _on_toast_shown(self, toast: Toast):
        self._toasts[toast.toast_id] = toast
        self.update()

    def _on_toast_fading(self, toast_id: str):
        self._fading.add(toast_id)
        self.update()

    def _on_toast_removed(self, toast_id: str):
        self._toasts.pop(toast_id, None)
        self._fading.discard(toast_id)
        self.update()

    # ==================== 鼠标/键盘事件 ====================

    def _alt_held(self, event) -> bool:
        return bool(event.modifiers() & Qt.AltModifier)

    def mousePressEvent(self, event):
        if self.tracker and event.button() == Qt.LeftButton:
            self.tracker.pointer_down(event.x(), event.y(), self._alt_held(event))

    def mouseMoveEvent(self, event):
        if self.tracker:
            self.tracker.pointer_move(event.x(), event.y())

    def mouseReleaseEvent(self, event):
        if self.tracker and event.button() == Qt.LeftButton:
            self.tracker.pointer_up(event.x(), event.y())

    def keyPressEvent(self, event):
        if self.tracker:
            if event.key() == Qt.Key_Escape:
                self.tracker.key_down(ESCAPE)
                return
            if event.key() == Qt.Key_Alt or self._alt_held(event):
                self.tracker.key_down(MODIFIER, True)
                return
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event):
        if self.tracker and event.key() == Qt.Key_Alt:
            self.tracker.key_up(MODIFIER, False)
            return
        super().keyReleaseEvent(event)

    def wheelEvent(self, event):
        """滚动页面"""
        if self.page_pixmap is None:
            return
        steps = event.angleDelta().y() // 120
        max_y = max(self.page_pixmap.height() - self.height(), 0)
        self.scroll_y = min(max(self.scroll_y - steps * SCROLL_STEP, 0), max_y)
        self.update()

    # ==================== 绘制 ====================

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor("#ffffff"))

        if self.page_pixmap is None or self.page_pixmap.isNull():
            painter.setPen(QColor("#666"))
            painter.setFont(QFont("Sans", 12))
            painter.drawText(self.rect(), Qt.AlignCenter, "Open a page image to start")
        else:
            painter.drawPixmap(0, 0, self.page_pixmap,
                               self.scroll_x, self.scroll_y, self.width(), self.height())

        if self.bbox is not None:
            rect = QRect(int(self.bbox.x), int(self.bbox.y), int(self.bbox.width), int(self.bbox.height))
            painter.setPen(QPen(QColor("#3b82f6"), 1, Qt.DashLine))
            painter.setBrush(QColor(59, 130, 246, 40))
            painter.drawRect(rect)

        self._draw_toasts(painter)

    def _draw_toasts(self, painter: QPainter):
        """右上角依次绘制提示"""
        painter.setFont(QFont("Sans", 10))
        top = 20
        for toast_id, toast in self._toasts.items():
            metrics = painter.fontMetrics()
            text_rect = metrics.boundingRect(QRect(0, 0, 300, 1000), Qt.TextWordWrap, toast.message)
            box = QRect(self.width() - text_rect.width() - 52, top,
                        text_rect.width() + 32, text_rect.height() + 24)
            painter.setOpacity(0.4 if toast_id in self._fading else 1.0)
            painter.setPen(Qt.NoPen)
            painter.setBrush(QColor(TOAST_COLORS.get(toast.kind, "#6b7280")))
            painter.drawRoundedRect(box, 4, 4)
            painter.setPen(QColor("#ffffff"))
            painter.drawText(box.adjusted(16, 12, -16, -12), Qt.TextWordWrap, toast.message)
            top = box.bottom() + 10
        painter.setOpacity(1.0)
