# -*- coding: utf-8 -*-
"""
临时提示服务
每个上下文创建一个实例并按引用传递；每条提示有自己的移除定时器，
提前移除时定时器一并停止
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Dict

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

logger = logging.getLogger(__name__)

TOAST_TYPES = ("success", "error", "info")
DISPLAY_MS = 3000
FADE_MS = 300


@dataclass(frozen=True)
class Toast:
    toast_id: str
    message: str
    kind: str = "info"


class Notifier(QObject):
    """
    提示服务

    信号:
        toast_shown: 新提示（Toast）
        toast_fading: 开始淡出（toast_id）
        toast_removed: 已移除（toast_id）
    """

    toast_shown = pyqtSignal(object)
    toast_fading = pyqtSignal(str)
    toast_removed = pyqtSignal(str)

    def __init__(self, display_ms: int = DISPLAY_MS, fade_ms: int = FADE_MS, parent=None):
        super().__init__(parent)
        self.display_ms = display_ms
        self.fade_ms = fade_ms
        self._ids = itertools.count(1)
        self._toasts: Dict[str, Toast] = {}
        self._timers: Dict[str, QTimer] = {}

    @property
    def active(self):
        return list(self._toasts.values())

    def show(self, message: str, kind: str = "info") -> Toast:
        """显示一条提示，display_ms 后淡出，再过 fade_ms 移除"""
        if kind not in TOAST_TYPES:
            kind = "info"
        toast = Toast(f"toast-{next(self._ids)}", message, kind)
        self._toasts[toast.toast_id] = toast

        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.timeout.connect(lambda tid=toast.toast_id: self._start_fade(tid))
        self._timers[toast.toast_id] = timer
        timer.start(self.display_ms)

        logger.debug("[Toast] %s: %s", kind, message)
        self.toast_shown.emit(toast)
        return toast

    def _start_fade(self, toast_id: str):
        timer = self._timers.get(toast_id)
        if timer is None:
            return
        self.toast_fading.emit(toast_id)
        timer.timeout.disconnect()
        timer.timeout.connect(lambda: self.dismiss(toast_id))
        timer.start(self.fade_ms)

    def dismiss(self, toast_id: str) -> bool:
        """立即移除，并停止该提示的定时器"""
        timer = self._timers.pop(toast_id, None)
        if timer is not None:
            timer.stop()
            timer.deleteLater()
        if self._toasts.pop(toast_id, None) is None:
            return False
        self.toast_removed.emit(toast_id)
        return True

    def clear(self):
        for toast_id in list(self._toasts):
            self.dismiss(toast_id)
