# -*- coding: utf-8 -*-
"""
批量数量监视
设置界面定时通过消息查询 get-batch-count，本地只保存可能过期的只读副本
"""

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from ..core.channel import BACKGROUND, MessageChannel
from ..core.messages import GetBatchCount

POLL_INTERVAL_MS = 1000


class BatchCountMonitor(QObject):
    """
    批量数量监视器

    信号:
        count_changed: 数量变化时发出
    """

    count_changed = pyqtSignal(int)

    def __init__(self, channel: MessageChannel, interval_ms: int = POLL_INTERVAL_MS, parent=None):
        super().__init__(parent)
        self.channel = channel
        self.count = 0
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self.poll)

    def start(self):
        self.poll()
        self._timer.start()

    def stop(self):
        self._timer.stop()

    @property
    def active(self) -> bool:
        return self._timer.isActive()

    def poll(self):
        """查询一次"""
        self.channel.send(BACKGROUND, GetBatchCount(), self._on_response)

    def _on_response(self, response: dict):
        count = response.get("count")
        if not isinstance(count, int) or count == self.count:
            return
        self.count = count
        self.count_changed.emit(count)
