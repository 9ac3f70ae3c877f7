# -*- coding: utf-8 -*-
"""
页面上下文
把选区跟踪器和提示服务接到消息通道上
"""

import logging
from typing import Callable, Dict

from PyQt5.QtCore import QObject

from .notifier import Notifier
from .selection_tracker import SelectionTracker
from ..core.channel import BACKGROUND, PAGE, MessageChannel
from ..core.errors import ValidationFailure
from ..core.messages import (
    PAGE_MESSAGES, ActivateSelection, CaptureWithCoordinates, ShowNotification,
    check_handlers, parse_message,
)
from ..models.geometry import Rectangle, ViewportMetrics
from ..utils.messages import ERROR_MESSAGES, INFO_MESSAGES

logger = logging.getLogger(__name__)


class PageContext(QObject):
    """页面上下文：只能通过通道与后台通信"""

    def __init__(self, channel: MessageChannel,
                 viewport_provider: Callable[[], ViewportMetrics],
                 page_url_provider: Callable[[], str] = None,
                 notifier: Notifier = None, parent=None):
        super().__init__(parent)
        self.channel = channel
        self.page_url_provider = page_url_provider or (lambda: "")
        self.notifier = notifier or Notifier(parent=self)
        self.tracker = SelectionTracker(viewport_provider, parent=self)
        self.tracker.selection_finalized.connect(self._on_selection_finalized)

        self._handlers = {
            ShowNotification: self._on_show_notification,
            ActivateSelection: self._on_activate_selection,
        }
        check_handlers(self._handlers, PAGE_MESSAGES)
        channel.register(PAGE, self.handle)

    def handle(self, payload: Dict) -> Dict:
        try:
            message = parse_message(payload)
        except ValidationFailure as e:
            return {"success": False, "message": str(e)}
        handler = self._handlers.get(type(message))
        if handler is None:
            logger.warning("[Page] %s is not a page message", type(message).__name__)
            return {"success": False, "message": ERROR_MESSAGES["UNKNOWN_MESSAGE"]}
        return handler(message)

    def _on_selection_finalized(self, rect: Rectangle, metrics: ViewportMetrics):
        # 选框已在 reset 时清除，通道投递晚于重绘，截图中不会出现选框
        self.channel.send(BACKGROUND, CaptureWithCoordinates(rect, metrics, self.page_url_provider()))

    def _on_show_notification(self, message: ShowNotification) -> Dict:
        self.notifier.show(message.message, message.notification_type)
        return {"success": True}

    def _on_activate_selection(self, message: ActivateSelection) -> Dict:
        self.tracker.activate()
        self.notifier.show(INFO_MESSAGES["CROP_MODE_ACTIVE"], "info")
        return {"success": True}

    def request(self, message, callback: Callable[[Dict], None] = None):
        """向后台发送请求"""
        self.channel.send(BACKGROUND, message, callback)
