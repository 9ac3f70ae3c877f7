# -*- coding: utf-8 -*-
"""
消息通道
页面上下文与后台上下文之间唯一的通信方式：
消息序列化为字典后经 Qt 队列连接投递，每次事件循环只处理一条
"""

import json
import logging
from typing import Callable, Dict, Optional

from PyQt5.QtCore import QObject, Qt, pyqtSignal

from ..utils.messages import ERROR_MESSAGES, friendly_message

logger = logging.getLogger(__name__)

BACKGROUND = "background"
PAGE = "page"


def _serialize(message) -> Dict:
    """只允许可 JSON 序列化的数据通过通道"""
    payload = message.to_dict() if hasattr(message, "to_dict") else message
    return json.loads(json.dumps(payload))


class MessageChannel(QObject):
    """
    异步消息通道

    信号:
        delivered: (endpoint, payload) 每条消息处理完成后发出
    """

    delivered = pyqtSignal(str, object)

    _posted = pyqtSignal(str, object, object)
    _responded = pyqtSignal(object, object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._handlers: Dict[str, Callable[[Dict], Optional[Dict]]] = {}
        self._posted.connect(self._deliver, Qt.QueuedConnection)
        self._responded.connect(self._respond, Qt.QueuedConnection)

    def register(self, endpoint: str, handler: Callable[[Dict], Optional[Dict]]):
        """注册某个上下文的消息处理函数"""
        self._handlers[endpoint] = handler

    def send(self, endpoint: str, message, callback: Callable[[Dict], None] = None):
        """
        发送消息（立即返回，处理发生在之后的事件循环中）

        Args:
            endpoint: BACKGROUND 或 PAGE
            message: 消息对象或字典
            callback: 收到回复时调用，参数为回复字典
        """
        payload = _serialize(message)
        self._posted.emit(endpoint, payload, callback)

    def _deliver(self, endpoint: str, payload: Dict, callback):
        handler = self._handlers.get(endpoint)
        if handler is None:
            logger.warning("[Channel] no receiver for %s, dropping %s", endpoint, payload.get("type"))
            response = {"success": False, "message": ERROR_MESSAGES["UNKNOWN_ERROR"]}
        else:
            try:
                response = handler(payload)
            except Exception as e:
                # 异常不能跨越通道，只能回传数据
                logger.exception("[Channel] %s handler failed on %s", endpoint, payload.get("type"))
                response = {"success": False, "message": friendly_message(e)}

        self.delivered.emit(endpoint, payload)
        if callback is not None:
            self._responded.emit(callback, _serialize(response or {"success": True}))

    def _respond(self, callback, response: Dict):
        callback(response)
