# -*- coding: utf-8 -*-
"""
结果输出
下载到输出目录、在查看器中打开
"""

import logging
import os
import tempfile
from typing import Callable, Optional

from .errors import ExportWriteFailure
from ..models.crop import now_millis
from ..utils.helpers import decode_data_uri, ensure_dir, extension_for_data_uri

logger = logging.getLogger(__name__)


def _open_with_desktop(path: str) -> bool:
    """用系统默认程序打开文件"""
    from PyQt5.QtCore import QUrl
    from PyQt5.QtGui import QDesktopServices

    return QDesktopServices.openUrl(QUrl.fromLocalFile(os.path.abspath(path)))


class OutputSink:
    """下载/打开截图"""

    def __init__(self, output_dir: str = "./snapcrop_output",
                 opener: Optional[Callable[[str], bool]] = None):
        self.output_dir = output_dir
        self.opener = opener or _open_with_desktop

    def set_output_dir(self, path: str):
        """设置输出目录"""
        self.output_dir = path

    def _write(self, directory: str, data_uri: str, filename: str) -> str:
        try:
            data = decode_data_uri(data_uri)
            ensure_dir(directory)
            filepath = os.path.join(directory, filename)
            with open(filepath, 'wb') as f:
                f.write(data)
        except (ValueError, OSError) as e:
            raise ExportWriteFailure(f"Failed to save image: {e}") from e
        return filepath

    def download(self, data_uri: str, filename: str = None) -> str:
        """
        保存到输出目录，默认文件名为毫秒时间戳

        Returns:
            文件路径
        """
        filename = filename or f"{now_millis()}{extension_for_data_uri(data_uri)}"
        filepath = self._write(self.output_dir, data_uri, filename)
        logger.info("[Output] downloaded %s", filepath)
        return filepath

    def open_in_viewer(self, data_uri: str) -> bool:
        """写入临时文件并打开"""
        filename = f"snapcrop_{now_millis()}{extension_for_data_uri(data_uri)}"
        filepath = self._write(tempfile.gettempdir(), data_uri, filename)
        opened = bool(self.opener(filepath))
        if not opened:
            logger.warning("[Output] could not open %s", filepath)
        return opened
