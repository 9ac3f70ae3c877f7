# -*- coding: utf-8 -*-
"""
应用程序设置
持久化的键值设置（JSON文件），每个键可单独读写
"""

import os
import json
import logging

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("image", "workbook", "both")


class Settings:
    """应用设置"""

    DEFAULTS = {
        "output_dir": "./snapcrop_output",
        "open_in_tab": False,
        "download": True,
        "include_metadata": True,
        "default_export_format": "workbook",
        "image_quality": 92,
    }

    def __init__(self, config_file: str = None):
        self.config_file = config_file or os.environ.get("SNAPCROP_CONFIG", "settings.json")
        self.settings = self.DEFAULTS.copy()
        self.load()

    def load(self):
        """加载配置"""
        if not os.path.exists(self.config_file):
            return
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("[Settings] load failed, keeping defaults: %s", e)
            return
        if isinstance(loaded, dict):
            self.settings.update(loaded)
        if self.settings.get("default_export_format") not in EXPORT_FORMATS:
            logger.warning("[Settings] unknown export format %r, using default",
                           self.settings.get("default_export_format"))
            self.settings["default_export_format"] = self.DEFAULTS["default_export_format"]

    def save(self) -> bool:
        """保存配置"""
        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, ensure_ascii=False, indent=2)
            return True
        except OSError as e:
            logger.error("[Settings] save failed: %s", e)
            return False

    def get(self, key: str, default=None):
        """获取设置项"""
        return self.settings.get(key, default)

    def set(self, key: str, value) -> bool:
        """设置配置项"""
        if key == "default_export_format" and value not in EXPORT_FORMATS:
            raise ValueError(f"default_export_format must be one of {EXPORT_FORMATS}")
        self.settings[key] = value
        return self.save()

    def reset(self):
        """重置为默认"""
        self.settings = self.DEFAULTS.copy()
        self.save()

    # 常用开关
    @property
    def open_in_tab(self) -> bool:
        return bool(self.get("open_in_tab"))

    @property
    def download(self) -> bool:
        return bool(self.get("download"))

    @property
    def include_metadata(self) -> bool:
        return bool(self.get("include_metadata"))

    @property
    def default_export_format(self) -> str:
        return self.get("default_export_format")
