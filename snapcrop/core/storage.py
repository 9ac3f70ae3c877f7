# -*- coding: utf-8 -*-
"""
批量队列持久化
内存队列的本地缓存（JSON文件），只用于崩溃恢复
"""

import json
import logging
import os
from typing import Dict, List

from .errors import StorageFailure

logger = logging.getLogger(__name__)

BATCH_KEY = "batchCrops"


class BatchStorage:
    """按键读写的本地存储"""

    def __init__(self, path: str = "batch_crops.json"):
        self.path = path

    def _read_all(self) -> Dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise StorageFailure(f"storage read failed: {e}") from e
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default=None):
        return self._read_all().get(key, default)

    def set(self, key: str, value):
        """
        写入单个键

        Raises:
            StorageFailure: 写入失败
        """
        try:
            data = self._read_all()
        except StorageFailure:
            # 损坏的文件直接覆盖
            logger.warning("[Storage] %s unreadable, overwriting", self.path)
            data = {}
        data[key] = value
        tmp_path = f"{self.path}.tmp"
        try:
            directory = os.path.dirname(os.path.abspath(self.path))
            os.makedirs(directory, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise StorageFailure(f"storage write failed: {e}") from e

    def load_batch(self) -> List[Dict]:
        crops = self.get(BATCH_KEY, [])
        return crops if isinstance(crops, list) else []

    def save_batch(self, crops: List[Dict]):
        self.set(BATCH_KEY, crops)
