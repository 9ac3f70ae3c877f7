# -*- coding: utf-8 -*-
"""
批量裁剪队列
有序保存 CropRecord，每次变更后写入本地存储
"""

import logging
from typing import List, NamedTuple, Optional

from .errors import StorageFailure, ValidationFailure
from .storage import BatchStorage
from ..models.crop import CropRecord
from ..utils.validators import validate_crop_record

logger = logging.getLogger(__name__)


class AppendResult(NamedTuple):
    count: int
    persisted: bool


class BatchAccumulator:
    """
    批量队列

    只由后台协调器调用。内存中的队列是当前会话的唯一来源，
    存储只是它的缓存：持久化失败会被报告，但不回滚内存中的变更。
    """

    def __init__(self, storage: Optional[BatchStorage] = None):
        self.storage = storage
        self._records: List[CropRecord] = []
        self._restore()

    def _restore(self):
        """从存储恢复队列，跳过无效记录"""
        if self.storage is None:
            return
        try:
            stored = self.storage.load_batch()
        except StorageFailure as e:
            logger.warning("[Batch] restore failed, starting empty: %s", e)
            return
        for index, data in enumerate(stored):
            try:
                self._records.append(validate_crop_record(data))
            except ValidationFailure as e:
                logger.warning("[Batch] dropping stored crop #%d: %s", index + 1, e)
        if self._records:
            logger.info("[Batch] restored %d crops", len(self._records))

    def _persist(self) -> bool:
        if self.storage is None:
            return True
        try:
            self.storage.save_batch([record.to_dict() for record in self._records])
            return True
        except StorageFailure as e:
            logger.error("[Batch] persist failed: %s", e)
            return False

    def append(self, record) -> AppendResult:
        """
        追加一条记录到队尾

        Args:
            record: CropRecord 或消息字典

        Returns:
            AppendResult(新的数量, 是否已持久化)

        Raises:
            ValidationFailure: 记录无效，队列不变
        """
        record = validate_crop_record(record)
        self._records.append(record)
        persisted = self._persist()
        logger.info("[Batch] stored crop #%d from %s", len(self._records), record.page_url)
        return AppendResult(len(self._records), persisted)

    def count(self) -> int:
        return len(self._records)

    def clear(self) -> bool:
        """清空队列并持久化空状态"""
        self._records.clear()
        persisted = self._persist()
        logger.info("[Batch] cleared")
        return persisted

    def drain_for_export(self) -> List[CropRecord]:
        """返回队列快照，不清空；导出成功后由调用方 clear()"""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self):
        return iter(list(self._records))
