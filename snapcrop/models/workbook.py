# -*- coding: utf-8 -*-
"""
工作簿模型
有序的命名工作表，每个工作表是同构的行
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Tuple


@dataclass(frozen=True)
class Sheet:
    """单个工作表"""
    name: str
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[Any, ...], ...]
    column_widths: Optional[Tuple[int, ...]] = None

    @classmethod
    def from_records(cls, name: str, records: Sequence[dict],
                     column_widths: Sequence[int] = None) -> 'Sheet':
        """由字典列表构造，列顺序取第一条记录的键顺序"""
        headers = tuple(records[0].keys()) if records else ()
        rows = tuple(tuple(record[h] for h in headers) for record in records)
        return cls(name, headers, rows, tuple(column_widths) if column_widths else None)

    def column(self, header: str) -> List[Any]:
        index = self.headers.index(header)
        return [row[index] for row in self.rows]

    def as_records(self) -> List[dict]:
        return [dict(zip(self.headers, row)) for row in self.rows]


@dataclass(frozen=True)
class Workbook:
    """导出产物：每次导出新建，构建后不再修改"""
    sheets: Tuple[Sheet, ...] = field(default_factory=tuple)

    @property
    def sheet_names(self) -> List[str]:
        return [sheet.name for sheet in self.sheets]

    def sheet(self, name: str) -> Sheet:
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        raise KeyError(name)

    def __len__(self) -> int:
        return len(self.sheets)
