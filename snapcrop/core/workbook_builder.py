# -*- coding: utf-8 -*-
"""
工作簿导出
将一条或多条裁剪记录转换为多工作表的 .xlsx
"""

import logging
import os
from datetime import datetime
from typing import Dict, Optional, Sequence

from openpyxl import Workbook as XlsxWorkbook
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import IllegalCharacterError

from .errors import EmptyBatchError, ExportWriteFailure
from ..models.crop import CropRecord, CropResult, ExportOptions, now_millis
from ..models.workbook import Sheet, Workbook
from ..utils.helpers import ensure_dir
from ..utils.messages import ERROR_MESSAGES
from ..utils.validators import validate_filename

logger = logging.getLogger(__name__)

# 文件名前缀（按调用位置区分）
PREFIX_SINGLE = "screenshot_"
PREFIX_BATCH = "screenshots_batch_"
PREFIX_BATCH_EXPORT = "batch_export_"

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
PROPERTY_WIDTHS = (20, 50)
SUMMARY_WIDTHS = (8, 20, 40, 10, 10, 15)


def format_timestamp(timestamp_ms: int) -> str:
    """毫秒时间戳 → 本地时间字符串"""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime(TIMESTAMP_FORMAT)


def resolve_filename(options: Optional[ExportOptions], prefix: str) -> str:
    """
    解析导出文件名

    有效的 options.filename 清理后使用（补 .xlsx 后缀），
    否则生成 "<prefix><毫秒时间戳>.xlsx"
    """
    if options is not None and options.filename:
        valid, sanitized, error = validate_filename(options.filename)
        if valid:
            if not sanitized.lower().endswith(".xlsx"):
                sanitized += ".xlsx"
            return sanitized
        logger.warning("[Export] %s (%s)", ERROR_MESSAGES["INVALID_FILENAME"], error)
    return f"{prefix}{now_millis()}.xlsx"


def _property_rows(timestamp: int, page_url: str, width, height, x, y) -> list:
    return [
        {"Property": "Captured At", "Value": format_timestamp(timestamp)},
        {"Property": "Page URL", "Value": page_url},
        {"Property": "Image Width", "Value": width},
        {"Property": "Image Height", "Value": height},
        {"Property": "Crop Position X", "Value": x},
        {"Property": "Crop Position Y", "Value": y},
    ]


class WorkbookBuilder:
    """工作簿构建器"""

    def build_single(self, result: CropResult, options: ExportOptions,
                     metadata: Optional[Dict] = None) -> Workbook:
        """
        单张截图导出

        Args:
            result: 裁剪结果
            options: 导出配置
            metadata: {pageUrl, width, height, x, y}，可选

        Returns:
            Workbook：可选的 Metadata 表 + Screenshot 占位表
        """
        sheets = []

        if options.include_metadata and metadata:
            rows = _property_rows(
                options.timestamp or now_millis(),
                metadata.get("pageUrl", ""),
                metadata.get("width", result.width),
                metadata.get("height", result.height),
                metadata.get("x", result.x),
                metadata.get("y", result.y),
            )
            sheets.append(Sheet.from_records("Metadata", rows, PROPERTY_WIDTHS))

        # 图像像素不写入单元格，只记录截图已成功
        sheets.append(Sheet.from_records("Screenshot", [{
            "Screenshot": "Image data captured successfully",
            "Format": "JPEG (Data URL)",
            "Status": "Ready for download",
        }]))

        return Workbook(tuple(sheets))

    def build_batch(self, records: Sequence[CropRecord], options: ExportOptions) -> Workbook:
        """
        批量导出：Summary 表 + 每条记录一个 Crop_N 表

        Raises:
            EmptyBatchError: 没有记录
        """
        if not records:
            raise EmptyBatchError(ERROR_MESSAGES["BATCH_EMPTY"])

        summary = [
            {
                "Crop #": index + 1,
                "Captured At": format_timestamp(record.timestamp),
                "Page URL": record.page_url,
                "Width": record.width,
                "Height": record.height,
                "Position": record.position,
            }
            for index, record in enumerate(records)
        ]
        sheets = [Sheet.from_records("Summary", summary, SUMMARY_WIDTHS)]

        for index, record in enumerate(records):
            sheet_name = f"Crop_{index + 1}"
            if options.include_metadata:
                rows = _property_rows(record.timestamp, record.page_url, record.width,
                                      record.height, record.x, record.y)
                rows.append({"Property": "Screenshot Data", "Value": "Data URL stored (reference)"})
                sheets.append(Sheet.from_records(sheet_name, rows, PROPERTY_WIDTHS))
            else:
                sheets.append(Sheet.from_records(sheet_name, [{
                    "Crop": f"Screenshot {index + 1}",
                    "Status": "Captured successfully",
                }]))

        return Workbook(tuple(sheets))

    def write(self, workbook: Workbook, directory: str, filename: str) -> str:
        """
        将工作簿写入 .xlsx 文件

        Returns:
            文件路径

        Raises:
            ExportWriteFailure: 构建或写入失败
        """
        filepath = os.path.join(directory, filename)
        try:
            ensure_dir(directory)
            book = XlsxWorkbook()
            book.remove(book.active)
            for sheet in workbook.sheets:
                ws = book.create_sheet(title=sheet.name)
                ws.append(list(sheet.headers))
                for row in sheet.rows:
                    ws.append(list(row))
                if sheet.column_widths:
                    for i, width in enumerate(sheet.column_widths, start=1):
                        ws.column_dimensions[get_column_letter(i)].width = width
            book.save(filepath)
        except (OSError, ValueError, TypeError, IllegalCharacterError) as e:
            logger.error("[Export] writing %s failed: %s", filepath, e)
            raise ExportWriteFailure(f"{ERROR_MESSAGES['EXCEL_FILE_WRITE_FAILED']} ({e})") from e

        logger.info("[Export] wrote %d sheets to %s", len(workbook), filepath)
        return filepath
