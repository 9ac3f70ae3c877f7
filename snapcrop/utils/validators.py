# -*- coding: utf-8 -*-
"""
输入校验
CropRecord、ExportOptions、文件名、data URI 的校验工具
"""

import re
from typing import Dict, Tuple

from ..core.errors import ValidationFailure
from ..models.crop import CropRecord, ExportOptions

CROP_FIELDS = ("dataUri", "timestamp", "pageUrl", "width", "height", "x", "y")

_DATA_URI_RE = re.compile(r"^data:image/\w+;base64,.+$", re.IGNORECASE | re.DOTALL)
_INVALID_FILENAME_CHARS = re.compile(r'[<>:"|?*\\/]')
MAX_FILENAME_LENGTH = 200


def _is_number(value) -> bool:
    # bool 是 int 的子类，这里不接受
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_filename(filename) -> Tuple[bool, str, str]:
    """
    校验并清理文件名

    Returns:
        (是否有效, 清理后的文件名, 错误信息)
    """
    if not filename or not isinstance(filename, str):
        return False, "", "Filename must be a non-empty string"

    sanitized = _INVALID_FILENAME_CHARS.sub("_", filename)
    sanitized = sanitized.replace("\0", "")
    if len(sanitized) > MAX_FILENAME_LENGTH:
        sanitized = sanitized[:MAX_FILENAME_LENGTH]

    if not sanitized.strip():
        return False, "", "Filename cannot be empty after sanitization"

    return True, sanitized.strip(), ""


def validate_data_uri(data_uri) -> bool:
    """校验 data:image/...;base64, 格式"""
    if not data_uri or not isinstance(data_uri, str):
        return False
    return bool(_DATA_URI_RE.match(data_uri))


def validate_crop_record(data) -> CropRecord:
    """
    校验批量记录

    Args:
        data: 消息中的字典（或已构造的 CropRecord）

    Returns:
        校验通过的 CropRecord

    Raises:
        ValidationFailure: 带字段名的错误
    """
    if isinstance(data, CropRecord):
        data = data.to_dict()
    if not isinstance(data, dict):
        raise ValidationFailure("Crop data must be an object")

    for name in CROP_FIELDS:
        if name not in data or data[name] is None:
            raise ValidationFailure(f"Missing required field: {name}", field=name)

    if not validate_data_uri(data["dataUri"]):
        raise ValidationFailure("Invalid data URL format", field="dataUri")

    if not isinstance(data["pageUrl"], str):
        raise ValidationFailure("Invalid page URL", field="pageUrl")

    if not _is_number(data["timestamp"]) or data["timestamp"] <= 0:
        raise ValidationFailure("Invalid timestamp", field="timestamp")

    if not _is_number(data["width"]) or data["width"] <= 0:
        raise ValidationFailure("Invalid width", field="width")

    if not _is_number(data["height"]) or data["height"] <= 0:
        raise ValidationFailure("Invalid height", field="height")

    if not _is_number(data["x"]) or data["x"] < 0:
        raise ValidationFailure("Invalid x coordinate", field="x")

    if not _is_number(data["y"]) or data["y"] < 0:
        raise ValidationFailure("Invalid y coordinate", field="y")

    return CropRecord.from_dict(data)


def validate_export_options(data: Dict) -> ExportOptions:
    """
    校验导出配置

    Raises:
        ValidationFailure: includeMetadata 不是布尔值、filename 类型错误或清理后为空
    """
    if not isinstance(data, dict):
        raise ValidationFailure("Options must be an object")

    if not isinstance(data.get("includeMetadata"), bool):
        raise ValidationFailure("includeMetadata must be a boolean", field="includeMetadata")

    filename = data.get("filename")
    if filename is not None and not isinstance(filename, str):
        raise ValidationFailure("filename must be a string", field="filename")

    if filename:
        valid, _, error = validate_filename(filename)
        if not valid:
            raise ValidationFailure(error, field="filename")

    timestamp = data.get("timestamp")
    if timestamp is not None and (not _is_number(timestamp) or timestamp <= 0):
        raise ValidationFailure("Invalid timestamp", field="timestamp")

    return ExportOptions.from_dict(data)
