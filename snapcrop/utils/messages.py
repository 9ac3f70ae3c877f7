# -*- coding: utf-8 -*-
"""
用户提示文本
统一的错误/成功/信息提示，以及原始错误到友好提示的映射
"""

ERROR_MESSAGES = {
    # 截图
    "SCREENSHOT_CAPTURE_FAILED": "Failed to capture screenshot. Please try again.",
    "SCREENSHOT_CORS_ISSUE": "Cannot capture this page due to browser security restrictions.",
    "SCREENSHOT_PERMISSION_DENIED": "Permission denied. Please check extension permissions.",
    "SCREENSHOT_NO_ACTIVE_TAB": "No active tab found. Please click on a webpage first.",
    "SCREENSHOT_EMPTY_SELECTION": "Selection is empty. Drag a larger area.",

    # 导出
    "EXCEL_EXPORT_FAILED": "Failed to export to Excel. Please try again.",
    "EXCEL_INVALID_DATA": "Invalid data format for Excel export.",
    "EXCEL_FILE_WRITE_FAILED": "Failed to write Excel file.",

    # 批量
    "BATCH_EMPTY": "No crops to export. Capture screenshots first.",
    "BATCH_STORAGE_FAILED": "Failed to store crop. Storage may be full.",
    "BATCH_CLEAR_FAILED": "Failed to clear crops.",

    # 校验
    "INVALID_FILENAME": "Invalid filename. Using default.",
    "INVALID_CROP_DATA": "Invalid crop data structure.",
    "INVALID_URL": "Invalid URL format.",
    "INVALID_DATA_URL": "Invalid screenshot data format.",

    # 通用
    "UNKNOWN_ERROR": "An unexpected error occurred. Please try again.",
    "UNKNOWN_MESSAGE": "Unknown message type.",
}

SUCCESS_MESSAGES = {
    "SCREENSHOT_CAPTURED": "Screenshot captured ✓",
    "SCREENSHOT_CAPTURED_FULL": "Full page screenshot captured ✓",
    "SCREENSHOT_CROPPED": "Screenshot cropped successfully ✓",
    "EXPORT_TO_EXCEL_SUCCESS": "Exported to Excel successfully ✓",
    "BATCH_EXPORT_SUCCESS": "Batch exported to Excel ✓",
    "CROP_STORED": "Crop stored for batch export ✓",
    "CROPS_CLEARED": "Crops cleared ✓",
    "SETTINGS_SAVED": "Settings saved ✓",
}

INFO_MESSAGES = {
    "CROP_MODE_ACTIVE": "Crop mode activated. Hold Alt and drag to select.",
}


def crop_count_message(count: int) -> str:
    """已存储数量提示"""
    return f"{count} crop{'s' if count != 1 else ''} stored"


def exporting_message(count: int) -> str:
    return f"Exporting {count} crop{'s' if count != 1 else ''}..."


def friendly_message(error) -> str:
    """
    将原始错误映射为简短的用户提示

    Args:
        error: 异常对象（其他类型一律视为未知错误）

    Returns:
        提示文本
    """
    if not isinstance(error, Exception):
        return ERROR_MESSAGES["UNKNOWN_ERROR"]

    text = str(error)
    lowered = text.lower()

    if "cors" in lowered:
        return ERROR_MESSAGES["SCREENSHOT_CORS_ISSUE"]
    elif "permission" in lowered:
        return ERROR_MESSAGES["SCREENSHOT_PERMISSION_DENIED"]
    elif "storage" in lowered:
        return ERROR_MESSAGES["BATCH_STORAGE_FAILED"]
    elif "invalid" in lowered:
        return ERROR_MESSAGES["INVALID_CROP_DATA"]

    return text or ERROR_MESSAGES["UNKNOWN_ERROR"]
