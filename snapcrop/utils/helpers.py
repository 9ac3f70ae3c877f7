# -*- coding: utf-8 -*-
"""
工具函数
"""

import base64
import binascii
import os
import re

_DATA_URI_HEADER = re.compile(r"^data:(?P<mime>[\w/+.-]+);base64,", re.IGNORECASE)

MIME_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


def ensure_dir(path: str) -> str:
    """确保目录存在，返回该目录"""
    os.makedirs(path, exist_ok=True)
    return path


def encode_data_uri(data: bytes, mime: str = "image/jpeg") -> str:
    """字节 → data URI"""
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_uri(data_uri: str) -> bytes:
    """
    data URI → 字节

    Raises:
        ValueError: 不是 base64 data URI 或内容无法解码
    """
    match = _DATA_URI_HEADER.match(data_uri or "")
    if not match:
        raise ValueError("Invalid data URI header")
    try:
        return base64.b64decode(data_uri[match.end():], validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def data_uri_mime(data_uri: str) -> str:
    match = _DATA_URI_HEADER.match(data_uri or "")
    return match.group("mime").lower() if match else ""


def extension_for_data_uri(data_uri: str) -> str:
    """根据 MIME 推断文件扩展名，默认 .jpg"""
    return MIME_EXTENSIONS.get(data_uri_mime(data_uri), ".jpg")
