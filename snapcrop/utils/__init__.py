# -*- coding: utf-8 -*-
"""
工具函数模块
"""

from .helpers import ensure_dir, encode_data_uri, decode_data_uri

__all__ = ['ensure_dir', 'encode_data_uri', 'decode_data_uri']
