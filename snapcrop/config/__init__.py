# -*- coding: utf-8 -*-
"""
配置模块
"""

from .settings import Settings, EXPORT_FORMATS

__all__ = ['Settings', 'EXPORT_FORMATS']
