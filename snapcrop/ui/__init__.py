# -*- coding: utf-8 -*-
"""
UI界面模块
"""

from .main_window import MainWindow, OptionsDialog
from .page_view import PageView
from .batch_monitor import BatchCountMonitor

__all__ = ['MainWindow', 'OptionsDialog', 'PageView', 'BatchCountMonitor']
