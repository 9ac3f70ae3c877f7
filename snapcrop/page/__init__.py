# -*- coding: utf-8 -*-
"""
页面上下文模块
"""

from .selection_tracker import SelectionTracker, TrackerState
from .notifier import Notifier, Toast
from .page_context import PageContext

__all__ = ['SelectionTracker', 'TrackerState', 'Notifier', 'Toast', 'PageContext']
