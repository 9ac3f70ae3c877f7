# -*- coding: utf-8 -*-
"""
网页区域截图工具
框选 → 坐标映射 → 裁剪 → 批量 → 导出 Excel
"""

__version__ = "1.0.0"
