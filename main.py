#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
网页区域截图工具 - 主入口
Snapcrop - Main Entry

功能：按住 Alt 框选 → 截图裁剪 → 下载/批量保存 → 导出 Excel
"""

import argparse
import logging
import sys

from PyQt5.QtWidgets import QApplication
from PyQt5.QtCore import Qt


def main(argv=None):
    """应用程序入口"""
    parser = argparse.ArgumentParser(prog="snapcrop")
    parser.add_argument("page", nargs="?", help="page image to open")
    parser.add_argument("--config", default=None, help="settings file (default: settings.json)")
    parser.add_argument("--batch-store", default="batch_crops.json", help="batch queue file")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from snapcrop.config.settings import Settings
    from snapcrop.ui.main_window import MainWindow

    # 启用高DPI支持
    QApplication.setAttribute(Qt.AA_EnableHighDpiScaling, True)
    QApplication.setAttribute(Qt.AA_UseHighDpiPixmaps, True)

    app = QApplication(sys.argv[:1])
    app.setStyle('Fusion')
    app.setApplicationName("Snapcrop")
    app.setApplicationVersion("1.0.0")

    window = MainWindow(Settings(args.config), storage_path=args.batch_store)
    if args.page:
        window.load_page(args.page)
    window.show()

    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
