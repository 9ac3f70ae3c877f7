# -*- coding: utf-8 -*-
"""
主窗口
组装页面上下文与后台协调器，提供快捷键命令和设置对话框
"""

import logging
import os

from PyQt5.QtWidgets import (
    QMainWindow, QFileDialog, QMessageBox, QAction, QStatusBar, QShortcut,
    QInputDialog, QDialog, QFormLayout, QCheckBox, QComboBox, QLabel,
    QHBoxLayout, QPushButton, QVBoxLayout, QDialogButtonBox, QLineEdit,
)
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QKeySequence, QPixmap

from .batch_monitor import BatchCountMonitor
from .page_view import PageView
from ..config.settings import Settings, EXPORT_FORMATS
from ..core.batch_accumulator import BatchAccumulator
from ..core.capture_coordinator import (
    CaptureCoordinator, CMD_ACTIVATE_SELECTION, CMD_CAPTURE_VIEWPORT, CMD_EXPORT_BATCH,
)
from ..core.channel import BACKGROUND, MessageChannel
from ..core.messages import BatchExportToWorkbook, ClearBatch
from ..core.storage import BatchStorage
from ..core.workbook_builder import PREFIX_BATCH_EXPORT
from ..models.crop import now_millis
from ..page.page_context import PageContext

logger = logging.getLogger(__name__)

# 快捷键命令绑定
COMMAND_SHORTCUTS = {
    CMD_ACTIVATE_SELECTION: "Alt+Shift+S",
    CMD_CAPTURE_VIEWPORT: "Alt+Shift+V",
    CMD_EXPORT_BATCH: "Alt+Shift+E",
}

FORMAT_LABELS = {
    "image": "Image only",
    "workbook": "Excel workbook",
    "both": "Image + workbook",
}


class OptionsDialog(QDialog):
    """
    设置对话框
    批量数量通过 get-batch-count 定时查询，导出/清空也只走消息
    """

    def __init__(self, settings: Settings, channel: MessageChannel, parent=None):
        super().__init__(parent)
        self.settings = settings
        self.channel = channel
        self.setWindowTitle("Screenshot Settings")

        layout = QVBoxLayout(self)
        form = QFormLayout()

        self.check_open = QCheckBox("Open result in viewer")
        self.check_open.setChecked(settings.open_in_tab)
        form.addRow(self.check_open)

        self.check_download = QCheckBox("Auto-download result")
        self.check_download.setChecked(settings.download)
        form.addRow(self.check_download)

        self.check_metadata = QCheckBox("Include metadata in Excel export")
        self.check_metadata.setChecked(settings.include_metadata)
        form.addRow(self.check_metadata)

        self.combo_format = QComboBox()
        for key in EXPORT_FORMATS:
            self.combo_format.addItem(FORMAT_LABELS[key], key)
        self.combo_format.setCurrentIndex(EXPORT_FORMATS.index(settings.default_export_format))
        form.addRow("Default export format:", self.combo_format)

        self.edit_output = QLineEdit(settings.get("output_dir"))
        form.addRow("Output folder:", self.edit_output)
        layout.addLayout(form)

        # 批量
        batch_layout = QHBoxLayout()
        self.label_count = QLabel("Stored crops: 0")
        batch_layout.addWidget(self.label_count)
        batch_layout.addStretch()
        self.btn_export = QPushButton("Export batch")
        self.btn_export.clicked.connect(self.export_batch)
        batch_layout.addWidget(self.btn_export)
        self.btn_clear = QPushButton("Clear batch")
        self.btn_clear.clicked.connect(self.clear_batch)
        batch_layout.addWidget(self.btn_clear)
        layout.addLayout(batch_layout)

        buttons = QDialogButtonBox(QDialogButtonBox.Save | QDialogButtonBox.Close)
        buttons.accepted.connect(self.save)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

        self.monitor = BatchCountMonitor(channel, parent=self)
        self.monitor.count_changed.connect(self._on_count_changed)
        self.monitor.start()

    def _on_count_changed(self, count: int):
        self.label_count.setText(f"Stored crops: {count}")

    def save(self):
        """保存设置"""
        self.settings.set("open_in_tab", self.check_open.isChecked())
        self.settings.set("download", self.check_download.isChecked())
        self.settings.set("include_metadata", self.check_metadata.isChecked())
        self.settings.set("default_export_format", self.combo_format.currentData())
        self.settings.set("output_dir", self.edit_output.text().strip() or Settings.DEFAULTS["output_dir"])
        self.accept()

    def export_batch(self):
        if self.monitor.count == 0:
            QMessageBox.information(self, "Export", "No crops to export. Capture some screenshots first.")
            return
        self.channel.send(BACKGROUND, BatchExportToWorkbook(
            filename=f"{PREFIX_BATCH_EXPORT}{now_millis()}.xlsx",
            include_metadata=self.check_metadata.isChecked(),
        ), self._on_export_response)

    def _on_export_response(self, response: dict):
        if response.get("success"):
            QMessageBox.information(self, "Export", f"Successfully exported {response.get('exported', 0)} crops to Excel!")
            self.monitor.poll()
        else:
            QMessageBox.warning(self, "Export", f"Export failed: {response.get('message')}")

    def clear_batch(self):
        reply = QMessageBox.question(self, "Clear", "Are you sure you want to clear all stored crops?")
        if reply == QMessageBox.Yes:
            self.channel.send(BACKGROUND, ClearBatch(), lambda response: self.monitor.poll())

    def done(self, result):
        self.monitor.stop()
        super().done(result)


class MainWindow(QMainWindow):
    """主窗口"""

    def __init__(self, settings: Settings = None, storage_path: str = "batch_crops.json"):
        super().__init__()

        self.setWindowTitle("Snapcrop")
        self.resize(1280, 860)

        self.settings = settings or Settings()
        self.channel = MessageChannel(self)

        # 页面上下文
        self.page_view = PageView()
        self.setCentralWidget(self.page_view)
        self.page = PageContext(
            self.channel,
            viewport_provider=self.page_view.viewport_metrics,
            page_url_provider=lambda: self.page_view.page_url,
            parent=self,
        )
        self.page_view.attach(self.page.tracker, self.page.notifier)

        # 后台上下文（唯一持有批量队列）
        self.coordinator = CaptureCoordinator(
            self.settings,
            capture_provider=self.page_view.capture_visible,
            accumulator=BatchAccumulator(BatchStorage(storage_path)),
            channel=self.channel,
        )

        self.batch_monitor = BatchCountMonitor(self.channel, parent=self)
        self.batch_monitor.count_changed.connect(self._on_batch_count_changed)

        self.init_menu()
        self.init_shortcuts()
        self.init_statusbar()
        self.batch_monitor.start()

    def init_menu(self):
        """初始化菜单栏"""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("&File")

        action_open = QAction("Open page image...", self)
        action_open.setShortcut(QKeySequence.Open)
        action_open.triggered.connect(self.open_page_dialog)
        file_menu.addAction(action_open)

        action_url = QAction("Set page URL...", self)
        action_url.triggered.connect(self.set_page_url)
        file_menu.addAction(action_url)

        file_menu.addSeparator()

        action_exit = QAction("Exit", self)
        action_exit.setShortcut("Ctrl+Q")
        action_exit.triggered.connect(self.close)
        file_menu.addAction(action_exit)

        capture_menu = menubar.addMenu("&Capture")
        for command, label in (
            (CMD_ACTIVATE_SELECTION, "Activate selection mode"),
            (CMD_CAPTURE_VIEWPORT, "Capture full viewport"),
            (CMD_EXPORT_BATCH, "Export batch"),
        ):
            action = QAction(f"{label}\t{COMMAND_SHORTCUTS[command]}", self)
            action.triggered.connect(lambda checked=False, c=command: self.run_command(c))
            capture_menu.addAction(action)

        capture_menu.addSeparator()
        action_options = QAction("Settings...", self)
        action_options.triggered.connect(self.show_options)
        capture_menu.addAction(action_options)

    def init_shortcuts(self):
        """快捷键命令"""
        for command, sequence in COMMAND_SHORTCUTS.items():
            shortcut = QShortcut(QKeySequence(sequence), self)
            shortcut.setContext(Qt.ApplicationShortcut)
            shortcut.activated.connect(lambda c=command: self.run_command(c))

    def init_statusbar(self):
        self.statusbar = QStatusBar()
        self.setStatusBar(self.statusbar)
        self.statusbar.showMessage("Hold Alt and drag to capture a region")

    def run_command(self, command: str):
        self.coordinator.handle_command(command)

    def _on_batch_count_changed(self, count: int):
        self.statusbar.showMessage(f"{count} crop{'s' if count != 1 else ''} stored")

    def open_page_dialog(self):
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open page image", "", "Images (*.png *.jpg *.jpeg *.bmp *.webp)"
        )
        if file_path:
            self.load_page(file_path)

    def load_page(self, file_path: str):
        pixmap = QPixmap(file_path)
        if pixmap.isNull():
            QMessageBox.warning(self, "Error", "Could not load image")
            return
        self.page_view.set_page(pixmap, f"file://{os.path.abspath(file_path)}")
        self.page_view.setFocus()
        logger.info("[Page] loaded %s (%dx%d)", file_path, pixmap.width(), pixmap.height())

    def set_page_url(self):
        url, ok = QInputDialog.getText(self, "Page URL", "URL:", text=self.page_view.page_url)
        if ok:
            self.page_view.page_url = url.strip()

    def show_options(self):
        OptionsDialog(self.settings, self.channel, self).exec_()
