# -*- coding: utf-8 -*-
"""
截图协调器（后台上下文）
接收选区 → 截图 → 坐标映射 → 裁剪 → 下载/打开/存入批量 → 导出工作簿

批量队列只属于这里，其他上下文只能通过消息访问。
"""

import logging
from typing import Callable, Dict, Optional

from .batch_accumulator import BatchAccumulator
from .channel import BACKGROUND, PAGE, MessageChannel
from .coordinate_mapper import map_selection
from .errors import (
    CaptureFailure, DimensionProbeFailure, EmptyBatchError, EmptyCropError,
    ExportWriteFailure, SnapcropError, ValidationFailure,
)
from .image_cropper import ImageCropper, probe_dimensions
from .messages import (
    BACKGROUND_MESSAGES, ActivateSelection, BatchExportToWorkbook, CaptureWithCoordinates,
    ClearBatch, ExportSingleToWorkbook, GetBatchCount, ShowNotification, StoreCropForBatch,
    check_handlers, parse_message,
)
from .output import OutputSink
from .workbook_builder import (
    PREFIX_BATCH, PREFIX_BATCH_EXPORT, PREFIX_SINGLE, WorkbookBuilder, resolve_filename,
)
from ..config.settings import Settings
from ..models.crop import CropResult, ExportOptions, now_millis
from ..utils.messages import (
    ERROR_MESSAGES, SUCCESS_MESSAGES, crop_count_message, exporting_message, friendly_message,
)
from ..utils.validators import validate_crop_record, validate_export_options

logger = logging.getLogger(__name__)

# 快捷键命令
CMD_ACTIVATE_SELECTION = "activate-selection-mode"
CMD_CAPTURE_VIEWPORT = "capture-full-viewport"
CMD_EXPORT_BATCH = "export-batch"
COMMANDS = (CMD_ACTIVATE_SELECTION, CMD_CAPTURE_VIEWPORT, CMD_EXPORT_BATCH)

# capture_provider(callback)：截取可见视口，完成后以 data URI（失败为 None）回调
CaptureProvider = Callable[[Callable[[Optional[str]], None]], None]


def _ok(message: str, **extra) -> Dict:
    return dict(success=True, message=message, **extra)


def _fail(message: str) -> Dict:
    return {"success": False, "message": message}


def failure_message(error: Exception) -> str:
    """流水线错误 → 用户提示"""
    if isinstance(error, EmptyCropError):
        return ERROR_MESSAGES["SCREENSHOT_EMPTY_SELECTION"]
    if isinstance(error, DimensionProbeFailure):
        # 只保留可识别的原因（CORS、权限），其余解码失败统一提示
        friendly = friendly_message(error)
        if friendly in (ERROR_MESSAGES["SCREENSHOT_CORS_ISSUE"], ERROR_MESSAGES["SCREENSHOT_PERMISSION_DENIED"]):
            return friendly
        return ERROR_MESSAGES["SCREENSHOT_CAPTURE_FAILED"]
    if isinstance(error, ValidationFailure):
        # 保留字段信息
        return str(error)
    return friendly_message(error)


class CaptureCoordinator:
    """截图协调器"""

    def __init__(self, settings: Settings, capture_provider: CaptureProvider,
                 accumulator: BatchAccumulator, channel: MessageChannel = None,
                 cropper: ImageCropper = None, builder: WorkbookBuilder = None,
                 sink: OutputSink = None):
        self.settings = settings
        self.capture_provider = capture_provider
        self.accumulator = accumulator
        self.channel = channel
        self.cropper = cropper or ImageCropper(quality=settings.get("image_quality", 92))
        self.builder = builder or WorkbookBuilder()
        self.sink = sink or OutputSink(settings.get("output_dir"))

        self._handlers = {
            CaptureWithCoordinates: self._on_capture_with_coordinates,
            ExportSingleToWorkbook: self._on_export_single,
            StoreCropForBatch: self._on_store_crop,
            BatchExportToWorkbook: self._on_batch_export,
            GetBatchCount: self._on_get_batch_count,
            ClearBatch: self._on_clear_batch,
        }
        check_handlers(self._handlers, BACKGROUND_MESSAGES)

        if channel is not None:
            channel.register(BACKGROUND, self.handle)

    @property
    def output_dir(self) -> str:
        return self.settings.get("output_dir")

    # ==================== 消息入口 ====================

    def handle(self, message) -> Optional[Dict]:
        """
        处理一条消息

        Args:
            message: 消息字典（来自通道）或消息对象

        Returns:
            回复字典；capture-with-coordinates 不需要回复，返回 None
        """
        if isinstance(message, dict):
            try:
                message = parse_message(message)
            except ValidationFailure as e:
                logger.warning("[Coordinator] rejected message: %s", e)
                if message.get("type") == CaptureWithCoordinates.TYPE:
                    # 截图请求没有回复，只能通过页面提示报告
                    self.notify(str(e), "error")
                return _fail(str(e))

        handler = self._handlers.get(type(message))
        if handler is None:
            logger.warning("[Coordinator] %s is not a background message", type(message).__name__)
            return _fail(ERROR_MESSAGES["UNKNOWN_MESSAGE"])
        return handler(message)

    def handle_command(self, command: str) -> bool:
        """处理快捷键命令"""
        logger.info("[Coordinator] command %s", command)
        if command == CMD_ACTIVATE_SELECTION:
            self._send_to_page(ActivateSelection())
        elif command == CMD_CAPTURE_VIEWPORT:
            self._capture_visible(self._emit_full_viewport)
        elif command == CMD_EXPORT_BATCH:
            count = self.accumulator.count()
            if count:
                self.notify(exporting_message(count), "info")
            response = self.handle(BatchExportToWorkbook(
                filename=f"{PREFIX_BATCH_EXPORT}{now_millis()}.xlsx",
                include_metadata=self.settings.include_metadata,
            ))
            self.notify(response["message"], "success" if response["success"] else "error")
        else:
            logger.warning("[Coordinator] unknown command: %s", command)
            return False
        return True

    # ==================== 页面通知 ====================

    def _send_to_page(self, message):
        if self.channel is not None:
            self.channel.send(PAGE, message)

    def notify(self, message: str, notification_type: str = "info"):
        """在页面上显示临时提示"""
        self._send_to_page(ShowNotification(message, notification_type))

    def _report_failure(self, error: Exception):
        logger.warning("[Capture] %s: %s", type(error).__name__, error)
        self.notify(failure_message(error), "error")

    # ==================== 截图流水线 ====================

    def _capture_visible(self, on_captured: Callable[[str], None]):
        """截取可见视口；截图完成后在回调中继续处理"""
        def _resume(uri: Optional[str]):
            if not uri:
                self._report_failure(CaptureFailure(ERROR_MESSAGES["SCREENSHOT_NO_ACTIVE_TAB"]))
                return
            try:
                on_captured(uri)
            except SnapcropError as e:
                self._report_failure(e)
            except Exception as e:
                # 回调在之后的事件循环中执行，异常不能逃逸到 Qt
                logger.exception("[Capture] processing capture failed")
                self._report_failure(CaptureFailure(str(e)))

        try:
            self.capture_provider(_resume)
        except SnapcropError as e:
            self._report_failure(e)
        except Exception as e:
            # 外部截图接口的任何失败都不能让后台上下文崩溃
            logger.exception("[Capture] capture provider failed")
            self._report_failure(CaptureFailure(str(e)))

    def _on_capture_with_coordinates(self, message: CaptureWithCoordinates):
        logger.info("[Capture] selection %s viewport %s", message.rect, message.viewport_metrics)
        self._capture_visible(lambda uri: self._process_selection(message, uri))
        return None

    def _process_selection(self, message: CaptureWithCoordinates, uri: str):
        image = probe_dimensions(uri)
        pixel_rect = map_selection(message.rect, message.viewport_metrics, image.width)
        result = self.cropper.crop(image, pixel_rect)
        logger.info("[Capture] cropped %dx%d at (%d, %d)",
                    result.width, result.height, result.x, result.y)
        self._route(result, message.page_url)

    def _route(self, result: CropResult, page_url: str):
        """按默认导出格式分发：image / workbook / both"""
        export_format = self.settings.default_export_format

        if export_format in ("image", "both"):
            self._emit_image(result.data_uri)

        if export_format in ("workbook", "both"):
            response = self._on_store_crop(StoreCropForBatch(result.to_record(page_url).to_dict()))
            if response["success"]:
                self.notify(f"{SUCCESS_MESSAGES['CROP_STORED']} ({crop_count_message(response['cropsCount'])})",
                            "success")
            else:
                self.notify(response["message"], "error")
        else:
            self.notify(SUCCESS_MESSAGES["SCREENSHOT_CROPPED"], "success")

    def _emit_image(self, data_uri: str):
        """按设置下载和/或打开"""
        try:
            if self.settings.download:
                self.sink.set_output_dir(self.output_dir)
                self.sink.download(data_uri)
            if self.settings.open_in_tab:
                self.sink.open_in_viewer(data_uri)
        except ExportWriteFailure as e:
            self._report_failure(e)

    def _emit_full_viewport(self, uri: str):
        self._emit_image(uri)
        self.notify(SUCCESS_MESSAGES["SCREENSHOT_CAPTURED_FULL"], "success")

    # ==================== 导出 / 批量 ====================

    def _export_options(self, include_metadata, filename, timestamp: int) -> ExportOptions:
        if include_metadata is None:
            include_metadata = self.settings.include_metadata
        options = validate_export_options({"includeMetadata": include_metadata, "timestamp": timestamp})
        # 无效文件名不报错，退回默认文件名
        options.filename = filename if isinstance(filename, str) else None
        return options

    def _on_export_single(self, message: ExportSingleToWorkbook) -> Dict:
        timestamp = now_millis()
        try:
            record = validate_crop_record(message.record_fields(timestamp))
            options = self._export_options(message.include_metadata, message.filename, timestamp)
            result = CropResult(record.data_uri, record.width, record.height, record.x, record.y)
            workbook = self.builder.build_single(result, options, metadata=record.to_dict())
            path = self.builder.write(workbook, self.output_dir, resolve_filename(options, PREFIX_SINGLE))
        except (ValidationFailure, ExportWriteFailure) as e:
            logger.warning("[Export] single export failed: %s", e)
            return _fail(failure_message(e))
        return _ok(SUCCESS_MESSAGES["EXPORT_TO_EXCEL_SUCCESS"], filename=path)

    def _on_store_crop(self, message: StoreCropForBatch) -> Dict:
        fields = dict(message.fields)
        if fields.get("timestamp") is None:
            fields["timestamp"] = now_millis()
        try:
            count, persisted = self.accumulator.append(fields)
        except ValidationFailure as e:
            logger.warning("[Batch] rejected crop: %s", e)
            return _fail(failure_message(e))
        if not persisted:
            return _ok(ERROR_MESSAGES["BATCH_STORAGE_FAILED"], cropsCount=count)
        return _ok(SUCCESS_MESSAGES["CROP_STORED"], cropsCount=count)

    def _on_batch_export(self, message: BatchExportToWorkbook) -> Dict:
        count = self.accumulator.count()
        if count == 0:
            return _fail(ERROR_MESSAGES["BATCH_EMPTY"])

        try:
            options = self._export_options(message.include_metadata, message.filename, now_millis())
            records = self.accumulator.drain_for_export()
            workbook = self.builder.build_batch(records, options)
            path = self.builder.write(workbook, self.output_dir, resolve_filename(options, PREFIX_BATCH))
        except (ValidationFailure, EmptyBatchError, ExportWriteFailure) as e:
            logger.warning("[Export] batch export failed, keeping %d crops: %s", count, e)
            return _fail(failure_message(e))

        # 只有写入成功后才清空
        self.accumulator.clear()
        logger.info("[Export] exported %d crops to %s", count, path)
        return _ok(SUCCESS_MESSAGES["BATCH_EXPORT_SUCCESS"], filename=path, exported=count)

    def _on_get_batch_count(self, message: GetBatchCount) -> Dict:
        return {"success": True, "count": self.accumulator.count()}

    def _on_clear_batch(self, message: ClearBatch) -> Dict:
        if not self.accumulator.clear():
            return _fail(ERROR_MESSAGES["BATCH_CLEAR_FAILED"])
        return _ok(SUCCESS_MESSAGES["CROPS_CLEARED"])
