"""单张图片的处理单元：读尺寸 -> 全尺寸图 -> 缩略图 -> 删除源文件。"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from image_derivatives.core.models import (
    OPERATION_RESIZE,
    OPERATION_UNKNOWN,
    DerivativeTarget,
    ItemOutcome,
    SourceImage,
)
from image_derivatives.core.output_manager import OutputManager
from image_derivatives.processing.derivatives import produce_full, produce_thumbnail
from image_derivatives.processing.toolkit import Toolkit

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ItemTask:
    """描述单个图片处理任务。"""

    source: SourceImage
    full: DerivativeTarget
    thumb: DerivativeTarget
    quality: int
    label: str = ""


def run_item(task: ItemTask, toolkit: Toolkit, output_manager: OutputManager) -> ItemOutcome:
    """执行单张图片的完整流程，任何一步失败即停止，不回滚已写出的文件。"""

    source = task.source
    LOGGER.info("%s=== 处理: %s ===", task.label, source.name)

    dimensions = toolkit.read_dimensions(source.source_path)
    if dimensions is None:
        LOGGER.info("  跳过 %s：无法读取尺寸", source.name)
        return _failed(task, "error-metadata", OPERATION_UNKNOWN, "无法读取尺寸")

    LOGGER.info("  源图尺寸：%s", dimensions)

    full_ok, operation = produce_full(toolkit, source, task.full, dimensions, task.quality)
    if not full_ok:
        LOGGER.info("  %s 失败：全尺寸图生成失败（%s）", source.name, operation)
        return _failed(task, "error-full", operation, "全尺寸图生成失败")

    if not produce_thumbnail(toolkit, task.full, task.thumb, task.quality):
        LOGGER.info("  %s 失败：缩略图生成失败", source.name)
        return _failed(task, "error-thumb", operation, "缩略图生成失败", full_written=True)

    LOGGER.info("  删除源文件：%s", source.source_path)
    retired = output_manager.retire(source)
    verb = "RESIZED" if operation == OPERATION_RESIZE else "COPIED"
    if retired:
        LOGGER.info("  %s - %s，处理成功", source.name, verb)
        status, message = "processed", None
    else:
        LOGGER.info("  %s - %s，但源文件未删除", source.name, verb)
        status, message = "processed-source-kept", "源文件删除失败"

    return ItemOutcome(
        source_path=source.source_path,
        succeeded=True,
        status=status,
        operation=operation,
        source_retired=retired,
        full_path=task.full.destination,
        thumb_path=task.thumb.destination,
        message=message,
    )


def _failed(
    task: ItemTask,
    status: str,
    operation: str,
    message: str,
    *,
    full_written: bool = False,
) -> ItemOutcome:
    return ItemOutcome(
        source_path=task.source.source_path,
        succeeded=False,
        status=status,
        operation=operation,
        full_path=task.full.destination if full_written else None,
        message=message,
    )
