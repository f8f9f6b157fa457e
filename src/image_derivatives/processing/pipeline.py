"""处理流水线：检查目录、扫描源图、逐张（或有限并发）生成衍生图并汇总结果。"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Optional

from image_derivatives.core.config import JobConfig
from image_derivatives.core.exceptions import SourceDirectoryMissing
from image_derivatives.core.models import OPERATION_UNKNOWN, BatchResult, ItemOutcome
from image_derivatives.core.output_manager import OutputManager
from image_derivatives.core.progress import ProgressUpdate
from image_derivatives.core.report import write_csv_report
from image_derivatives.core.scanner import collect_source_images
from image_derivatives.processing.toolkit import Toolkit
from image_derivatives.processing.worker import ItemTask, run_item

LOGGER = logging.getLogger(__name__)


ProgressCallback = Optional[Callable[[ProgressUpdate], None]]


def process_batch(
    config: JobConfig,
    toolkit: Toolkit,
    progress_callback: ProgressCallback = None,
) -> BatchResult:
    """批量处理入口。

    源目录缺失或输出目录无法创建时直接抛出异常，此时不会处理任何图片；
    单张图片的失败只记录在结果中。
    """

    config.validate()

    # 默认输出目录位于源目录之下，必须在创建输出目录之前检查源目录。
    if not config.source_dir.is_dir():
        raise SourceDirectoryMissing(config.source_dir)

    output_manager = OutputManager(config)
    output_manager.provision()

    sources = collect_source_images(config)
    total = len(sources)
    result = BatchResult()

    if total == 0:
        LOGGER.info("源目录中没有需要处理的图片")
        _emit_progress(progress_callback, result, total, "没有需要处理的图片", status="done")
        _write_report(config, result)
        return result

    LOGGER.info("发现 %d 张待处理图片（后端：%s）", total, toolkit.name)

    tasks: list[ItemTask] = []
    for index, source in enumerate(sources, start=1):
        full, thumb = output_manager.targets_for(source)
        tasks.append(
            ItemTask(
                source=source,
                full=full,
                thumb=thumb,
                quality=config.quality,
                label=f"[{index}/{total}] ",
            )
        )

    _emit_progress(progress_callback, result, total, "开始执行处理任务")

    if config.max_workers <= 1:
        for task in tasks:
            outcome = _run_guarded(task, toolkit, output_manager)
            result.record(outcome)
            _emit_progress(progress_callback, result, total, _describe(task, outcome))
    else:
        # 每个任务内部步骤仍然按顺序执行；计数只在当前线程中累加。
        with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
            future_map = {
                executor.submit(_run_guarded, task, toolkit, output_manager): task for task in tasks
            }
            for future in as_completed(future_map):
                task = future_map[future]
                outcome = future.result()
                result.record(outcome)
                _emit_progress(progress_callback, result, total, _describe(task, outcome))

    summary = result.summary()
    LOGGER.info(
        "处理完成：共 %d 张，成功 %d 张，失败 %d 张",
        summary.processed,
        summary.succeeded,
        summary.failed,
    )
    _write_report(config, result)
    _emit_progress(progress_callback, result, total, "处理完成", status="done")
    return result


def _run_guarded(task: ItemTask, toolkit: Toolkit, output_manager: OutputManager) -> ItemOutcome:
    """保证单张图片的意外异常不会中断整个批次。"""

    try:
        return run_item(task, toolkit, output_manager)
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("处理 %s 时发生异常：%s", task.source.name, exc)
        return ItemOutcome(
            source_path=task.source.source_path,
            succeeded=False,
            status="error-worker",
            operation=OPERATION_UNKNOWN,
            message=str(exc),
        )


def _describe(task: ItemTask, outcome: ItemOutcome) -> str:
    state = "成功" if outcome.succeeded else "失败"
    return f"{task.source.name}：{state}（{outcome.status}）"


def _emit_progress(
    callback: ProgressCallback,
    result: BatchResult,
    total: int,
    message: Optional[str] = None,
    status: str = "running",
) -> None:
    if not callback:
        return
    callback(
        ProgressUpdate(
            total=total,
            completed=len(result.succeeded) + len(result.failed),
            succeeded=len(result.succeeded),
            failed=len(result.failed),
            message=message,
            status=status,
        )
    )


def _write_report(config: JobConfig, result: BatchResult) -> None:
    if config.report_path is None:
        return
    try:
        path = write_csv_report(result.all_outcomes(), config.report_path)
    except OSError as exc:
        LOGGER.error("写入报告失败：%s", exc)
        return
    LOGGER.info("报告已写入：%s", path)
