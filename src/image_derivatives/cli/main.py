"""命令行入口。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from image_derivatives.core.config import (
    FULL_DIR,
    FULL_SIZE_WIDTH,
    QUALITY,
    SOURCE_DIR,
    THUMB_DIR,
    THUMB_WIDTH,
    JobConfig,
)
from image_derivatives.core.exceptions import (
    DirectoryProvisionError,
    InvalidConfigurationError,
    SourceDirectoryMissing,
)
from image_derivatives.core.progress import ProgressUpdate
from image_derivatives.processing.pipeline import process_batch
from image_derivatives.processing.toolkit import make_toolkit
from image_derivatives.utils.logging import setup_logging

EXIT_OK = 0
EXIT_ITEM_FAILURES = 1
EXIT_SOURCE_MISSING = 3
EXIT_PROVISION_FAILED = 4

app = typer.Typer(help="批量生成全尺寸图与缩略图，成功后删除源图片。")


def _build_progress_callback(progress: Progress):
    task_id: Optional[int] = None

    def callback(update: ProgressUpdate) -> None:
        nonlocal task_id
        if update.total == 0:
            return
        if task_id is None:
            task_id = progress.add_task("处理图片", total=update.total)
        progress.update(task_id, completed=update.completed)
        if update.message and update.status == "running":
            progress.log(update.message)

    return callback


@app.command("run")
def run_cli(  # noqa: PLR0913
    source: Path = typer.Option(SOURCE_DIR, "--source", "-s", help="源图片目录"),
    full_dir: Path = typer.Option(FULL_DIR, "--full-dir", help="全尺寸图输出目录"),
    thumb_dir: Path = typer.Option(THUMB_DIR, "--thumb-dir", help="缩略图输出目录"),
    full_width: int = typer.Option(FULL_SIZE_WIDTH, "--full-width", help="全尺寸图最大宽度"),
    thumb_width: int = typer.Option(THUMB_WIDTH, "--thumb-width", help="缩略图宽度"),
    quality: int = typer.Option(QUALITY, "--quality", help="缩放输出质量 1~100"),
    backend: str = typer.Option("magick", "--backend", help="图像后端 magick 或 pillow"),
    max_workers: int = typer.Option(1, "--workers", "-w", help="并发线程数量，1 表示顺序处理"),
    report: Optional[Path] = typer.Option(None, "--report", help="CSV 报告输出路径"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
) -> None:
    """处理源目录中的全部图片。"""

    setup_logging(logging.DEBUG if verbose else logging.INFO)
    logger = logging.getLogger(__name__)

    job = JobConfig(
        source_dir=source,
        full_dir=full_dir,
        thumb_dir=thumb_dir,
        full_width=full_width,
        thumb_width=thumb_width,
        quality=quality,
        max_workers=max_workers,
        report_path=report,
    )

    try:
        job.validate()
        toolkit = make_toolkit(backend)
    except InvalidConfigurationError as exc:
        raise typer.BadParameter(str(exc)) from exc

    logger.info("全尺寸宽度 %dpx，缩略图宽度 %dpx", job.full_width, job.thumb_width)

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
    )

    try:
        with progress:
            result = process_batch(job, toolkit, progress_callback=_build_progress_callback(progress))
    except SourceDirectoryMissing as exc:
        typer.echo(f"错误：{exc}", err=True)
        raise typer.Exit(code=EXIT_SOURCE_MISSING) from exc
    except DirectoryProvisionError as exc:
        typer.echo(f"错误：{exc}", err=True)
        raise typer.Exit(code=EXIT_PROVISION_FAILED) from exc

    summary = result.summary()
    if summary.processed == 0:
        typer.echo("源目录中没有需要处理的图片。")
        raise typer.Exit(code=EXIT_OK)

    typer.echo(
        f"处理完成：共 {summary.processed} 张，成功 {summary.succeeded} 张，失败 {summary.failed} 张"
        f"（缩放 {result.resized} 张，复制 {result.copied} 张）。"
    )
    if report is not None:
        typer.echo(f"报告文件：{report}")

    if summary.failed > 0:
        typer.echo("部分图片处理失败，请查看上方日志。", err=True)
        raise typer.Exit(code=EXIT_ITEM_FAILURES)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
