"""单张图片处理流程（读尺寸 -> 全尺寸 -> 缩略图 -> 删除源文件）测试。"""

from __future__ import annotations

import pytest

from conftest import FakeToolkit
from image_derivatives.core.config import JobConfig
from image_derivatives.core.models import ImageDimensions, SourceImage
from image_derivatives.core.output_manager import OutputManager
from image_derivatives.core.scanner import output_filename
from image_derivatives.processing.derivatives import choose_operation
from image_derivatives.processing.worker import ItemTask, run_item


def _prepare(config: JobConfig, toolkit: FakeToolkit, name: str, width: int, height: int = 600):
    manager = OutputManager(config)
    manager.provision()
    path = toolkit.add_image(config.source_dir / name, width, height)
    source = SourceImage(source_path=path, name=name, output_name=output_filename(name))
    full, thumb = manager.targets_for(source)
    task = ItemTask(source=source, full=full, thumb=thumb, quality=config.quality)
    return task, manager


@pytest.mark.parametrize("width", [1025, 2000, 6000])
def test_wide_source_is_resized_to_full_width(config: JobConfig, toolkit: FakeToolkit, width: int) -> None:
    task, manager = _prepare(config, toolkit, "wide.jpg", width)

    outcome = run_item(task, toolkit, manager)

    assert outcome.succeeded
    assert outcome.operation == "resize"
    assert toolkit.dimensions[task.full.destination].width == 1024
    assert toolkit.calls_of("copy") == []


@pytest.mark.parametrize("width", [1, 400, 1024])
def test_small_source_is_copied_verbatim(config: JobConfig, toolkit: FakeToolkit, width: int) -> None:
    task, manager = _prepare(config, toolkit, "small.png", width)
    original_bytes = task.source.source_path.read_bytes()

    outcome = run_item(task, toolkit, manager)

    assert outcome.succeeded
    assert outcome.operation == "copy"
    assert task.full.destination.read_bytes() == original_bytes


def test_thumbnail_is_resized_from_full_derivative(config: JobConfig, toolkit: FakeToolkit) -> None:
    task, manager = _prepare(config, toolkit, "photo.jpg", 3000, 1500)

    outcome = run_item(task, toolkit, manager)

    assert outcome.succeeded
    resize_calls = toolkit.calls_of("resize")
    assert resize_calls[-1] == ("resize", task.full.destination, task.thumb.destination, 512)
    assert toolkit.dimensions[task.thumb.destination] == ImageDimensions(512, 256)
    assert outcome.thumb_path == task.thumb.destination


def test_thumbnail_is_resized_even_for_copied_source(config: JobConfig, toolkit: FakeToolkit) -> None:
    task, manager = _prepare(config, toolkit, "tiny.png", 200, 100)

    outcome = run_item(task, toolkit, manager)

    assert outcome.succeeded
    assert toolkit.dimensions[task.thumb.destination].width == 512


def test_successful_item_retires_source(config: JobConfig, toolkit: FakeToolkit) -> None:
    task, manager = _prepare(config, toolkit, "done.jpg", 1500)

    outcome = run_item(task, toolkit, manager)

    assert outcome.succeeded
    assert outcome.source_retired
    assert outcome.status == "processed"
    assert not task.source.source_path.exists()
    assert task.full.destination.exists()
    assert task.thumb.destination.exists()


def test_unreadable_metadata_fails_without_outputs(config: JobConfig, toolkit: FakeToolkit) -> None:
    task, manager = _prepare(config, toolkit, "broken.jpg", 800)
    toolkit.unreadable.add(task.source.source_path)

    outcome = run_item(task, toolkit, manager)

    assert not outcome.succeeded
    assert outcome.status == "error-metadata"
    assert outcome.operation == "unknown"
    assert toolkit.calls_of("resize") == [] and toolkit.calls_of("copy") == []
    assert task.source.source_path.exists()


@pytest.mark.parametrize("width", [500, 2500])
def test_full_failure_skips_thumbnail_and_keeps_source(
    config: JobConfig, toolkit: FakeToolkit, width: int
) -> None:
    task, manager = _prepare(config, toolkit, "fail.jpg", width)
    toolkit.failing_outputs.add(task.full.destination)

    outcome = run_item(task, toolkit, manager)

    assert not outcome.succeeded
    assert outcome.status == "error-full"
    assert not task.thumb.destination.exists()
    assert all(call[2] != task.thumb.destination for call in toolkit.calls)
    assert task.source.source_path.exists()


def test_thumbnail_failure_keeps_full_and_source(config: JobConfig, toolkit: FakeToolkit) -> None:
    task, manager = _prepare(config, toolkit, "half.jpg", 2048)
    toolkit.failing_outputs.add(task.thumb.destination)

    outcome = run_item(task, toolkit, manager)

    assert not outcome.succeeded
    assert outcome.status == "error-thumb"
    assert outcome.operation == "resize"
    assert task.full.destination.exists()
    assert outcome.full_path == task.full.destination
    assert task.source.source_path.exists()


def test_retirement_failure_still_counts_as_success(
    config: JobConfig, toolkit: FakeToolkit, monkeypatch: pytest.MonkeyPatch
) -> None:
    task, manager = _prepare(config, toolkit, "locked.jpg", 900)
    monkeypatch.setattr(OutputManager, "retire", lambda self, source: False)

    outcome = run_item(task, toolkit, manager)

    assert outcome.succeeded
    assert not outcome.source_retired
    assert outcome.status == "processed-source-kept"
    assert task.source.source_path.exists()


def test_retire_reports_missing_file(config: JobConfig) -> None:
    manager = OutputManager(config)
    ghost = SourceImage(source_path=config.source_dir / "ghost.jpg", name="ghost.jpg", output_name="ghost.jpg")

    assert manager.retire(ghost) is False


def test_choose_operation_boundary() -> None:
    assert choose_operation(ImageDimensions(1024, 10), 1024) == "copy"
    assert choose_operation(ImageDimensions(1025, 10), 1024) == "resize"
