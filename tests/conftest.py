"""测试共用的内存图像工具与配置构造函数。"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Optional

import pytest

from image_derivatives.core.config import JobConfig
from image_derivatives.core.models import ImageDimensions


class FakeToolkit:
    """不依赖真实图片的工具实现：尺寸记录在内存里，输出文件只写入占位内容。"""

    name = "fake"

    def __init__(self) -> None:
        self.dimensions: dict[Path, ImageDimensions] = {}
        self.failing_outputs: set[Path] = set()
        self.unreadable: set[Path] = set()
        self.calls: list[tuple[str, Path, Optional[Path], Optional[int]]] = []

    def add_image(self, path: Path, width: int, height: int) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(f"source:{path.name}:{width}x{height}".encode())
        self.dimensions[path] = ImageDimensions(width=width, height=height)
        return path

    def read_dimensions(self, path: Path) -> Optional[ImageDimensions]:
        self.calls.append(("identify", path, None, None))
        if path in self.unreadable or not path.exists():
            return None
        return self.dimensions.get(path)

    def resize(self, input_path: Path, output_path: Path, width: int, quality: int) -> bool:
        self.calls.append(("resize", input_path, output_path, width))
        source = self.dimensions.get(input_path)
        if output_path in self.failing_outputs or source is None or not input_path.exists():
            return False
        height = max(1, round(source.height * width / source.width))
        output_path.write_bytes(f"resized:{width}x{height}:q{quality}".encode())
        self.dimensions[output_path] = ImageDimensions(width=width, height=height)
        return True

    def copy(self, input_path: Path, output_path: Path) -> bool:
        self.calls.append(("copy", input_path, output_path, None))
        if output_path in self.failing_outputs:
            return False
        shutil.copyfile(input_path, output_path)
        self.dimensions[output_path] = self.dimensions[input_path]
        return True

    def calls_of(self, kind: str) -> list[tuple[str, Path, Optional[Path], Optional[int]]]:
        return [call for call in self.calls if call[0] == kind]


def make_config(root: Path, **overrides) -> JobConfig:
    images = root / "images"
    params = dict(
        source_dir=images,
        full_dir=images / "full",
        thumb_dir=images / "thumbs",
    )
    params.update(overrides)
    return JobConfig(**params)


@pytest.fixture
def toolkit() -> FakeToolkit:
    return FakeToolkit()


@pytest.fixture
def config(tmp_path: Path) -> JobConfig:
    (tmp_path / "images").mkdir()
    return make_config(tmp_path)
