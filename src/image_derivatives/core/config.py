"""批处理任务的配置模型。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from image_derivatives.core.exceptions import InvalidConfigurationError

FULL_SIZE_WIDTH = 1024
THUMB_WIDTH = 512
QUALITY = 85

SOURCE_DIR = Path("images")
FULL_DIR = Path("images/full")
THUMB_DIR = Path("images/thumbs")

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".tiff", ".tif", ".gif", ".bmp", ".webp")

# 以该字符开头的文件视为暂存文件，输出时去掉一个前缀字符。
HIDDEN_MARKER = "_"


@dataclass(slots=True)
class JobConfig:
    """单次批处理任务的配置集合。"""

    source_dir: Path = SOURCE_DIR
    full_dir: Path = FULL_DIR
    thumb_dir: Path = THUMB_DIR
    full_width: int = FULL_SIZE_WIDTH
    thumb_width: int = THUMB_WIDTH
    quality: int = QUALITY
    extensions: Sequence[str] = field(default_factory=lambda: IMAGE_EXTENSIONS)
    hidden_marker: str = HIDDEN_MARKER
    max_workers: int = 1
    report_path: Optional[Path] = None

    def validate(self) -> None:
        """检查数值参数，非法时抛出 InvalidConfigurationError。"""

        if self.full_width <= 0:
            raise InvalidConfigurationError(f"全尺寸宽度必须大于 0: {self.full_width}")
        if self.thumb_width <= 0:
            raise InvalidConfigurationError(f"缩略图宽度必须大于 0: {self.thumb_width}")
        if not 1 <= self.quality <= 100:
            raise InvalidConfigurationError(f"质量参数必须在 1~100 之间: {self.quality}")
        if self.max_workers < 1:
            raise InvalidConfigurationError(f"并发数量至少为 1: {self.max_workers}")
        if len(self.hidden_marker) > 1:
            raise InvalidConfigurationError(f"暂存前缀只能是单个字符: {self.hidden_marker!r}")

        # 任意两个目录重合都会让输出覆盖源图或另一张衍生图。
        directories = {
            "源目录": self.source_dir,
            "全尺寸图目录": self.full_dir,
            "缩略图目录": self.thumb_dir,
        }
        seen: dict[Path, str] = {}
        for label, directory in directories.items():
            resolved = directory.resolve()
            if resolved in seen:
                raise InvalidConfigurationError(f"{label}与{seen[resolved]}不能相同: {directory}")
            seen[resolved] = label
