"""输出目录准备、衍生图路径决策与源文件清理。"""

from __future__ import annotations

import logging
from pathlib import Path

from image_derivatives.core.config import JobConfig
from image_derivatives.core.exceptions import DirectoryProvisionError
from image_derivatives.core.models import ROLE_FULL, ROLE_THUMB, DerivativeTarget, SourceImage

LOGGER = logging.getLogger(__name__)


def ensure_directory(path: Path) -> None:
    """幂等地创建目录（包括中间目录），无法创建时抛出 DirectoryProvisionError。"""

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        # exist_ok 只对目录生效，同名普通文件会触发 FileExistsError。
        raise DirectoryProvisionError(path, str(exc)) from exc


class OutputManager:
    """负责全尺寸/缩略图目录、输出路径以及源文件删除。"""

    def __init__(self, config: JobConfig) -> None:
        self.config = config
        self.full_dir = config.full_dir
        self.thumb_dir = config.thumb_dir

    def provision(self) -> None:
        """在批处理开始前准备两个输出目录。"""

        for directory in (self.full_dir, self.thumb_dir):
            ensure_directory(directory)
            LOGGER.info("输出目录就绪：%s", directory)

    def targets_for(self, source: SourceImage) -> tuple[DerivativeTarget, DerivativeTarget]:
        """根据规范化后的文件名生成全尺寸与缩略图两个目标。"""

        full = DerivativeTarget(
            role=ROLE_FULL,
            width=self.config.full_width,
            destination=self.full_dir / source.output_name,
        )
        thumb = DerivativeTarget(
            role=ROLE_THUMB,
            width=self.config.thumb_width,
            destination=self.thumb_dir / source.output_name,
        )
        return full, thumb

    def retire(self, source: SourceImage) -> bool:
        """删除源文件。失败只记录日志，不影响条目结果。"""

        try:
            source.source_path.unlink()
        except OSError as exc:
            LOGGER.warning("删除源文件失败 %s: %s", source.name, exc)
            return False
        return True
