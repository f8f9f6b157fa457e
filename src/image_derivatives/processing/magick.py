"""基于 ImageMagick 命令行的图像工具实现。"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from image_derivatives.core.models import ImageDimensions
from image_derivatives.processing.toolkit import copy_verbatim

LOGGER = logging.getLogger(__name__)

DIMENSIONS_RE = re.compile(r"^\s*(\d+)x(\d+)\s*$")


def parse_dimensions(output: str) -> Optional[ImageDimensions]:
    """解析 ``identify -format "%wx%h\\n"`` 的输出。

    多帧图片（GIF 等）每帧一行，只取第一行。
    """

    lines = output.strip().splitlines()
    if not lines:
        return None
    match = DIMENSIONS_RE.match(lines[0])
    if not match:
        return None
    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        return None
    return ImageDimensions(width=width, height=height)


@dataclass(slots=True)
class MagickToolkit:
    """通过 ``identify`` / ``convert``（或 ImageMagick 7 的 ``magick``）处理图片。"""

    identify_cmd: Sequence[str] = ("identify",)
    convert_cmd: Sequence[str] = ("convert",)
    name: str = "magick"

    @classmethod
    def detect(cls) -> "MagickToolkit":
        """优先使用 ``magick``，否则回退到 ``identify`` + ``convert``。

        都找不到时仍返回默认命令名，单张图片调用时会失败并记为条目错误。
        """

        magick = shutil.which("magick")
        if magick:
            return cls(identify_cmd=(magick, "identify"), convert_cmd=(magick,))

        identify = shutil.which("identify")
        convert = shutil.which("convert")
        if not (identify and convert):
            LOGGER.warning("未找到 ImageMagick（需要 magick 或 identify + convert）")
        return cls(identify_cmd=(identify or "identify",), convert_cmd=(convert or "convert",))

    def read_dimensions(self, path: Path) -> Optional[ImageDimensions]:
        cmd = [*self.identify_cmd, "-format", "%wx%h\n", str(path)]
        result = self._run(cmd)
        if result is None:
            LOGGER.warning("读取尺寸失败 %s", path.name)
            return None
        dimensions = parse_dimensions(result)
        if dimensions is None:
            LOGGER.warning("无法解析 %s 的尺寸输出: %r", path.name, result)
        return dimensions

    def resize(self, input_path: Path, output_path: Path, width: int, quality: int) -> bool:
        cmd = [
            *self.convert_cmd,
            str(input_path),
            "-resize",
            f"{width}x",
            "-quality",
            str(quality),
            str(output_path),
        ]
        if self._run(cmd) is None:
            LOGGER.warning("缩放 %s 到 %dpx 失败", input_path.name, width)
            return False
        return True

    def copy(self, input_path: Path, output_path: Path) -> bool:
        return copy_verbatim(input_path, output_path)

    def _run(self, cmd: list[str]) -> Optional[str]:
        """执行外部命令，成功返回 stdout，失败返回 None。"""

        LOGGER.debug("执行命令: %s", " ".join(cmd))
        try:
            proc = subprocess.run(cmd, text=True, capture_output=True)
        except OSError as exc:
            LOGGER.warning("无法启动 %s: %s", cmd[0], exc)
            return None
        if proc.returncode != 0:
            LOGGER.warning("%s 退出码 %d: %s", cmd[0], proc.returncode, proc.stderr.strip())
            return None
        return proc.stdout
