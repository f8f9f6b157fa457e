"""图像工具能力接口：读取尺寸、按宽度缩放、原样复制。

像素级工作全部交给外部实现（ImageMagick 或 Pillow），这里只约定调用方式：
所有失败都在调用点转换成 ``None`` / ``False``，不向上抛异常。
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Optional, Protocol

from image_derivatives.core.exceptions import InvalidConfigurationError
from image_derivatives.core.models import ImageDimensions

LOGGER = logging.getLogger(__name__)


class Toolkit(Protocol):
    """流水线依赖的最小图像能力集合。"""

    name: str

    def read_dimensions(self, path: Path) -> Optional[ImageDimensions]:
        ...

    def resize(self, input_path: Path, output_path: Path, width: int, quality: int) -> bool:
        ...

    def copy(self, input_path: Path, output_path: Path) -> bool:
        ...


def copy_verbatim(input_path: Path, output_path: Path) -> bool:
    """逐字节复制，避免对已经足够小的图片做有损重编码。"""

    try:
        shutil.copyfile(input_path, output_path)
    except OSError as exc:
        LOGGER.warning("复制失败 %s: %s", input_path.name, exc)
        return False
    return True


def make_toolkit(backend: str) -> Toolkit:
    """根据名称创建工具实现。"""

    if backend == "magick":
        from image_derivatives.processing.magick import MagickToolkit

        return MagickToolkit.detect()
    if backend == "pillow":
        from image_derivatives.processing.pillow_backend import PillowToolkit

        return PillowToolkit()
    raise InvalidConfigurationError(f"未知的图像后端: {backend}")
