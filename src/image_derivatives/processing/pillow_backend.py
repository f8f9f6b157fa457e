"""基于 Pillow 的进程内图像工具实现，无需安装 ImageMagick。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from image_derivatives.core.models import ImageDimensions
from image_derivatives.processing.toolkit import copy_verbatim

LOGGER = logging.getLogger(__name__)

_RESAMPLING = getattr(Image, "Resampling", Image)
_PALETTE = getattr(Image, "Palette", Image)

# 这些格式接受 quality 参数。
_LOSSY_FORMATS = {"JPEG", "WEBP"}
_RGB_ONLY_FORMATS = {"JPEG", "BMP"}


class PillowToolkit:
    """使用 Pillow 读取尺寸并按宽度缩放。"""

    name = "pillow"

    def read_dimensions(self, path: Path) -> Optional[ImageDimensions]:
        try:
            with Image.open(path) as img:
                width, height = img.size
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            LOGGER.warning("读取尺寸失败 %s: %s", path.name, exc)
            return None
        if width <= 0 or height <= 0:
            return None
        return ImageDimensions(width=width, height=height)

    def resize(self, input_path: Path, output_path: Path, width: int, quality: int) -> bool:
        """按目标宽度等比缩放（宽度小于目标时同样放大），结果写入 output_path。"""

        image_format = Image.registered_extensions().get(output_path.suffix.lower())
        if image_format is None:
            LOGGER.warning("不支持的输出格式: %s", output_path.suffix)
            return False

        try:
            with Image.open(input_path) as img:
                img.load()
                height = max(1, round(img.height * width / img.width))
                resized = img.resize((width, height), _RESAMPLING.LANCZOS)
            try:
                _save(resized, output_path, image_format, quality)
            finally:
                resized.close()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            LOGGER.warning("缩放 %s 到 %dpx 失败: %s", input_path.name, width, exc)
            return False
        return True

    def copy(self, input_path: Path, output_path: Path) -> bool:
        return copy_verbatim(input_path, output_path)


def _save(image: Image.Image, destination: Path, image_format: str, quality: int) -> None:
    save_params: dict = {}
    image_to_save = image
    if image_format in _LOSSY_FORMATS:
        save_params["quality"] = quality
    if image_format in _RGB_ONLY_FORMATS and image.mode not in {"RGB", "L"}:
        image_to_save = image.convert("RGB")
    elif image_format == "GIF" and image.mode not in {"P", "L"}:
        image_to_save = image.convert("P", palette=_PALETTE.ADAPTIVE)
    elif image.mode == "P" and image_format not in {"GIF", "PNG", "TIFF", "BMP"}:
        image_to_save = image.convert("RGBA")

    image_to_save.save(destination, format=image_format, **save_params)
    if image_to_save is not image:
        image_to_save.close()
