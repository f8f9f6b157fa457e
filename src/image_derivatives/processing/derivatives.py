"""全尺寸图与缩略图的生成策略。"""

from __future__ import annotations

import logging

from image_derivatives.core.models import (
    OPERATION_COPY,
    OPERATION_RESIZE,
    DerivativeTarget,
    ImageDimensions,
    SourceImage,
)
from image_derivatives.processing.toolkit import Toolkit

LOGGER = logging.getLogger(__name__)


def choose_operation(dimensions: ImageDimensions, full_width: int) -> str:
    """宽度超过上限时缩放，否则原样复制。"""

    if dimensions.width > full_width:
        return OPERATION_RESIZE
    return OPERATION_COPY


def produce_full(
    toolkit: Toolkit,
    source: SourceImage,
    target: DerivativeTarget,
    dimensions: ImageDimensions,
    quality: int,
) -> tuple[bool, str]:
    """生成全尺寸衍生图，返回 (是否成功, 采用的操作)。"""

    operation = choose_operation(dimensions, target.width)
    if operation == OPERATION_RESIZE:
        LOGGER.info("  源图宽度大于 %dpx，执行缩放", target.width)
        ok = toolkit.resize(source.source_path, target.destination, target.width, quality)
        if ok:
            LOGGER.info("  已缩放到 %dpx：%s", target.width, target.destination)
    else:
        LOGGER.info("  源图宽度不超过 %dpx，原样复制", target.width)
        ok = toolkit.copy(source.source_path, target.destination)
        if ok:
            LOGGER.info("  已复制到：%s", target.destination)
    return ok, operation


def produce_thumbnail(
    toolkit: Toolkit,
    full: DerivativeTarget,
    thumb: DerivativeTarget,
    quality: int,
) -> bool:
    """从全尺寸衍生图（而不是原图）缩放出缩略图。"""

    LOGGER.info("  生成缩略图（%dpx）", thumb.width)
    ok = toolkit.resize(full.destination, thumb.destination, thumb.width, quality)
    if ok:
        LOGGER.info("  缩略图已生成：%s", thumb.destination)
    return ok
