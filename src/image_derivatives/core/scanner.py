"""源目录扫描与筛选逻辑。"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, Sequence

from image_derivatives.core.config import HIDDEN_MARKER, JobConfig
from image_derivatives.core.models import SourceImage


def output_filename(name: str, marker: str = HIDDEN_MARKER) -> str:
    """去掉最多一个暂存前缀字符，得到输出文件名。

    ``_hero.png`` -> ``hero.png``，静态站点工具默认会忽略下划线开头的文件。
    不做冲突检查：``_a.png`` 与 ``a.png`` 会映射到同一个输出名。
    """

    base = Path(name).name
    if marker and base.startswith(marker):
        return base[len(marker):]
    return base


def is_eligible(name: str, extensions: Sequence[str]) -> bool:
    suffix = Path(name).suffix.lower()
    return suffix in {ext.lower() for ext in extensions}


def _iter_entries(directory: Path) -> Iterator[os.DirEntry]:
    """按文件系统返回的顺序遍历目录项，不做排序。"""

    with os.scandir(directory) as entries:
        for entry in entries:
            yield entry


def collect_source_images(config: JobConfig) -> list[SourceImage]:
    """扫描源目录（不递归），返回扩展名匹配的图片列表。"""

    collected: list[SourceImage] = []
    for entry in _iter_entries(config.source_dir):
        if not entry.is_file():
            continue
        if not is_eligible(entry.name, config.extensions):
            continue
        collected.append(
            SourceImage(
                source_path=config.source_dir / entry.name,
                name=entry.name,
                output_name=output_filename(entry.name, config.hidden_marker),
            )
        )
    return collected
