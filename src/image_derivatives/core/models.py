"""核心数据模型定义。"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

ROLE_FULL = "full"
ROLE_THUMB = "thumb"

OPERATION_RESIZE = "resize"
OPERATION_COPY = "copy"
OPERATION_UNKNOWN = "unknown"


@dataclass(slots=True)
class SourceImage:
    """扫描阶段得到的源图片信息。"""

    source_path: Path
    name: str
    output_name: str


@dataclass(slots=True, frozen=True)
class ImageDimensions:
    """外部工具读出的图片尺寸。"""

    width: int
    height: int

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(slots=True, frozen=True)
class DerivativeTarget:
    """一个衍生图（全尺寸或缩略图）的输出目标。"""

    role: str  # full | thumb
    width: int
    destination: Path


@dataclass(slots=True)
class ItemOutcome:
    """记录单个文件的处理结果（用于汇总/报告）。

    ``succeeded`` 只反映两张衍生图是否写出；``source_retired`` 单独记录源文件是否删除。
    """

    source_path: Path
    succeeded: bool
    status: str
    operation: str = OPERATION_UNKNOWN
    source_retired: bool = False
    full_path: Optional[Path] = None
    thumb_path: Optional[Path] = None
    message: Optional[str] = None


@dataclass(slots=True, frozen=True)
class BatchSummary:
    """批处理结束时的计数。"""

    processed: int = 0
    succeeded: int = 0
    failed: int = 0

    def add(self, outcome: ItemOutcome) -> "BatchSummary":
        if outcome.succeeded:
            return BatchSummary(self.processed + 1, self.succeeded + 1, self.failed)
        return BatchSummary(self.processed + 1, self.succeeded, self.failed + 1)


@dataclass(slots=True)
class BatchResult:
    """批处理的全部产出。"""

    succeeded: list[ItemOutcome] = field(default_factory=list)
    failed: list[ItemOutcome] = field(default_factory=list)
    outcomes: list[ItemOutcome] = field(default_factory=list)  # 按完成顺序

    def record(self, outcome: ItemOutcome) -> None:
        self.outcomes.append(outcome)
        if outcome.succeeded:
            self.succeeded.append(outcome)
        else:
            self.failed.append(outcome)

    def all_outcomes(self) -> list[ItemOutcome]:
        """按处理完成的顺序返回所有结果记录，方便生成报告。"""

        return list(self.outcomes)

    def summary(self) -> BatchSummary:
        summary = BatchSummary()
        for outcome in self.all_outcomes():
            summary = summary.add(outcome)
        return summary

    @property
    def resized(self) -> int:
        return sum(1 for item in self.succeeded if item.operation == OPERATION_RESIZE)

    @property
    def copied(self) -> int:
        return sum(1 for item in self.succeeded if item.operation == OPERATION_COPY)
