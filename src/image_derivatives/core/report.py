"""报告生成工具。"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable, Optional

from image_derivatives.core.models import ItemOutcome

HEADER = ["source_path", "status", "operation", "full_path", "thumb_path", "source_retired", "message"]


def write_csv_report(outcomes: Iterable[ItemOutcome], report_path: Path) -> Path:
    """将逐条处理结果写入 CSV 报告。"""

    report_path.parent.mkdir(parents=True, exist_ok=True)
    with report_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(HEADER)
        for record in outcomes:
            writer.writerow(
                [
                    str(record.source_path),
                    record.status,
                    record.operation,
                    _format_path(record.full_path),
                    _format_path(record.thumb_path),
                    "yes" if record.source_retired else "no",
                    record.message or "",
                ]
            )
    return report_path


def _format_path(value: Optional[Path]) -> str:
    if value is None:
        return ""
    return str(value)
