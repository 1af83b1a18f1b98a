"""报告生成工具。"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from responsive_magick.core.models import AssetOutcome

HEADER = ["source_path", "dest_path", "width", "status"]


def write_csv_report(outcomes: Iterable[AssetOutcome], report_path: Path) -> Path:
    """将派生文件的处理结果写入 CSV 报告。"""

    report_path.parent.mkdir(parents=True, exist_ok=True)
    with report_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(HEADER)
        for record in outcomes:
            writer.writerow([record.source_path, record.dest_path, record.width, record.status])
    return report_path
