"""srcset 字符串拼装。"""

from __future__ import annotations

from typing import Iterable

from responsive_magick.core.models import DerivedAssetPlan

SEPARATOR = ", "


def format_entry(path: str, width: int) -> str:
    return f"{path} {width}w"


def assemble(source_path: str, natural_width: int, plans: Iterable[DerivedAssetPlan]) -> str:
    """原图条目总在最前，其后按规划顺序追加派生文件。"""

    entries = [format_entry(source_path, natural_width)]
    entries.extend(format_entry(item.logical_path, item.width) for item in plans)
    return SEPARATOR.join(entries)
