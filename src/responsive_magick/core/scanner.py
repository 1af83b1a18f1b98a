"""站点目录扫描：找出可生成 srcset 的源图片。"""

from __future__ import annotations

from fnmatch import fnmatch
from pathlib import Path
from typing import Iterator, Sequence

DEFAULT_INCLUDE_PATTERNS = ("*.jpg", "*.jpeg", "*.png", "*.gif")


def _iter_site_files(root: Path) -> Iterator[Path]:
    """遍历站点文件，跳过以 ``_`` 或 ``.`` 开头的目录（_site、_responsive 等）。"""

    for candidate in sorted(root.iterdir()):
        if candidate.name.startswith(("_", ".")):
            continue
        if candidate.is_dir():
            yield from _iter_site_files(candidate)
        elif candidate.is_file():
            yield candidate


def _matches_any(name: str, patterns: Sequence[str]) -> bool:
    lowered = name.lower()
    return any(fnmatch(lowered, pattern.lower()) for pattern in patterns)


def collect_source_paths(
    site_root: Path,
    include_patterns: Sequence[str] = DEFAULT_INCLUDE_PATTERNS,
    exclude_patterns: Sequence[str] = (),
) -> list[str]:
    """返回站点内匹配的图片逻辑路径（以 / 开头），按路径排序。"""

    root = site_root.resolve()
    if not root.is_dir():
        return []

    collected: list[str] = []
    for candidate in _iter_site_files(root):
        name = candidate.name
        if not _matches_any(name, include_patterns):
            continue
        if exclude_patterns and _matches_any(name, exclude_patterns):
            continue
        collected.append("/" + candidate.relative_to(root).as_posix())

    collected.sort(key=str.lower)
    return collected
