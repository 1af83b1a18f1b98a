"""站点逻辑路径的校验与拆分。

逻辑路径以 ``/`` 开头、相对于站点根目录，例如 ``/assets/photo.jpg``；
它们不一定是文件系统上的绝对路径。
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Tuple

from responsive_magick.core.exceptions import InvalidPathError


def validate_path(path: object, operation: str) -> str:
    """校验逻辑路径，不合法时抛出 InvalidPathError。无副作用。

    含 ``..`` 片段的路径会逃出站点根目录，同样视为不合法。
    """

    if not isinstance(path, str) or not path or not path.startswith("/"):
        raise InvalidPathError(operation, path)
    if ".." in path.split("/"):
        raise InvalidPathError(operation, path)
    return path


def split_logical_path(path: str) -> Tuple[str, str, str]:
    """拆分为 (dirname, 不含扩展名的 basename, 扩展名)。"""

    dirname, filename = posixpath.split(path)
    stem, extension = posixpath.splitext(filename)
    return dirname or "/", stem, extension


def join_logical(dirname: str, filename: str) -> str:
    """拼接逻辑目录与文件名，根目录下不会产生 ``//``。"""

    return posixpath.join(dirname, filename)


def resolve_under(root: Path, logical_path: str) -> Path:
    """把逻辑路径映射到 root 下的文件系统路径。"""

    return root.joinpath(*[part for part in logical_path.split("/") if part])
