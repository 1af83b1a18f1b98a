"""项目内使用的自定义异常定义。"""

from __future__ import annotations

from pathlib import Path
from typing import Union

PathLike = Union[str, Path]


class ResponsiveError(Exception):
    """基础异常类型。"""


class InvalidConfigurationError(ResponsiveError):
    """配置不合法时抛出。"""


class InvalidPathError(ResponsiveError):
    """输入路径不是以 / 开头的站点绝对路径。"""

    def __init__(self, operation: str, path: object) -> None:
        self.operation = operation
        self.path = path
        super().__init__(f"{operation}: input must be absolute path, got {path!r}")


class InvalidWidthError(ResponsiveError):
    """目标宽度不是正整数。"""

    def __init__(self, operation: str, width: object) -> None:
        self.operation = operation
        self.width = width
        super().__init__(f"{operation}: width must be a positive integer, got {width!r}")


class SourceMissingError(ResponsiveError):
    """源文件不存在。"""

    def __init__(self, path: PathLike) -> None:
        self.path = path
        super().__init__(f"源文件不存在: {path}")


class NotAnImageError(ResponsiveError):
    """源文件无法识别为图片。"""

    def __init__(self, path: PathLike) -> None:
        self.path = path
        super().__init__(f"无法识别为图片: {path}")


class ProbeError(ResponsiveError):
    """identify 执行失败或输出无法解析。"""

    def __init__(self, path: PathLike, detail: str = "") -> None:
        self.path = path
        message = f"width/height: failed to execute 'identify' on {path}, is ImageMagick installed?"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ConversionError(ResponsiveError):
    """convert 执行失败。"""

    def __init__(self, destination: PathLike, detail: str = "") -> None:
        self.destination = destination
        message = f"srcset: failed to execute 'convert' for {destination}, is ImageMagick installed?"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class DuplicateAssetError(ResponsiveError):
    """同一目标路径被重复登记到静态资源列表。"""
