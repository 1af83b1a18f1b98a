"""ImageMagick 命令的构建与输出解析。"""

from __future__ import annotations

import re
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

# 需要显式指定输入编码的动画格式。
ANIMATED_DECODE_HINTS = {
    ".apng": "apng",
}

IDENTIFY_FORMAT = "%w,%h\n"
_DIMENSIONS_RE = re.compile(r"^\s*(\d+),(\d+)\s*$")


@dataclass(frozen=True, slots=True)
class MagickTools:
    """identify / convert 的命令前缀。"""

    identify: Tuple[str, ...] = ("identify",)
    convert: Tuple[str, ...] = ("convert",)

    @classmethod
    def from_binary(cls, binary: Optional[str]) -> "MagickTools":
        """``magick`` (ImageMagick 7) 以子命令方式提供 identify，convert 直接调用本体。"""

        if not binary:
            return cls()
        return cls(identify=(binary, "identify"), convert=(binary,))


def decode_hint_for(extension: str) -> Optional[str]:
    return ANIMATED_DECODE_HINTS.get(extension.lower())


def build_identify_command(tools: MagickTools, source: Path) -> list[str]:
    """-ping 只读取文件头，不做完整解码。"""

    return [*tools.identify, "-ping", "-format", IDENTIFY_FORMAT, str(source)]


def build_convert_command(
    tools: MagickTools,
    source: Path,
    dest: Path,
    width: int,
    quality: int,
    decode_hint: Optional[str] = None,
) -> list[str]:
    source_arg = f"{decode_hint}:{source}" if decode_hint else str(source)
    return [
        *tools.convert,
        source_arg,
        "-strip",
        "-quality",
        str(quality),
        "-resize",
        str(width),
        str(dest),
    ]


def parse_dimensions(output: str) -> Tuple[int, int]:
    """解析 identify 输出的 ``宽,高``；多帧图片取第一帧。"""

    lines = [line for line in output.splitlines() if line.strip()]
    if not lines:
        raise ValueError("identify 没有输出")
    match = _DIMENSIONS_RE.match(lines[0])
    if not match:
        raise ValueError(f"无法解析 identify 输出: {lines[0]!r}")
    return int(match.group(1)), int(match.group(2))


def format_command(args: Sequence[str]) -> str:
    return shlex.join(args)
