"""派生文件生成：按修改时间判断是否需要重新调用 convert。"""

from __future__ import annotations

import logging
from pathlib import Path

from responsive_magick.core.config import ResponsiveConfig
from responsive_magick.core.exceptions import ConversionError
from responsive_magick.processing.invoker import CommandInvoker
from responsive_magick.processing.magick import (
    MagickTools,
    build_convert_command,
    decode_hint_for,
    format_command,
)

LOGGER = logging.getLogger(__name__)

STATUS_BUILT = "built"
STATUS_FRESH = "fresh"


def is_stale(source: Path, dest: Path) -> bool:
    """目标不存在或比源文件旧时需要重建；修改时间相同视为最新。"""

    if not dest.exists():
        return True
    return dest.stat().st_mtime < source.stat().st_mtime


def _temporary_path(dest: Path) -> Path:
    # 保留后缀，convert 根据后缀决定输出格式。
    return dest.with_name(f".{dest.stem}.tmp{dest.suffix}")


class DerivedAssetBuilder:
    """负责单个派生文件的生成与跳过判断。"""

    def __init__(self, invoker: CommandInvoker, tools: MagickTools, config: ResponsiveConfig) -> None:
        self.invoker = invoker
        self.tools = tools
        self.config = config

    def ensure_built(self, source: Path, source_extension: str, dest: Path, width: int) -> str:
        """返回 ``built`` 或 ``fresh``；convert 失败时抛出 ConversionError。"""

        if not is_stale(source, dest):
            LOGGER.debug("目标已是最新，跳过: %s", dest)
            return STATUS_FRESH

        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConversionError(dest, str(exc)) from exc

        tmp_dest = _temporary_path(dest)
        cmd = build_convert_command(
            self.tools,
            source,
            tmp_dest,
            width,
            self.config.quality,
            decode_hint=decode_hint_for(source_extension),
        )
        if self.config.verbose:
            LOGGER.info("%s", format_command(cmd))

        try:
            result = self.invoker.run(cmd)
        except OSError as exc:
            tmp_dest.unlink(missing_ok=True)
            raise ConversionError(dest, str(exc)) from exc

        if not result.ok:
            tmp_dest.unlink(missing_ok=True)
            raise ConversionError(dest, result.detail())
        if not tmp_dest.exists():
            raise ConversionError(dest, "convert 没有生成输出文件")

        try:
            tmp_dest.replace(dest)
        except OSError as exc:
            tmp_dest.unlink(missing_ok=True)
            raise ConversionError(dest, str(exc)) from exc

        LOGGER.debug("生成派生文件: %s (%dw)", dest, width)
        return STATUS_BUILT
