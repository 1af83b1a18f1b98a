"""通过 identify 探测源图片尺寸。"""

from __future__ import annotations

import logging
from pathlib import Path

from responsive_magick.core.dimensions import Dimensions
from responsive_magick.core.exceptions import ProbeError
from responsive_magick.core.paths import resolve_under
from responsive_magick.processing.invoker import CommandInvoker
from responsive_magick.processing.magick import (
    MagickTools,
    build_identify_command,
    format_command,
    parse_dimensions,
)

LOGGER = logging.getLogger(__name__)


class MagickProbe:
    """可作为 DimensionCache 探测函数的 identify 包装。"""

    def __init__(
        self,
        site_root: Path,
        invoker: CommandInvoker,
        tools: MagickTools,
        verbose: bool = False,
    ) -> None:
        self.site_root = site_root
        self.invoker = invoker
        self.tools = tools
        self.verbose = verbose

    def __call__(self, path: str) -> Dimensions:
        source = resolve_under(self.site_root, path)
        cmd = build_identify_command(self.tools, source)
        if self.verbose:
            LOGGER.info("%s", format_command(cmd))

        try:
            result = self.invoker.run(cmd)
        except OSError as exc:
            raise ProbeError(path, str(exc)) from exc

        if not result.ok:
            raise ProbeError(path, result.detail())

        try:
            return parse_dimensions(result.stdout)
        except ValueError as exc:
            raise ProbeError(path, str(exc)) from exc
