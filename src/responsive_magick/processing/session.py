"""构建会话：持有一次构建内共享的尺寸缓存与静态资源登记，并提供模板过滤器入口。"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Optional

from responsive_magick.core.config import ResponsiveConfig
from responsive_magick.core.dimensions import DimensionCache, Dimensions
from responsive_magick.core.exceptions import ConversionError, InvalidWidthError
from responsive_magick.core.models import AssetOutcome, DerivedAssetPlan, SourceImage
from responsive_magick.core.paths import validate_path
from responsive_magick.core.registry import AssetRegistry, RegistryBridge, StaticAssetRegistry
from responsive_magick.processing.builder import DerivedAssetBuilder
from responsive_magick.processing.classifier import inspect_source
from responsive_magick.processing.invoker import CommandInvoker, SubprocessInvoker
from responsive_magick.processing.magick import MagickTools
from responsive_magick.processing.planner import plan, plan_single, require_image
from responsive_magick.processing.probe import MagickProbe
from responsive_magick.processing.srcset import assemble

STATUS_ERROR = "error"


class BuildSession:
    """一次站点构建的上下文。

    尺寸缓存与登记表只在本会话内有效，不做并发保护，调用方需在单线程中使用。
    """

    def __init__(
        self,
        site_root: Path,
        config: Optional[ResponsiveConfig] = None,
        *,
        invoker: Optional[CommandInvoker] = None,
        registry: Optional[AssetRegistry] = None,
        tools: Optional[MagickTools] = None,
    ) -> None:
        self.site_root = Path(site_root)
        self.config = config or ResponsiveConfig()
        self.invoker = invoker or SubprocessInvoker()
        self.tools = tools or MagickTools.from_binary(self.config.magick)
        self.registry = registry if registry is not None else StaticAssetRegistry()
        self.bridge = RegistryBridge(self.registry, self.config.derived_dir)
        self.dimensions = DimensionCache(
            MagickProbe(self.site_root, self.invoker, self.tools, verbose=self.config.verbose)
        )
        self.builder = DerivedAssetBuilder(self.invoker, self.tools, self.config)
        self.outcomes: list[AssetOutcome] = []

    def srcset(self, path: str) -> str:
        validate_path(path, "srcset")
        source = require_image(inspect_source(path, self.site_root))
        natural_width, _ = self.dimensions.dimensions_of(path)

        plans = plan(source, natural_width, self.config, self.site_root)
        for item in plans:
            self._materialize(item)
        return assemble(path, natural_width, plans)

    def width(self, path: str) -> int:
        return self._dimensions("width", path)[0]

    def height(self, path: str) -> int:
        return self._dimensions("height", path)[1]

    def size(self, path: str, width: int) -> str:
        """生成单一宽度的派生文件，返回其逻辑路径。不探测尺寸，也不阻止放大。"""

        validate_path(path, "size")
        if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
            raise InvalidWidthError("size", width)

        source = require_image(inspect_source(path, self.site_root))
        item = plan_single(source, width, self.config, self.site_root)
        self._materialize(item)
        return item.logical_path

    def filters(self) -> Dict[str, Callable]:
        """供模板引擎注册的过滤器，例如 ``env.filters.update(session.filters())``。"""

        return {
            "srcset": self.srcset,
            "width": self.width,
            "height": self.height,
            "size": self.size,
        }

    def _dimensions(self, operation: str, path: str) -> Dimensions:
        validate_path(path, operation)
        return self.dimensions.dimensions_of(path)

    def _materialize(self, item: DerivedAssetPlan) -> None:
        """按需生成并登记；已登记的目标在本次构建内已成功生成过。

        生成失败时不登记，同一会话内的后续调用会重新尝试。
        """

        if self.bridge.is_registered(item):
            return

        source: SourceImage = item.source
        try:
            status = self.builder.ensure_built(source.full_path, source.extension, item.dest_path, item.width)
        except ConversionError:
            self._record(item, STATUS_ERROR)
            raise
        self.bridge.register_if_absent(item)
        self._record(item, status)

    def _record(self, item: DerivedAssetPlan, status: str) -> None:
        self.outcomes.append(
            AssetOutcome(
                source_path=item.source.logical_path,
                dest_path=item.logical_path,
                width=item.width,
                status=status,
            )
        )
