"""派生文件规划：决定需要哪些宽度以及它们的目标路径。"""

from __future__ import annotations

import logging
from pathlib import Path

from responsive_magick.core.config import ResponsiveConfig
from responsive_magick.core.exceptions import NotAnImageError, SourceMissingError
from responsive_magick.core.models import DerivedAssetPlan, SourceImage, StaticAssetRecord
from responsive_magick.core.paths import join_logical, resolve_under

LOGGER = logging.getLogger(__name__)


def require_image(source: SourceImage) -> SourceImage:
    """源文件必须存在且能识别为图片。"""

    if not source.exists:
        raise SourceMissingError(source.logical_path)
    if not source.is_image:
        raise NotAnImageError(source.logical_path)
    return source


def derived_file_name(source: SourceImage, width: int, config: ResponsiveConfig) -> str:
    return f"{source.stem}-{width}w{config.output_extension(source.extension)}"


def plan_single(
    source: SourceImage,
    width: int,
    config: ResponsiveConfig,
    site_root: Path,
) -> DerivedAssetPlan:
    """计算单个宽度的目标路径，派生目录镜像源图片所在目录。"""

    file_name = derived_file_name(source, width, config)
    logical_path = join_logical(source.dirname, file_name)
    record = StaticAssetRecord(base=config.derived_dir, dir=source.dirname, name=file_name)
    return DerivedAssetPlan(
        source=source,
        width=width,
        file_name=file_name,
        logical_path=logical_path,
        registry_path=record.path,
        dest_path=resolve_under(site_root / config.derived_dir, logical_path),
    )


def plan(
    source: SourceImage,
    natural_width: int,
    config: ResponsiveConfig,
    site_root: Path,
) -> list[DerivedAssetPlan]:
    """按配置顺序生成规划，宽度不小于原图宽度的条目直接省略（不放大）。"""

    require_image(source)

    plans: list[DerivedAssetPlan] = []
    for width in config.widths:
        if width >= natural_width:
            LOGGER.debug("跳过宽度 %d（原图宽度 %d）: %s", width, natural_width, source.logical_path)
            continue
        plans.append(plan_single(source, width, config, site_root))
    return plans
