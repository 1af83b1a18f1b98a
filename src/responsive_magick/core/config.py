"""响应式图片的配置模型与站点配置加载。"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

import yaml

from responsive_magick.core.exceptions import InvalidConfigurationError

# 默认使用 Bootstrap 5 的断点。
DEFAULT_WIDTHS: Tuple[int, ...] = (576, 768, 992, 1200, 1400)
DEFAULT_QUALITY = 80
DEFAULT_DERIVED_DIR = "_responsive"
CONFIG_SECTION = "responsive"


@dataclass(frozen=True, slots=True)
class ResponsiveConfig:
    """单次构建内只读的响应式图片配置。"""

    widths: Tuple[int, ...] = DEFAULT_WIDTHS
    quality: int = DEFAULT_QUALITY
    format: Optional[str] = None
    verbose: bool = False
    derived_dir: str = DEFAULT_DERIVED_DIR
    magick: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "widths", tuple(self.widths))
        for width in self.widths:
            if not _is_int(width) or width <= 0:
                raise InvalidConfigurationError(f"responsive.widths 必须是正整数列表: {list(self.widths)!r}")
        if not _is_int(self.quality) or not 1 <= self.quality <= 100:
            raise InvalidConfigurationError(f"responsive.quality 必须是 1~100 的整数: {self.quality!r}")
        if not isinstance(self.verbose, bool):
            raise InvalidConfigurationError(f"responsive.verbose 必须是布尔值: {self.verbose!r}")
        if self.format is not None:
            if not isinstance(self.format, str) or not self.format.strip(". "):
                raise InvalidConfigurationError(f"responsive.format 不能为空: {self.format!r}")
            object.__setattr__(self, "format", "." + self.format.strip().lstrip(".").lower())
        if not isinstance(self.derived_dir, str) or not self.derived_dir.strip("/"):
            raise InvalidConfigurationError(f"responsive.derived_dir 不能为空: {self.derived_dir!r}")
        object.__setattr__(self, "derived_dir", self.derived_dir.strip("/"))
        if self.magick is not None and (not isinstance(self.magick, str) or not self.magick.strip()):
            raise InvalidConfigurationError(f"responsive.magick 必须是可执行文件名: {self.magick!r}")

    @classmethod
    def from_site_config(cls, site_config: Optional[Mapping[str, Any]]) -> "ResponsiveConfig":
        """从站点配置的 ``responsive`` 小节解析配置，缺失项使用默认值。"""

        section = (site_config or {}).get(CONFIG_SECTION) or {}
        if not isinstance(section, Mapping):
            raise InvalidConfigurationError(f"{CONFIG_SECTION} 小节必须是映射: {section!r}")

        widths = section.get("widths")
        if widths is None:
            widths = DEFAULT_WIDTHS
        elif isinstance(widths, (str, bytes)) or not isinstance(widths, (list, tuple)):
            raise InvalidConfigurationError(f"responsive.widths 必须是列表: {widths!r}")

        quality = section.get("quality")
        verbose = section.get("verbose")
        return cls(
            widths=tuple(widths),
            quality=DEFAULT_QUALITY if quality is None else quality,
            format=section.get("format") or None,
            verbose=False if verbose is None else verbose,
            derived_dir=section.get("derived_dir") or DEFAULT_DERIVED_DIR,
            magick=section.get("magick"),
        )

    def output_extension(self, source_extension: str) -> str:
        """输出扩展名：配置覆盖优先，否则沿用源扩展名。"""

        return self.format or source_extension


def load_site_config(path: Path) -> dict[str, Any]:
    """读取 Jekyll 风格的 YAML 站点配置。"""

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise InvalidConfigurationError(f"无法读取站点配置: {path}") from exc
    except yaml.YAMLError as exc:
        raise InvalidConfigurationError(f"站点配置不是合法的 YAML: {path}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfigurationError(f"站点配置顶层必须是映射: {path}")
    return data


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
