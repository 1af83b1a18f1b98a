"""核心数据模型定义。"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass(slots=True)
class SourceImage:
    """一次过滤器调用中的源图片信息。"""

    logical_path: str
    full_path: Path
    dirname: str
    stem: str
    extension: str
    exists: bool
    is_image: bool
    mime_type: Optional[str] = None


@dataclass(frozen=True, slots=True)
class DerivedAssetPlan:
    """单个 (源图片, 宽度) 组合的派生文件规划。"""

    source: SourceImage
    width: int
    file_name: str
    logical_path: str
    registry_path: str
    dest_path: Path


@dataclass(frozen=True, slots=True)
class StaticAssetRecord:
    """交给宿主构建系统复制到输出目录的静态资源记录。"""

    base: str
    dir: str
    name: str

    @property
    def path(self) -> str:
        """登记路径，例如 ``_responsive/assets/photo-576w.jpg``。"""

        return posixpath.normpath(f"{self.base}/{self.dir}/{self.name}")


@dataclass(slots=True)
class AssetOutcome:
    """记录单个派生文件的处理结果（用于报告/日志）。"""

    source_path: str
    dest_path: str
    width: int
    status: str


@dataclass(slots=True)
class SrcsetOutcome:
    """批处理中单张源图片的 srcset 结果。"""

    source_path: str
    status: str
    srcset: Optional[str] = None
    message: Optional[str] = None


@dataclass(slots=True)
class BatchResult:
    """批处理阶段性的产出。"""

    succeeded: list[SrcsetOutcome]
    failed: list[SrcsetOutcome]

    def all_outcomes(self) -> list[SrcsetOutcome]:
        """返回所有结果记录，方便生成报告。"""

        return [*self.succeeded, *self.failed]
