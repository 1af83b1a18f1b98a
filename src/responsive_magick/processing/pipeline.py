"""批量流水线：依次为多张源图片生成 srcset 并汇总结果。"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from responsive_magick.core.exceptions import ResponsiveError
from responsive_magick.core.models import BatchResult, SrcsetOutcome
from responsive_magick.core.progress import ProgressUpdate
from responsive_magick.processing.session import BuildSession

LOGGER = logging.getLogger(__name__)


ProgressCallback = Optional[Callable[[ProgressUpdate], None]]


def render_srcsets(
    session: BuildSession,
    paths: Sequence[str],
    progress_callback: ProgressCallback = None,
) -> BatchResult:
    """逐个调用 ``session.srcset``；单张图片失败只记录，不中断整个批次。"""

    total = len(paths)
    LOGGER.info("共 %d 张源图片待处理", total)

    succeeded: list[SrcsetOutcome] = []
    failed: list[SrcsetOutcome] = []

    if total == 0:
        _emit_progress(progress_callback, completed=0, total=0, message="没有需要处理的图片")
        return BatchResult(succeeded=succeeded, failed=failed)

    _emit_progress(progress_callback, 0, total, "开始生成 srcset")

    for completed, path in enumerate(paths, start=1):
        try:
            value = session.srcset(path)
        except ResponsiveError as exc:
            LOGGER.error("处理失败: %s -> %s", path, exc)
            failed.append(SrcsetOutcome(source_path=path, status="error", message=str(exc)))
            _emit_progress(progress_callback, completed, total, f"失败 {path}")
            continue

        succeeded.append(SrcsetOutcome(source_path=path, status="ok", srcset=value))
        _emit_progress(progress_callback, completed, total, f"完成 {path}")

    _emit_progress(progress_callback, total, total, "处理完成", status="done")
    return BatchResult(succeeded=succeeded, failed=failed)


def _emit_progress(
    callback: ProgressCallback,
    completed: int,
    total: int,
    message: Optional[str] = None,
    status: str = "running",
) -> None:
    if not callback:
        return
    callback(ProgressUpdate(total=total, completed=completed, message=message, status=status))
