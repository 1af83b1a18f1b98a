"""源图片尺寸缓存：每个逻辑路径在一次构建内只探测一次。"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Tuple

LOGGER = logging.getLogger(__name__)

Dimensions = Tuple[int, int]
DimensionProbe = Callable[[str], Dimensions]


class DimensionCache:
    """逻辑路径 -> (宽, 高) 的映射，缺失时调用探测函数填充。

    探测函数失败时应抛出 ProbeError；此时不写入缓存，下次调用会重新探测。
    源文件在构建过程中被修改也不会触发重新探测。
    """

    def __init__(self, probe: DimensionProbe) -> None:
        self._probe = probe
        self._entries: Dict[str, Dimensions] = {}
        self.probe_count = 0

    def dimensions_of(self, path: str) -> Dimensions:
        cached = self._entries.get(path)
        if cached is not None:
            LOGGER.debug("尺寸缓存命中: %s -> %sx%s", path, *cached)
            return cached

        self.probe_count += 1
        width, height = self._probe(path)
        self._entries[path] = (width, height)
        LOGGER.debug("探测尺寸: %s -> %sx%s", path, width, height)
        return width, height

    def __contains__(self, path: object) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)
