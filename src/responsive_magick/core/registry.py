"""宿主静态资源列表与登记桥接。"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Protocol

from responsive_magick.core.exceptions import DuplicateAssetError
from responsive_magick.core.models import DerivedAssetPlan, StaticAssetRecord

LOGGER = logging.getLogger(__name__)


class AssetRegistry(Protocol):
    """宿主构建系统需要提供的最小接口。"""

    def __contains__(self, path: object) -> bool: ...

    def append(self, record: StaticAssetRecord) -> None: ...


class StaticAssetRegistry:
    """有序的静态资源记录列表，按登记路径建立索引。"""

    def __init__(self) -> None:
        self._records: List[StaticAssetRecord] = []
        self._index: Dict[str, StaticAssetRecord] = {}

    def append(self, record: StaticAssetRecord) -> None:
        if record.path in self._index:
            raise DuplicateAssetError(f"静态资源已登记: {record.path}")
        self._records.append(record)
        self._index[record.path] = record

    def find(self, path: str) -> Optional[StaticAssetRecord]:
        return self._index.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._index

    def __iter__(self) -> Iterator[StaticAssetRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)


class RegistryBridge:
    """把派生文件登记到宿主列表，同一路径只登记一次。"""

    def __init__(self, registry: AssetRegistry, derived_dir: str) -> None:
        self.registry = registry
        self.derived_dir = derived_dir

    def is_registered(self, plan: DerivedAssetPlan) -> bool:
        return plan.registry_path in self.registry

    def register_if_absent(self, plan: DerivedAssetPlan) -> bool:
        """返回目标是否已登记；未登记时追加记录。"""

        if plan.registry_path in self.registry:
            LOGGER.debug("已登记，跳过: %s", plan.registry_path)
            return True

        record = StaticAssetRecord(base=self.derived_dir, dir=plan.source.dirname, name=plan.file_name)
        self.registry.append(record)
        LOGGER.debug("登记静态资源: %s", record.path)
        return False
