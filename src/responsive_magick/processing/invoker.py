"""外部命令调用的抽象，便于在测试中替换为假实现。"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol, Sequence

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CommandResult:
    """外部命令的退出码与输出。"""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def detail(self) -> str:
        """失败时用于错误信息的简短描述。"""

        return self.stderr.strip() or self.stdout.strip() or f"exit code {self.returncode}"


class CommandInvoker(Protocol):
    """以参数列表执行外部命令；可执行文件不存在时抛出 OSError。"""

    def run(self, args: Sequence[str]) -> CommandResult: ...


class SubprocessInvoker:
    """基于 subprocess 的同步实现，不经过 shell。"""

    def run(self, args: Sequence[str]) -> CommandResult:
        LOGGER.debug("subprocess: %s", list(args))
        proc = subprocess.run(list(args), capture_output=True, text=True, check=False)
        return CommandResult(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)
