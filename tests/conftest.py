"""共享测试夹具：用 Pillow 模拟 identify / convert。"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pytest
from PIL import Image

from responsive_magick.core.config import ResponsiveConfig
from responsive_magick.processing.invoker import CommandResult
from responsive_magick.processing.session import BuildSession


class FakeMagick:
    """记录所有调用的 ImageMagick 替身。"""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.fail_convert = False
        self.missing = False

    @property
    def identify_calls(self) -> list[list[str]]:
        return [call for call in self.calls if "identify" in call[:2]]

    @property
    def convert_calls(self) -> list[list[str]]:
        return [call for call in self.calls if "identify" not in call[:2]]

    def run(self, args: Sequence[str]) -> CommandResult:
        args = list(args)
        self.calls.append(args)
        if self.missing:
            raise FileNotFoundError(2, "No such file or directory", args[0])
        if "identify" in args[:2]:
            return self._identify(Path(args[-1]))
        return self._convert(args)

    def _identify(self, path: Path) -> CommandResult:
        try:
            with Image.open(path) as img:
                width, height = img.size
        except OSError:
            return CommandResult(returncode=1, stderr=f"identify: no decode delegate for {path}")
        return CommandResult(returncode=0, stdout=f"{width},{height}\n")

    def _convert(self, args: list[str]) -> CommandResult:
        if self.fail_convert:
            return CommandResult(returncode=1, stderr="convert: unable to open image")
        source = args[args.index("-strip") - 1]
        if source.startswith("apng:"):
            source = source.split(":", 1)[1]
        width = int(args[args.index("-resize") + 1])
        dest = Path(args[-1])
        with Image.open(source) as img:
            height = max(1, round(img.height * width / img.width))
            img.convert("RGB").resize((width, height)).save(dest)
        return CommandResult(returncode=0)


def _make_image(path: Path, size: tuple[int, int] = (1000, 500), color: str = "blue") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path)
    return path


@pytest.fixture
def make_image():
    return _make_image


@pytest.fixture
def fake_magick() -> FakeMagick:
    return FakeMagick()


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    root = tmp_path / "site"
    root.mkdir()
    return root


@pytest.fixture
def make_session(site_root: Path, fake_magick: FakeMagick):
    def factory(config: ResponsiveConfig | None = None, **kwargs) -> BuildSession:
        return BuildSession(site_root, config or ResponsiveConfig(), invoker=fake_magick, **kwargs)

    return factory
