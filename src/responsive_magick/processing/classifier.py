"""源图片的存在性与类型识别。"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from responsive_magick.core.models import SourceImage
from responsive_magick.core.paths import resolve_under, split_logical_path

LOGGER = logging.getLogger(__name__)


def detect_mime_type(path: Path) -> Optional[str]:
    """只读取文件头识别图片格式，返回 MIME 类型；无法识别时返回 None。"""

    try:
        with Image.open(path) as img:
            image_format = img.format
    except (UnidentifiedImageError, OSError) as exc:
        LOGGER.debug("无法识别图像文件 %s: %s", path, exc)
        return None

    if not image_format:
        return None
    return Image.MIME.get(image_format.upper(), f"image/{image_format.lower()}")


def inspect_source(path: str, site_root: Path) -> SourceImage:
    """构造 SourceImage；不存在或无法识别时只记录标志，不抛异常。"""

    dirname, stem, extension = split_logical_path(path)
    full_path = resolve_under(site_root, path)
    exists = full_path.is_file()
    mime_type = detect_mime_type(full_path) if exists else None

    return SourceImage(
        logical_path=path,
        full_path=full_path,
        dirname=dirname,
        stem=stem,
        extension=extension,
        exists=exists,
        is_image=mime_type is not None,
        mime_type=mime_type,
    )
