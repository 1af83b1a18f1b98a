"""过滤器入口（srcset / width / height / size）的端到端测试。"""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from PIL import Image

from responsive_magick.core.config import ResponsiveConfig
from responsive_magick.core.exceptions import (
    ConversionError,
    InvalidPathError,
    InvalidWidthError,
    NotAnImageError,
    SourceMissingError,
)


def test_srcset_for_width_1000_source(site_root: Path, make_session, make_image, fake_magick) -> None:
    make_image(site_root / "img.jpg", (1000, 600))
    session = make_session()

    result = session.srcset("/img.jpg")

    assert result == "/img.jpg 1000w, /img-576w.jpg 576w, /img-768w.jpg 768w, /img-992w.jpg 992w"
    assert len(fake_magick.identify_calls) == 1
    assert len(fake_magick.convert_calls) == 3
    for width in (576, 768, 992):
        derived = site_root / "_responsive" / f"img-{width}w.jpg"
        assert derived.exists()
        with Image.open(derived) as img:
            assert img.width == width
    assert not (site_root / "_responsive" / "img-1200w.jpg").exists()
    assert [record.path for record in session.registry] == [
        "_responsive/img-576w.jpg",
        "_responsive/img-768w.jpg",
        "_responsive/img-992w.jpg",
    ]


def test_srcset_in_subdirectory(site_root: Path, make_session, make_image) -> None:
    make_image(site_root / "assets" / "photos" / "cat.png", (800, 800))
    session = make_session()

    result = session.srcset("/assets/photos/cat.png")

    assert result == "/assets/photos/cat.png 800w, /assets/photos/cat-576w.png 576w, /assets/photos/cat-768w.png 768w"
    assert (site_root / "_responsive" / "assets" / "photos" / "cat-768w.png").exists()
    assert "_responsive/assets/photos/cat-576w.png" in session.registry


def test_srcset_begins_with_source_entry_exactly_once(site_root: Path, make_session, make_image) -> None:
    make_image(site_root / "small.jpg", (300, 200))
    session = make_session()

    result = session.srcset("/small.jpg")

    assert result == "/small.jpg 300w"
    assert result.count("/small.jpg 300w") == 1
    assert len(session.registry) == 0


def test_srcset_does_not_upscale_equal_width(site_root: Path, make_session, make_image) -> None:
    make_image(site_root / "img.jpg", (768, 400))

    result = make_session().srcset("/img.jpg")

    assert result == "/img.jpg 768w, /img-576w.jpg 576w"


def test_srcset_keeps_configured_order(site_root: Path, make_session, make_image) -> None:
    make_image(site_root / "img.jpg", (1000, 400))
    session = make_session(ResponsiveConfig(widths=(900, 2000, 300)))

    assert session.srcset("/img.jpg") == "/img.jpg 1000w, /img-900w.jpg 900w, /img-300w.jpg 300w"


def test_srcset_twice_registers_and_builds_once(site_root: Path, make_session, make_image, fake_magick) -> None:
    make_image(site_root / "img.jpg", (1000, 600))
    session = make_session()

    first = session.srcset("/img.jpg")
    second = session.srcset("/img.jpg")

    assert first == second
    assert len(session.registry) == 3
    assert len(fake_magick.convert_calls) == 3
    assert len(fake_magick.identify_calls) == 1
    assert [outcome.status for outcome in session.outcomes] == ["built", "built", "built"]


def test_next_build_skips_fresh_derivatives(site_root: Path, make_session, make_image, fake_magick) -> None:
    make_image(site_root / "img.jpg", (1000, 600))
    make_session().srcset("/img.jpg")
    assert len(fake_magick.convert_calls) == 3

    second_build = make_session()
    result = second_build.srcset("/img.jpg")

    assert result.startswith("/img.jpg 1000w, ")
    assert len(fake_magick.convert_calls) == 3
    assert len(second_build.registry) == 3
    assert {outcome.status for outcome in second_build.outcomes} == {"fresh"}


def test_modified_source_triggers_rebuild_in_next_build(site_root: Path, make_session, make_image, fake_magick) -> None:
    source = make_image(site_root / "img.jpg", (1000, 600))
    make_session().srcset("/img.jpg")

    newer = max(p.stat().st_mtime for p in (site_root / "_responsive").iterdir()) + 60
    os.utime(source, (newer, newer))
    make_session().srcset("/img.jpg")

    assert len(fake_magick.convert_calls) == 6


def test_width_and_height_probe_once(site_root: Path, make_session, make_image, fake_magick) -> None:
    make_image(site_root / "img.jpg", (640, 480))
    session = make_session()

    assert session.width("/img.jpg") == 640
    assert session.height("/img.jpg") == 480
    assert session.width("/img.jpg") == 640
    assert session.height("/img.jpg") == 480
    assert len(fake_magick.identify_calls) == 1

    session.srcset("/img.jpg")
    assert len(fake_magick.identify_calls) == 1


def test_cache_keeps_first_probe_within_build(site_root: Path, make_session, make_image) -> None:
    source = make_image(site_root / "img.jpg", (640, 480))
    session = make_session()
    assert session.width("/img.jpg") == 640

    make_image(source, (100, 100))

    assert session.width("/img.jpg") == 640
    assert make_session().width("/img.jpg") == 100


@pytest.mark.parametrize("value", ["img.jpg", "", None, "assets/img.jpg"])
def test_invalid_paths_fail_before_io(make_session, fake_magick, value) -> None:
    session = make_session()

    with pytest.raises(InvalidPathError) as excinfo:
        session.srcset(value)
    assert excinfo.value.operation == "srcset"
    with pytest.raises(InvalidPathError) as excinfo:
        session.width(value)
    assert excinfo.value.operation == "width"
    with pytest.raises(InvalidPathError) as excinfo:
        session.height(value)
    assert excinfo.value.operation == "height"
    with pytest.raises(InvalidPathError) as excinfo:
        session.size(value, 400)
    assert excinfo.value.operation == "size"

    assert fake_magick.calls == []
    assert len(session.registry) == 0


def test_size_builds_single_width(site_root: Path, make_session, make_image, fake_magick) -> None:
    make_image(site_root / "assets" / "img.jpg", (1000, 500))
    session = make_session()

    result = session.size("/assets/img.jpg", 400)

    assert result == "/assets/img-400w.jpg"
    assert len(session.registry) == 1
    assert len(fake_magick.convert_calls) == 1
    assert fake_magick.identify_calls == []
    assert (site_root / "_responsive" / "assets" / "img-400w.jpg").exists()

    assert session.size("/assets/img.jpg", 400) == "/assets/img-400w.jpg"
    assert len(session.registry) == 1
    assert len(fake_magick.convert_calls) == 1


def test_size_shares_registry_with_srcset(site_root: Path, make_session, make_image, fake_magick) -> None:
    make_image(site_root / "img.jpg", (1000, 500))
    session = make_session()

    session.srcset("/img.jpg")
    assert session.size("/img.jpg", 576) == "/img-576w.jpg"

    assert len(session.registry) == 3
    assert len(fake_magick.convert_calls) == 3


@pytest.mark.parametrize("width", [0, -10, "400", True, 12.5])
def test_size_rejects_invalid_width(site_root: Path, make_session, make_image, fake_magick, width) -> None:
    make_image(site_root / "img.jpg")

    with pytest.raises(InvalidWidthError):
        make_session().size("/img.jpg", width)
    assert fake_magick.calls == []


def test_format_override(site_root: Path, make_session, make_image) -> None:
    make_image(site_root / "img.jpg", (1000, 500))
    session = make_session(ResponsiveConfig(widths=(500,), format="png"))

    assert session.srcset("/img.jpg") == "/img.jpg 1000w, /img-500w.png 500w"
    assert session.size("/img.jpg", 200) == "/img-200w.png"
    with Image.open(site_root / "_responsive" / "img-500w.png") as img:
        assert img.format == "PNG"


def test_non_image_fails_without_side_effects(site_root: Path, make_session, fake_magick) -> None:
    (site_root / "fake.jpg").write_text("definitely not a jpeg")
    session = make_session()

    with pytest.raises(NotAnImageError):
        session.srcset("/fake.jpg")
    with pytest.raises(NotAnImageError):
        session.size("/fake.jpg", 400)

    assert len(session.registry) == 0
    assert fake_magick.convert_calls == []


def test_missing_source(make_session, fake_magick) -> None:
    session = make_session()

    with pytest.raises(SourceMissingError):
        session.srcset("/missing.jpg")
    with pytest.raises(SourceMissingError):
        session.size("/missing.jpg", 400)
    assert fake_magick.calls == []


def test_conversion_failure_aborts_srcset(site_root: Path, make_session, make_image, fake_magick) -> None:
    make_image(site_root / "img.jpg", (1000, 500))
    fake_magick.fail_convert = True
    session = make_session()

    with pytest.raises(ConversionError):
        session.srcset("/img.jpg")

    assert len(fake_magick.convert_calls) == 1
    assert [outcome.status for outcome in session.outcomes] == ["error"]


def test_filters_mapping(site_root: Path, make_session, make_image) -> None:
    make_image(site_root / "img.jpg", (640, 480))
    filters = make_session().filters()

    assert set(filters) == {"srcset", "width", "height", "size"}
    assert filters["width"]("/img.jpg") == 640
    assert filters["height"]("/img.jpg") == 480


def test_failed_conversion_is_retried_in_same_build(site_root: Path, make_session, make_image, fake_magick) -> None:
    make_image(site_root / "img.jpg", (1000, 500))
    session = make_session()

    fake_magick.fail_convert = True
    with pytest.raises(ConversionError):
        session.srcset("/img.jpg")
    assert len(session.registry) == 0

    fake_magick.fail_convert = False
    result = session.srcset("/img.jpg")

    assert result == "/img.jpg 1000w, /img-576w.jpg 576w, /img-768w.jpg 768w, /img-992w.jpg 992w"
    for record in session.registry:
        assert (site_root / record.path).exists()
    assert len(session.registry) == 3
    assert len(fake_magick.convert_calls) == 4


def test_failed_size_leaves_no_record(site_root: Path, make_session, make_image, fake_magick) -> None:
    make_image(site_root / "img.jpg", (1000, 500))
    session = make_session()

    fake_magick.fail_convert = True
    with pytest.raises(ConversionError):
        session.size("/img.jpg", 400)
    assert "_responsive/img-400w.jpg" not in session.registry

    fake_magick.fail_convert = False
    assert session.size("/img.jpg", 400) == "/img-400w.jpg"
    assert (site_root / "_responsive" / "img-400w.jpg").exists()
    assert len(session.registry) == 1


@pytest.mark.parametrize("value", ["/../img.jpg", "/assets/../../img.jpg", "/.."])
def test_parent_segments_are_rejected(make_session, fake_magick, value) -> None:
    session = make_session()

    with pytest.raises(InvalidPathError):
        session.srcset(value)
    with pytest.raises(InvalidPathError):
        session.size(value, 400)
    assert fake_magick.calls == []


def test_configured_magick_binary_drives_commands(site_root: Path, make_session, make_image, fake_magick) -> None:
    make_image(site_root / "img.jpg", (1000, 500))
    session = make_session(ResponsiveConfig(widths=(500,), magick="magick"))

    assert session.srcset("/img.jpg") == "/img.jpg 1000w, /img-500w.jpg 500w"

    assert fake_magick.identify_calls[0][:2] == ["magick", "identify"]
    assert fake_magick.convert_calls[0][0] == "magick"
