"""Tests for error correction levels, SVG rendering and output naming."""

import os
import xml.etree.ElementTree as ET

import pytest

from gauthgen import ErrorCorrectionLevel, FilesystemError, InvalidErrorCorrectionLevel, RenderError
from gauthgen.qr import next_available_path, render_svg, write_svg

URI = "otpauth://totp/gauth-generator:cli?secret=GEZDGNBVGY3TQOJQ&issuer=gauth-generator"


@pytest.mark.parametrize("tokens,level", [
    (["l", "low", "0", "L", "Low"], ErrorCorrectionLevel.LOW),
    (["m", "medium", "1", "MEDIUM"], ErrorCorrectionLevel.MEDIUM),
    (["q", "quartile", "2", "Q"], ErrorCorrectionLevel.QUARTILE),
    (["h", "high", "3", "HIGH"], ErrorCorrectionLevel.HIGH),
])
def test_parse_error_correction_level(tokens, level):
    for token in tokens:
        assert ErrorCorrectionLevel.parse(token) is level


@pytest.mark.parametrize("token", ["", "x", "4", "lo", "highest"])
def test_parse_rejects_unknown_tokens(token):
    with pytest.raises(InvalidErrorCorrectionLevel, match="Choose one from"):
        ErrorCorrectionLevel.parse(token)


def test_render_svg_sets_dimensions():
    root = ET.fromstring(render_svg(URI, 300, 250, ErrorCorrectionLevel.HIGH))
    assert root.tag.endswith("svg")
    assert root.get("width") == "300"
    assert root.get("height") == "250"
    assert root.get("viewBox")
    assert any(el.tag.endswith("path") for el in root.iter())


def test_higher_level_makes_denser_code():
    low = ET.fromstring(render_svg(URI, 200, 200, ErrorCorrectionLevel.LOW)).get("viewBox")
    high = ET.fromstring(render_svg(URI, 200, 200, ErrorCorrectionLevel.HIGH)).get("viewBox")
    assert float(high.split()[2]) > float(low.split()[2])


@pytest.mark.parametrize("width,height", [(199, 200), (200, 199), (0, 0)])
def test_render_svg_rejects_small_sizes(width, height):
    with pytest.raises(RenderError, match="at least 200x200"):
        render_svg(URI, width, height)


@pytest.mark.parametrize("level", list(ErrorCorrectionLevel))
def test_render_svg_rejects_overflowing_data(level):
    with pytest.raises(RenderError, match=f"too long for a QR code at level {level.name.lower()}"):
        render_svg("A" * 8000, 200, 200, level)


def test_next_available_path(tmp_path):
    assert next_available_path(str(tmp_path)) == os.path.join(str(tmp_path), "qrcode.svg")
    (tmp_path / "qrcode.svg").write_text("")
    assert next_available_path(str(tmp_path)) == os.path.join(str(tmp_path), "qrcode0.svg")
    (tmp_path / "qrcode0.svg").write_text("")
    assert next_available_path(str(tmp_path)) == os.path.join(str(tmp_path), "qrcode1.svg")


def test_next_available_path_gives_up(tmp_path):
    for name in ("qrcode.svg", "qrcode0.svg", "qrcode1.svg"):
        (tmp_path / name).write_text("")
    with pytest.raises(FilesystemError, match="after 2 attempts"):
        next_available_path(str(tmp_path), max_attempts=2)
    assert next_available_path(str(tmp_path), max_attempts=3).endswith("qrcode2.svg")


def test_write_svg_never_overwrites(tmp_path):
    (tmp_path / "qrcode.svg").write_text("keep me")
    path = write_svg("<svg/>", str(tmp_path))
    assert path == os.path.join(str(tmp_path), "qrcode0.svg")
    assert (tmp_path / "qrcode.svg").read_text() == "keep me"
    assert (tmp_path / "qrcode0.svg").read_text() == "<svg/>"


def test_write_svg_to_missing_directory(tmp_path):
    with pytest.raises(FilesystemError, match="Cannot write"):
        write_svg("<svg/>", str(tmp_path / "missing"))
