"""Test color parsing and hex formatting."""

from __future__ import annotations

from svgstyle.color import Color


def test_hex_parsing() -> None:
    color = Color.from_rgba_str('ff000080')
    assert color is not None
    assert color.r() == 1.0
    assert color.a() == 128 / 255
    assert color.rgb_hex() == 'ff0000'
    assert color.rgba_hex() == 'ff000080'

    expected = Color.from_rgba8(0x12, 0xAB, 0x34, 255)
    assert Color.from_rgb_str('#12ab34') == expected
    assert Color.from_rgb_str('12ab34').rgb_hex() == '12ab34'

    assert Color.from_rgba_str('ff0000') is None
    assert Color.from_rgb_str('ff00008') is None
    assert Color.from_rgb_str('gg0000') is None
    assert Color.from_rgba_str('') is None


def test_css() -> None:
    assert Color.from_css('#fff') == Color.WHITE
    assert Color.from_css('#000000') == Color.BLACK
    assert Color.from_css('#0000ff00') == Color(0.0, 0.0, 1.0, 0.0)
    assert Color.from_css('white') is None


def test_float_channels() -> None:
    assert Color.from_rgbaf32(0.5, 0.25, 1.0, 1.0) == Color(0.5, 0.25, 1.0)
    assert Color.from_rgbaf32(1.5, 0.0, 0.0, 1.0) is None
    assert Color.from_rgbaf32(0.0, 0.0, 0.0, -0.1) is None
    # Out of range channels are clamped when formatted
    assert Color(2.0, -1.0, 0.5).rgb_hex() == 'ff0080'


def test_rgba8() -> None:
    color = Color.from_rgba8(0, 0, 0, 255)
    assert color == Color.BLACK
    assert color.to_rgba8() == (0, 0, 0, 255)
    assert Color.from_rgba8(1, 2, 3, 4).to_rgba8() == (1, 2, 3, 4)


def test_dict() -> None:
    color = Color(0.1, 0.2, 0.3, 0.4)
    assert Color.from_dict(color.to_dict()) == color
    assert Color.from_dict({'red': 1, 'green': 0, 'blue': 0}) == Color.RED
