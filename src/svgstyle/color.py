"""RGBA color value type with hex parsing and formatting."""

from __future__ import annotations

import dataclasses
import re
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from typing_extensions import Self

_CSSHEX_RGBA_LEN = 8
_CSSHEX_RGB_LEN = 6
_CSSHEX_RGBSHORT_LEN = 3

_RE_HEX = re.compile(r'#?([0-9a-f]+)$', flags=(re.IGNORECASE | re.ASCII))


def _parse_hex(hex_color: str, length: int) -> tuple[int, ...] | None:
    """Split a hex color string into integer channel values.

    Args:
        hex_color: Hex digits with an optional '#' prefix.
        length: The exact number of hex digits expected.

    Returns:
        A tuple of integers in the range 0-255, one per channel,
        or None if `hex_color` is not `length` hex digits.
    """
    m = _RE_HEX.match(hex_color.strip())
    if not m or len(m.group(1)) != length:
        return None
    digits = m.group(1)
    if length == _CSSHEX_RGBSHORT_LEN:
        return tuple(int(c, 16) * 17 for c in digits)
    return tuple(int(digits[i : i + 2], 16) for i in range(0, length, 2))


def _to_byte(value: float) -> int:
    return round(min(max(value, 0.0), 1.0) * 255)


@dataclasses.dataclass(frozen=True)
class Color:
    """An RGBA color.

    Components are floats in the range 0.0 - 1.0.
    """

    red: float
    green: float
    blue: float
    alpha: float = 1.0

    BLACK: ClassVar[Color]
    WHITE: ClassVar[Color]
    RED: ClassVar[Color]
    GREEN: ClassVar[Color]
    BLUE: ClassVar[Color]
    TRANSPARENT: ClassVar[Color]

    @classmethod
    def from_rgba8(cls, red: int, green: int, blue: int, alpha: int) -> Self:
        """Create a color from integer channels in the range 0-255."""
        return cls(red / 255, green / 255, blue / 255, alpha / 255)

    @classmethod
    def from_rgbaf32(
        cls, red: float, green: float, blue: float, alpha: float
    ) -> Self | None:
        """Create a color from float channels.

        Returns:
            A new Color or None if any channel is outside 0.0 - 1.0.
        """
        if all(0.0 <= c <= 1.0 for c in (red, green, blue, alpha)):
            return cls(red, green, blue, alpha)
        return None

    @classmethod
    def from_rgba_str(cls, hex_color: str) -> Self | None:
        """Parse an 8 digit hex color (ie 'ff00ff80').

        Returns:
            A new Color or None if the string can't be parsed.
        """
        channels = _parse_hex(hex_color, _CSSHEX_RGBA_LEN)
        if channels is None:
            return None
        return cls.from_rgba8(*channels)

    @classmethod
    def from_rgb_str(cls, hex_color: str) -> Self | None:
        """Parse a 6 digit hex color (ie 'ff00ff'). Alpha will be 1.0.

        Returns:
            A new Color or None if the string can't be parsed.
        """
        channels = _parse_hex(hex_color, _CSSHEX_RGB_LEN)
        if channels is None:
            return None
        return cls.from_rgba8(*channels, 255)

    @classmethod
    def from_css(cls, css_color: str) -> Self | None:
        """Parse a CSS hex color: #rgb, #rrggbb, or #rrggbbaa."""
        for length in (_CSSHEX_RGBA_LEN, _CSSHEX_RGB_LEN, _CSSHEX_RGBSHORT_LEN):
            channels = _parse_hex(css_color, length)
            if channels is not None:
                r, g, b, *a = channels
                return cls.from_rgba8(r, g, b, a[0] if a else 255)
        return None

    def r(self) -> float:
        return self.red

    def g(self) -> float:
        return self.green

    def b(self) -> float:
        return self.blue

    def a(self) -> float:
        return self.alpha

    def to_rgba8(self) -> tuple[int, int, int, int]:
        """Channels as integers in the range 0-255."""
        return (
            _to_byte(self.red),
            _to_byte(self.green),
            _to_byte(self.blue),
            _to_byte(self.alpha),
        )

    def rgb_hex(self) -> str:
        """Color as six lowercase hex digits without a '#' prefix."""
        r, g, b, _a = self.to_rgba8()
        return f'{r:02x}{g:02x}{b:02x}'

    def rgba_hex(self) -> str:
        """Color and alpha as eight lowercase hex digits."""
        r, g, b, a = self.to_rgba8()
        return f'{r:02x}{g:02x}{b:02x}{a:02x}'

    def to_dict(self) -> dict[str, float]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create a color from a mapping of channel names to floats.

        Raises:
            KeyError, TypeError, ValueError: if a channel is missing
                or not a number.
        """
        return cls(
            float(data['red']),
            float(data['green']),
            float(data['blue']),
            float(data.get('alpha', 1.0)),
        )


Color.BLACK = Color(0.0, 0.0, 0.0)
Color.WHITE = Color(1.0, 1.0, 1.0)
Color.RED = Color(1.0, 0.0, 0.0)
Color.GREEN = Color(0.0, 1.0, 0.0)
Color.BLUE = Color(0.0, 0.0, 1.0)
Color.TRANSPARENT = Color(0.0, 0.0, 0.0, 0.0)
