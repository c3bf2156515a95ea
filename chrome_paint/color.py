"""Colour value type.

``Color`` is an immutable ARGB value with exact channel equality.  It is
hashable so it can be used directly as part of a cache key.
"""

from __future__ import annotations

import numbers
import re
from typing import NamedTuple, Tuple

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def _check_channel(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} channel must be an int, got {value!r}")
    value = int(value)
    if not 0 <= value <= 255:
        raise ValueError(f"{name} channel out of range [0,255]: {value}")
    return value


class Color(NamedTuple):
    """ARGB colour with four 8-bit channels."""

    a: int
    r: int
    g: int
    b: int

    @classmethod
    def from_argb(cls, a: int, r: int, g: int, b: int) -> "Color":
        return cls(
            _check_channel("alpha", a),
            _check_channel("red", r),
            _check_channel("green", g),
            _check_channel("blue", b),
        )

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> "Color":
        """Opaque colour from three channels."""
        return cls.from_argb(255, r, g, b)

    @classmethod
    def from_hex(cls, text: str) -> "Color":
        """Parse ``#RRGGBB`` (opaque) or ``#AARRGGBB``."""
        m = _HEX_RE.match((text or "").strip())
        if not m:
            raise ValueError(f"invalid colour {text!r}; expected #RRGGBB or #AARRGGBB")
        digits = m.group(1)
        if len(digits) == 6:
            digits = "FF" + digits
        return cls.from_int(int(digits, 16))

    @classmethod
    def from_int(cls, value: int) -> "Color":
        """Unpack a 32-bit ``0xAARRGGBB`` integer."""
        value &= 0xFFFFFFFF
        return cls((value >> 24) & 0xFF, (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    def to_argb(self) -> int:
        return (self.a << 24) | (self.r << 16) | (self.g << 8) | self.b

    def to_hex(self) -> str:
        return f"#{self.a:02X}{self.r:02X}{self.g:02X}{self.b:02X}"

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def opaque(self) -> "Color":
        """Same RGB with alpha forced to 255."""
        return Color(255, self.r, self.g, self.b)


BLACK = Color(255, 0, 0, 0)
WHITE = Color(255, 255, 255, 255)
RED = Color(255, 255, 0, 0)
# background GDI+ uses when flattening translucent pixels
LIGHT_GRAY = Color(255, 211, 211, 211)
TRANSPARENT = Color(0, 255, 255, 255)
