"""Channel arithmetic shared by the bitmap constructors.

All functions work on ``uint8`` NumPy arrays and use integer maths with
round-half-up so results do not depend on float rounding.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np


def composite_linear(rgba: np.ndarray, background: Sequence[int]) -> np.ndarray:
    """Blend *rgba* over an opaque *background* and return ``(h, w, 3)`` RGB.

    ``out = bg + (src - bg) * a / 255`` rounded to nearest.
    """
    src = rgba[..., :3].astype(np.int32)
    alpha = rgba[..., 3:4].astype(np.int32)
    bg = np.asarray(background[:3], dtype=np.int32)
    num = src * alpha + bg * (255 - alpha)
    return ((2 * num + 255) // 510).astype(np.uint8)


def composite_premultiplied(rgba: np.ndarray, background: Sequence[int]) -> np.ndarray:
    """Source-over blend with each term rounded separately.

    ``out = round(src * a / 255) + round(bg * (255 - a) / 255)``, the way
    GDI+ flattens a premultiplied image onto a solid colour.
    """
    src = rgba[..., :3].astype(np.int32)
    alpha = rgba[..., 3:4].astype(np.int32)
    bg = np.asarray(background[:3], dtype=np.int32)
    fg = (2 * src * alpha + 255) // 510
    back = (2 * bg * (255 - alpha) + 255) // 510
    return np.clip(fg + back, 0, 255).astype(np.uint8)


def to_5bit(channel: np.ndarray) -> np.ndarray:
    """``round(c * 31 / 255)`` for 8-bit channels."""
    return ((channel.astype(np.int32) * 62 + 255) // 510).astype(np.uint16)


def from_5bit(q: np.ndarray) -> np.ndarray:
    """``round(q * 255 / 31)``: the 8-bit value a reader recovers."""
    return ((q.astype(np.int32) * 510 + 31) // 62).astype(np.uint8)


def pack_rgb555(rgb: np.ndarray) -> np.ndarray:
    """Pack ``(h, w, 3)`` 8-bit RGB into ``(h, w)`` 16-bit 5-5-5 words."""
    q = to_5bit(rgb)
    return (q[..., 0] << 10) | (q[..., 1] << 5) | q[..., 2]


def unpack_rgb555(words: np.ndarray) -> np.ndarray:
    words = words.astype(np.uint16)
    q = np.stack([(words >> 10) & 0x1F, (words >> 5) & 0x1F, words & 0x1F], axis=-1)
    return from_5bit(q)


def expand_5bit(q: int) -> int:
    return (q * 510 + 31) // 62
