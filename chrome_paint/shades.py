"""Light/dark shades for 3-D chrome.

``percent`` is the fraction of the way from the base shade to the extreme
one: ``dark(c, 0)`` is the plain dark shade and ``dark(c, 1)`` the
"dark dark" one (black); ``light(c, 0)`` is ``c`` itself and ``light(c, 1)``
the "light light" one.  Values outside ``[0, 1]`` extrapolate and the
resulting luminosity is clamped to the HLS range.  Output alpha is always
255.
"""

from __future__ import annotations

import math
from typing import Optional, Union

import numpy as np

from . import config
from .cache import ShadeCache, default_cache
from .color import Color
from .hls import HLS_MAX, LUMINOSITY_MIDPOINT, hls_to_rgb, new_luma, rgb_to_hls

CacheArg = Union[ShadeCache, bool, None]

LIGHTER = "light"
DARKER = "dark"


def _shift(span: int, percent: float) -> int:
    """Truncated single-precision ``span * percent``."""
    with np.errstate(over="ignore"):
        product = np.float32(span) * np.float32(percent)
    if not np.isfinite(product):
        raise ValueError(f"percent {percent!r} out of range")
    return int(product)


def adjust_luminance(color: Color, percent: float, lighter: bool = True) -> Color:
    """Shift the luminosity of ``color`` without touching the cache."""
    if not math.isfinite(percent):
        raise ValueError(f"percent must be finite, got {percent!r}")
    hue, lum, sat = rgb_to_hls(color.r, color.g, color.b)
    if lighter:
        zero = lum
        one = new_luma(lum, config.HILIGHT_ADJ)
        target = zero + _shift(one - zero, percent)
    else:
        zero = new_luma(lum, config.SHADOW_ADJ)
        one = 0
        target = zero - _shift(zero - one, percent)
    target = max(0, min(HLS_MAX, target))
    r, g, b = hls_to_rgb(hue, target, sat)
    return Color(255, r, g, b)


def _cached(color: Color, percent: float, direction: str, cache: CacheArg) -> Color:
    percent = float(percent)
    lighter = direction == LIGHTER
    if cache is False:
        return adjust_luminance(color, percent, lighter)
    store = default_cache() if cache is None or cache is True else cache
    key = (direction, Color(*color), percent)
    return store.get_or_compute(key, lambda: adjust_luminance(color, percent, lighter))


def light(
    color: Color, percent: float = config.DEFAULT_SHADE_PERCENT, *, cache: CacheArg = None
) -> Color:
    return _cached(color, percent, LIGHTER, cache)


def light_light(color: Color, *, cache: CacheArg = None) -> Color:
    return _cached(color, config.FULL_SHADE_PERCENT, LIGHTER, cache)


def dark(
    color: Color, percent: float = config.DEFAULT_SHADE_PERCENT, *, cache: CacheArg = None
) -> Color:
    return _cached(color, percent, DARKER, cache)


def dark_dark(color: Color, *, cache: CacheArg = None) -> Color:
    return _cached(color, config.FULL_SHADE_PERCENT, DARKER, cache)


def luminosity(color: Color) -> int:
    return rgb_to_hls(color.r, color.g, color.b).luminosity


def is_dark(color: Color) -> bool:
    """True when the HLS luminosity is below the middle of the range."""
    return luminosity(color) < LUMINOSITY_MIDPOINT


def is_darker(c1: Color, c2: Color) -> bool:
    return luminosity(c1) < luminosity(c2)


def invert_color(color: Color) -> Color:
    """Complement RGB, keep alpha."""
    return Color(color.a, 255 - color.r, 255 - color.g, 255 - color.b)


def shade_for(color: Color, kind: str, percent: Optional[float] = None) -> Color:
    """Dispatch by name: ``light``, ``light-light``, ``dark``, ``dark-dark``."""
    if kind == "light":
        return light(color) if percent is None else light(color, percent)
    if kind == "light-light":
        return light_light(color)
    if kind == "dark":
        return dark(color) if percent is None else dark(color, percent)
    if kind == "dark-dark":
        return dark_dark(color)
    raise ValueError(f"unknown shade {kind!r}")
