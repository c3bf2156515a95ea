"""Integer HLS colour model.

Hue, luminosity and saturation all live in ``[0, HLS_MAX]`` with
``HLS_MAX = 240``.  This is the classic Windows integer convention, not the
``[0, 1]`` float one from :mod:`colorsys`; every intermediate division
truncates toward zero so results are bit-for-bit reproducible.
"""

from __future__ import annotations

from typing import NamedTuple, Tuple

HLS_MAX = 240
RGB_MAX = 255
UNDEFINED_HUE = HLS_MAX * 2 // 3
LUMINOSITY_MIDPOINT = HLS_MAX // 2


class HLS(NamedTuple):
    hue: int
    luminosity: int
    saturation: int


def _div(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def rgb_to_hls(r: int, g: int, b: int) -> HLS:
    """Convert 8-bit RGB channels to an integer :class:`HLS` triple."""
    cmax = max(r, g, b)
    cmin = min(r, g, b)
    total = cmax + cmin
    lum = _div(total * HLS_MAX + RGB_MAX, 2 * RGB_MAX)

    dif = cmax - cmin
    if dif == 0:
        return HLS(UNDEFINED_HUE, lum, 0)

    if lum <= HLS_MAX // 2:
        sat = _div(dif * HLS_MAX + _div(total, 2), total)
    else:
        rest = 2 * RGB_MAX - total
        sat = _div(dif * HLS_MAX + _div(rest, 2), rest)

    sixth = HLS_MAX // 6
    r_delta = _div((cmax - r) * sixth + _div(dif, 2), dif)
    g_delta = _div((cmax - g) * sixth + _div(dif, 2), dif)
    b_delta = _div((cmax - b) * sixth + _div(dif, 2), dif)

    if r == cmax:
        hue = b_delta - g_delta
    elif g == cmax:
        hue = HLS_MAX // 3 + r_delta - b_delta
    else:
        hue = 2 * HLS_MAX // 3 + g_delta - r_delta

    if hue < 0:
        hue += HLS_MAX
    if hue > HLS_MAX:
        hue -= HLS_MAX
    return HLS(hue, lum, sat)


def _hue_to_rgb(n1: int, n2: int, hue: int) -> int:
    if hue < 0:
        hue += HLS_MAX
    if hue > HLS_MAX:
        hue -= HLS_MAX

    sixth = HLS_MAX // 6
    if hue < sixth:
        return n1 + _div((n2 - n1) * hue + HLS_MAX // 12, sixth)
    if hue < HLS_MAX // 2:
        return n2
    if hue < HLS_MAX * 2 // 3:
        return n1 + _div((n2 - n1) * (HLS_MAX * 2 // 3 - hue) + HLS_MAX // 12, sixth)
    return n1


def _to_channel(value: int) -> int:
    return max(0, min(RGB_MAX, value))


def hls_to_rgb(hue: int, luminosity: int, saturation: int) -> Tuple[int, int, int]:
    """Convert an integer HLS triple back to 8-bit RGB channels.

    Channels are clamped to ``[0, 255]``.
    """
    if saturation == 0:
        v = _to_channel(_div(luminosity * RGB_MAX, HLS_MAX))
        return (v, v, v)

    if luminosity <= HLS_MAX // 2:
        magic2 = _div(luminosity * (HLS_MAX + saturation) + HLS_MAX // 2, HLS_MAX)
    else:
        magic2 = luminosity + saturation - _div(luminosity * saturation + HLS_MAX // 2, HLS_MAX)
    magic1 = 2 * luminosity - magic2

    third = HLS_MAX // 3
    r = _div(_hue_to_rgb(magic1, magic2, hue + third) * RGB_MAX + HLS_MAX // 2, HLS_MAX)
    g = _div(_hue_to_rgb(magic1, magic2, hue) * RGB_MAX + HLS_MAX // 2, HLS_MAX)
    b = _div(_hue_to_rgb(magic1, magic2, hue - third) * RGB_MAX + HLS_MAX // 2, HLS_MAX)
    return (_to_channel(r), _to_channel(g), _to_channel(b))


def new_luma(luminosity: int, n: int, scale: bool = True) -> int:
    """Shift ``luminosity`` by ``n`` thousandths of the range.

    With ``scale`` the shift is proportional: positive ``n`` moves toward
    ``HLS_MAX + 1``, negative ``n`` shrinks toward zero.
    """
    if n == 0:
        return luminosity
    if scale:
        if n > 0:
            return _div(luminosity * (1000 - n) + (HLS_MAX + 1) * n, 1000)
        return _div(luminosity * (n + 1000), 1000)
    lum = luminosity + _div(n * HLS_MAX, 1000)
    return max(0, min(HLS_MAX, lum))
