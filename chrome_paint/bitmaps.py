"""Fixed-format bitmap construction.

Each constructor reads a caller supplied image (Pillow image, NumPy array or
:class:`NativeBitmap`) and returns a newly allocated :class:`NativeBitmap`
in one of three layouts:

``RGB555``
    16 bpp, ``xRRRRRGGGGGBBBBB`` little-endian words, rows padded to 4 bytes,
    no palette.
``RGB32``
    32 bpp, ``B, G, R, 0xFF`` bytes per pixel, no palette.
``MONO1``
    1 bpp, most significant bit first, rows padded to an even number of
    bytes, palette ``[black, white]``.

The caller owns the result and should call :meth:`NativeBitmap.release`
(or use it as a context manager) when done.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

from . import config
from .color import BLACK, WHITE, Color
from .hls import HLS_MAX, RGB_MAX
from .pixels import (
    MONO1,
    RGB32,
    RGB555,
    PixelFormat,
    image_size,
    require_image,
    to_mono_bits,
    to_rgba_array,
)
from .quantize import (
    composite_linear,
    composite_premultiplied,
    expand_5bit,
    pack_rgb555,
    unpack_rgb555,
)
from .shades import luminosity

MONO_PALETTE: Tuple[Color, Color] = (BLACK, WHITE)

_LIVE_LOCK = threading.Lock()
_LIVE_COUNT = 0


def _track(delta: int) -> None:
    global _LIVE_COUNT
    with _LIVE_LOCK:
        _LIVE_COUNT += delta


def live_bitmap_count() -> int:
    """Number of :class:`NativeBitmap` objects not yet released."""
    with _LIVE_LOCK:
        return _LIVE_COUNT


def stride_for(fmt: PixelFormat, width: int) -> int:
    """Bytes per row for *fmt* at *width* pixels."""
    if fmt.bits_per_pixel == 1:
        return ((width + 15) // 16) * 2
    if fmt.bits_per_pixel == 16:
        return ((width * 16 + 31) // 32) * 4
    if fmt.bits_per_pixel == 32:
        return width * 4
    raise ValueError(f"unsupported native pixel format {fmt.name}")


class NativeBitmap:
    """Caller-owned pixel buffer in a fixed native layout."""

    def __init__(
        self,
        width: int,
        height: int,
        pixel_format: PixelFormat,
        bits: bytes,
        palette: Sequence[Color] = (),
    ) -> None:
        if width < 0 or height < 0:
            raise ValueError("bitmap dimensions must be >= 0")
        self.width = int(width)
        self.height = int(height)
        self.pixel_format = pixel_format
        self.stride = stride_for(pixel_format, self.width)
        expected = self.stride * self.height
        if len(bits) != expected:
            raise ValueError(f"expected {expected} bytes of pixel data, got {len(bits)}")
        self.palette: Tuple[Color, ...] = tuple(palette)
        self._bits: Optional[bytes] = bytes(bits)
        _track(1)
        logging.debug(
            "allocated %s bitmap %dx%d (%d bytes)",
            pixel_format.name,
            self.width,
            self.height,
            expected,
        )

    def __repr__(self) -> str:
        state = "released" if self.released else "live"
        return f"<NativeBitmap {self.pixel_format.name} {self.width}x{self.height} {state}>"

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def bits_per_pixel(self) -> int:
        return self.pixel_format.bits_per_pixel

    @property
    def released(self) -> bool:
        return self._bits is None

    def _check_live(self) -> bytes:
        if self._bits is None:
            raise ValueError("bitmap has been released")
        return self._bits

    @property
    def bits(self) -> bytes:
        return self._check_live()

    def release(self) -> None:
        """Free the pixel buffer; releasing twice is a no-op."""
        if self._bits is None:
            return
        self._bits = None
        _track(-1)
        logging.debug("released %s bitmap %dx%d", self.pixel_format.name, self.width, self.height)

    def __enter__(self) -> "NativeBitmap":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.release()

    # -- decoding ---------------------------------------------------------

    def _rows(self, dtype: str, per_row: int) -> np.ndarray:
        return np.frombuffer(self.bits, dtype=dtype).reshape(self.height, per_row)

    def to_bits(self) -> np.ndarray:
        """Boolean ``(h, w)`` array of palette indices for 1-bit bitmaps."""
        if self.bits_per_pixel != 1:
            raise ValueError(f"{self.pixel_format.name} bitmap has no 1-bit plane")
        if self.width == 0 or self.height == 0:
            self._check_live()
            return np.zeros((self.height, self.width), dtype=bool)
        rows = self._rows("u1", self.stride)
        return np.unpackbits(rows, axis=1)[:, : self.width].astype(bool)

    def to_rgba(self) -> np.ndarray:
        """Decode into a fresh ``(h, w, 4)`` RGBA ``uint8`` array."""
        h, w = self.height, self.width
        out = np.empty((h, w, 4), dtype=np.uint8)
        out[..., 3] = 255
        if w == 0 or h == 0:
            self._check_live()
            return out
        bpp = self.bits_per_pixel
        if bpp == 16:
            words = self._rows("<u2", self.stride // 2)[:, :w]
            out[..., :3] = unpack_rgb555(words)
        elif bpp == 32:
            px = self._rows("u1", self.stride).reshape(h, w, 4)
            out[..., 0] = px[..., 2]
            out[..., 1] = px[..., 1]
            out[..., 2] = px[..., 0]
        else:
            lut = np.array([c.rgb for c in self.palette], dtype=np.uint8)
            out[..., :3] = lut[self.to_bits().astype(np.uint8)]
        return out

    def get_pixel(self, x: int, y: int) -> Color:
        """Full-depth colour a reader recovers at ``(x, y)``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise ValueError(f"pixel ({x}, {y}) outside {self.width}x{self.height}")
        data = self.bits
        bpp = self.bits_per_pixel
        row = y * self.stride
        if bpp == 16:
            word = int.from_bytes(data[row + 2 * x : row + 2 * x + 2], "little")
            return Color(
                255,
                expand_5bit((word >> 10) & 0x1F),
                expand_5bit((word >> 5) & 0x1F),
                expand_5bit(word & 0x1F),
            )
        if bpp == 32:
            off = row + 4 * x
            return Color(255, data[off + 2], data[off + 1], data[off])
        byte = data[row + x // 8]
        return self.palette[(byte >> (7 - x % 8)) & 1]

    def to_image(self) -> Image.Image:
        """Pillow view of the bitmap: ``"1"`` for masks, ``"RGB"`` otherwise."""
        mode = "1" if self.bits_per_pixel == 1 else "RGB"
        if self.width == 0 or self.height == 0:
            self._check_live()
            return Image.new(mode, self.size)
        if mode == "1":
            # index 1 is white in both the palette and Pillow mode "1"
            return Image.fromarray(self.to_bits())
        return Image.fromarray(np.ascontiguousarray(self.to_rgba()[..., :3]))


# -- packing helpers ---------------------------------------------------------


def _from_rgb555(words: np.ndarray) -> NativeBitmap:
    h, w = words.shape
    stride = stride_for(RGB555, w)
    rows = np.zeros((h, stride // 2), dtype="<u2")
    rows[:, :w] = words
    return NativeBitmap(w, h, RGB555, rows.tobytes())


def _from_rgb32(rgb: np.ndarray) -> NativeBitmap:
    h, w = rgb.shape[:2]
    px = np.empty((h, w, 4), dtype=np.uint8)
    px[..., 0] = rgb[..., 2]
    px[..., 1] = rgb[..., 1]
    px[..., 2] = rgb[..., 0]
    px[..., 3] = 255
    return NativeBitmap(w, h, RGB32, px.tobytes())


def _from_mono(bits: np.ndarray) -> NativeBitmap:
    h, w = bits.shape
    stride = stride_for(MONO1, w)
    rows = np.zeros((h, stride), dtype=np.uint8)
    if w and h:
        packed = np.packbits(bits.astype(np.uint8), axis=1)
        rows[:, : packed.shape[1]] = packed
    return NativeBitmap(w, h, MONO1, rows.tobytes(), MONO_PALETTE)


def mask_background() -> Color:
    return Color.from_hex(config.MASK_BACKGROUND).opaque()


# -- mask reduction strategies -----------------------------------------------

MaskStrategy = Callable[[np.ndarray, Color], np.ndarray]


class RasterMaskStrategy:
    """Use a full-colour mask as-is, channel by channel.

    The mask is flattened onto the background like any source image and its
    RGB bits feed the ``colour AND NOT mask`` raster rule directly.
    """

    def __call__(self, mask_rgba: np.ndarray, background: Color) -> np.ndarray:
        return composite_premultiplied(mask_rgba, background.rgb)


class LuminanceThresholdStrategy:
    """Reduce a full-colour mask to one bit by perceived brightness.

    Pixels brighter than ``threshold`` clear the mask bit (source shows
    through); darker ones set it.
    """

    def __init__(self, threshold: int = config.MASK_LUMINANCE_THRESHOLD) -> None:
        self.threshold = threshold

    def __call__(self, mask_rgba: np.ndarray, background: Color) -> np.ndarray:
        import cv2

        flat = composite_premultiplied(mask_rgba, background.rgb)
        if flat.size == 0:
            return flat
        gray = cv2.cvtColor(flat, cv2.COLOR_RGB2GRAY)
        _, binary = cv2.threshold(gray, self.threshold, 255, cv2.THRESH_BINARY_INV)
        return np.repeat(binary[..., None], 3, axis=2)


def _mask_raster(
    mask: Any, shape: Tuple[int, int], background: Color, strategy: Optional[MaskStrategy]
) -> np.ndarray:
    mw, mh = image_size(mask)
    if (mh, mw) != shape:
        raise ValueError(
            f"monochrome_mask size {mw}x{mh} does not match bitmap {shape[1]}x{shape[0]}"
        )
    mono = to_mono_bits(mask)
    if mono is not None:
        # set bits expand to the white background colour, clear bits to black
        return np.repeat(np.where(mono, 255, 0).astype(np.uint8)[..., None], 3, axis=2)
    strategy = strategy or RasterMaskStrategy()
    return strategy(to_rgba_array(mask), background)


# -- public constructors -----------------------------------------------------


def create_composite16(bitmap: Any, background: Color) -> NativeBitmap:
    """Flatten *bitmap* over *background* into a 16 bpp 5-5-5 bitmap."""
    require_image(bitmap)
    rgba = to_rgba_array(bitmap)
    bg = background.rgb
    if background.a != 255:
        # translucent backgrounds sit on a zeroed buffer
        bg = tuple((2 * c * background.a + 255) // 510 for c in bg)
        logging.debug("composite16: background %s flattened to %s", background.to_hex(), bg)
    rgb = composite_linear(rgba, bg)
    return _from_rgb555(pack_rgb555(rgb))


def create_color_mask(
    bitmap: Any,
    monochrome_mask: Any = None,
    *,
    mask_strategy: Optional[MaskStrategy] = None,
    background: Optional[Color] = None,
) -> NativeBitmap:
    """Build the colour half of a masked icon as a 32 bpp bitmap.

    Translucent source pixels are flattened onto *background* (light gray by
    default).  With *monochrome_mask* every pixel becomes
    ``colour AND NOT mask``: set bits of a 1-bit mask turn the pixel black,
    clear bits keep the source colour.  Full-colour masks go through
    *mask_strategy* first (:class:`RasterMaskStrategy` by default).
    """
    require_image(bitmap)
    bg = (background or mask_background()).opaque()
    rgb = composite_premultiplied(to_rgba_array(bitmap), bg.rgb)
    if monochrome_mask is not None:
        raster = _mask_raster(monochrome_mask, rgb.shape[:2], bg, mask_strategy)
        rgb = rgb & ~raster
    return _from_rgb32(rgb)


def create_transparency_mask(bitmap: Any) -> NativeBitmap:
    """1 bpp mask: white where alpha is 0, black wherever alpha > 0."""
    require_image(bitmap)
    alpha = to_rgba_array(bitmap)[..., 3]
    return _from_mono(alpha == 0)


def create_halftone_pattern() -> NativeBitmap:
    """8x8 checkerboard used for the halftone brush."""
    bits = b"".join(row.to_bytes(2, "little") for row in config.HALFTONE_ROWS)
    return NativeBitmap(8, 8, MONO1, bits, MONO_PALETTE)


def _rgba_image(arr: np.ndarray) -> Image.Image:
    h, w = arr.shape[:2]
    if w == 0 or h == 0:
        return Image.new("RGBA", (w, h))
    return Image.fromarray(np.ascontiguousarray(arr))


def make_monochrome(bitmap: Any, color: Color) -> Image.Image:
    """Paint every non-transparent pixel with *color*.

    Fully transparent pixels become ``(0, 0, 0, 0)``.
    """
    require_image(bitmap)
    rgba = to_rgba_array(bitmap)
    out = np.zeros_like(rgba)
    visible = rgba[..., 3] != 0
    out[visible] = (color.r, color.g, color.b, color.a)
    return _rgba_image(out)


def _argb_differs(rgba: np.ndarray, color: Color) -> np.ndarray:
    target = np.array([color.r, color.g, color.b, color.a], dtype=np.uint8)
    return np.any(rgba != target, axis=-1)


def _luminosity(rgb: np.ndarray) -> np.ndarray:
    """Vectorised HLS luminosity, same rounding as :func:`rgb_to_hls`."""
    rgb = rgb.astype(np.int32)
    total = rgb.max(axis=-1) + rgb.min(axis=-1)
    return (total * HLS_MAX + RGB_MAX) // (2 * RGB_MAX)


def create_bitmap_with_inverted_fore_color(
    bitmap: Any, background: Optional[Color] = None
) -> Image.Image:
    """Invert the RGB of every pixel whose ARGB differs from *background*.

    Alpha is kept.  Without *background* every pixel is inverted.
    """
    require_image(bitmap)
    rgba = to_rgba_array(bitmap)
    if background is None:
        fore = np.ones(rgba.shape[:2], dtype=bool)
    else:
        fore = _argb_differs(rgba, background)
    rgba[fore, :3] = 255 - rgba[fore, :3]
    return _rgba_image(rgba)


def invert_fore_color_if_needed(bitmap: Any, background: Color) -> Image.Image:
    """Like :func:`create_bitmap_with_inverted_fore_color`, restricted to
    pixels whose luminosity is far from the background's.

    A pixel is inverted when its ARGB differs from *background* and the
    luminosity gap exceeds ``config.MAX_LUMINOSITY_DIFFERENCE``.
    """
    require_image(bitmap)
    rgba = to_rgba_array(bitmap)
    gap = np.abs(_luminosity(rgba[..., :3]) - luminosity(background))
    fore = _argb_differs(rgba, background) & (gap > config.MAX_LUMINOSITY_DIFFERENCE)
    rgba[fore, :3] = 255 - rgba[fore, :3]
    return _rgba_image(rgba)
