"""Read-only access to caller supplied images.

Source images may be Pillow images of any mode, NumPy arrays or
:class:`~chrome_paint.bitmaps.NativeBitmap` resources.  Everything is
normalised to a fresh ``(h, w, 4)`` ``uint8`` RGBA array so the caller's
buffer is never touched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np
from PIL import Image


@dataclass(frozen=True)
class PixelFormat:
    name: str
    bits_per_pixel: int
    indexed: bool = False
    has_alpha: bool = False


RGB555 = PixelFormat("RGB555", 16)
RGB32 = PixelFormat("RGB32", 32)
MONO1 = PixelFormat("MONO1", 1, indexed=True)

_PIL_FORMATS = {
    "1": PixelFormat("1", 1, indexed=True),
    "L": PixelFormat("L", 8),
    "P": PixelFormat("P", 8, indexed=True),
    "LA": PixelFormat("LA", 16, has_alpha=True),
    "PA": PixelFormat("PA", 16, indexed=True, has_alpha=True),
    "I;16": PixelFormat("I;16", 16),
    "RGB": PixelFormat("RGB", 24),
    "RGBX": PixelFormat("RGBX", 32),
    "RGBA": PixelFormat("RGBA", 32, has_alpha=True),
    "CMYK": PixelFormat("CMYK", 32),
    "I": PixelFormat("I", 32),
    "F": PixelFormat("F", 32),
}


def require_image(bitmap: Any, name: str = "bitmap") -> None:
    if bitmap is None:
        raise ValueError(f"{name} must not be None")


def _is_native(obj: Any) -> bool:
    return hasattr(obj, "pixel_format") and hasattr(obj, "to_rgba")


def image_size(bitmap: Any) -> Tuple[int, int]:
    """Return ``(width, height)``."""
    if isinstance(bitmap, Image.Image):
        return bitmap.size
    if isinstance(bitmap, np.ndarray):
        return (int(bitmap.shape[1]), int(bitmap.shape[0]))
    if _is_native(bitmap):
        return bitmap.size
    raise ValueError(f"unsupported image type {type(bitmap).__name__}")


def pixel_format(bitmap: Any) -> PixelFormat:
    """Describe the declared pixel format of a source image."""
    if isinstance(bitmap, Image.Image):
        fmt = _PIL_FORMATS.get(bitmap.mode)
        if fmt is None:
            has_alpha = "A" in bitmap.getbands()
            return PixelFormat(bitmap.mode, 8 * len(bitmap.getbands()), has_alpha=has_alpha)
        if bitmap.mode == "P" and "transparency" in bitmap.info:
            return PixelFormat("P", 8, indexed=True, has_alpha=True)
        return fmt
    if isinstance(bitmap, np.ndarray):
        if bitmap.dtype == np.bool_:
            return PixelFormat("bool", 1, indexed=True)
        channels = 1 if bitmap.ndim == 2 else int(bitmap.shape[2])
        return PixelFormat(
            f"array{channels}", 8 * channels * bitmap.dtype.itemsize, has_alpha=channels == 4
        )
    if _is_native(bitmap):
        return bitmap.pixel_format
    raise ValueError(f"unsupported image type {type(bitmap).__name__}")


def _array_to_rgba(arr: np.ndarray) -> np.ndarray:
    if arr.dtype == np.bool_:
        arr = arr.astype(np.uint8) * 255
    elif arr.dtype != np.uint8:
        raise ValueError(f"image arrays must be uint8 or bool, got {arr.dtype}")
    if arr.ndim == 2:
        h, w = arr.shape
        out = np.empty((h, w, 4), dtype=np.uint8)
        out[..., :3] = arr[..., None]
        out[..., 3] = 255
        return out
    if arr.ndim == 3 and arr.shape[2] == 3:
        h, w = arr.shape[:2]
        out = np.empty((h, w, 4), dtype=np.uint8)
        out[..., :3] = arr
        out[..., 3] = 255
        return out
    if arr.ndim == 3 and arr.shape[2] == 4:
        return arr.copy()
    raise ValueError(f"unsupported image array shape {arr.shape}")


def to_rgba_array(bitmap: Any) -> np.ndarray:
    """Return a new ``(h, w, 4)`` RGBA ``uint8`` copy of *bitmap*."""
    require_image(bitmap)
    if isinstance(bitmap, Image.Image):
        w, h = bitmap.size
        if w == 0 or h == 0:
            return np.zeros((h, w, 4), dtype=np.uint8)
        img = bitmap if bitmap.mode == "RGBA" else bitmap.convert("RGBA")
        return np.array(img, dtype=np.uint8)
    if isinstance(bitmap, np.ndarray):
        return _array_to_rgba(bitmap)
    if _is_native(bitmap):
        return bitmap.to_rgba()
    raise ValueError(f"unsupported image type {type(bitmap).__name__}")


def to_mono_bits(mask: Any) -> "np.ndarray | None":
    """Return a boolean ``(h, w)`` array for genuine 1-bit masks.

    Full-colour masks return ``None``; callers decide how to reduce them.
    """
    if isinstance(mask, Image.Image) and mask.mode == "1":
        w, h = mask.size
        if w == 0 or h == 0:
            return np.zeros((h, w), dtype=bool)
        return np.array(mask, dtype=bool)
    if isinstance(mask, np.ndarray) and mask.dtype == np.bool_ and mask.ndim == 2:
        return mask.copy()
    if _is_native(mask) and mask.pixel_format.bits_per_pixel == 1:
        return mask.to_bits()
    return None
