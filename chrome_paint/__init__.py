"""Chrome shades and fixed-format bitmap masks."""

from .bitmaps import (
    LuminanceThresholdStrategy,
    NativeBitmap,
    RasterMaskStrategy,
    create_bitmap_with_inverted_fore_color,
    create_color_mask,
    create_composite16,
    create_halftone_pattern,
    create_transparency_mask,
    invert_fore_color_if_needed,
    live_bitmap_count,
    make_monochrome,
)
from .cache import ShadeCache, default_cache, set_default_cache
from .color import Color
from .shades import (
    adjust_luminance,
    dark,
    dark_dark,
    invert_color,
    is_dark,
    is_darker,
    light,
    light_light,
)

__all__ = [
    "Color",
    "LuminanceThresholdStrategy",
    "NativeBitmap",
    "RasterMaskStrategy",
    "ShadeCache",
    "adjust_luminance",
    "create_bitmap_with_inverted_fore_color",
    "create_color_mask",
    "create_composite16",
    "create_halftone_pattern",
    "create_transparency_mask",
    "dark",
    "dark_dark",
    "default_cache",
    "invert_color",
    "invert_fore_color_if_needed",
    "is_dark",
    "is_darker",
    "light",
    "light_light",
    "live_bitmap_count",
    "make_monochrome",
    "set_default_cache",
]
