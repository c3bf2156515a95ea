"""Configuration helpers for chrome_paint."""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml


def _env_int(name: str) -> Optional[int]:
    """Return a positive int from environment variable *name* or ``None``."""
    raw = os.environ.get(name)
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        logging.warning("%s=%r is not an integer; ignoring", name, raw)
        return None
    return value if value > 0 else None


# Bound for the shade cache; unset or <= 0 keeps it unbounded.
SHADE_CACHE_SIZE = _env_int("CHROME_PAINT_SHADE_CACHE_SIZE")

# Background translucent pixels are flattened onto before masking.
MASK_BACKGROUND = os.environ.get("CHROME_PAINT_MASK_BACKGROUND") or "#D3D3D3"

DEFAULT_SHADE_PERCENT = 0.5
FULL_SHADE_PERCENT = 1.0

# thousandths of the luminosity range used for the shade anchors
HILIGHT_ADJ = 500
SHADOW_ADJ = -333

# brightness above which a full-colour mask pixel counts as clear
MASK_LUMINANCE_THRESHOLD = 127

# luminosity gap above which a foreground pixel gets inverted
MAX_LUMINOSITY_DIFFERENCE = 20

HALFTONE_ROWS = tuple((0x5555 << (i & 1)) & 0xFFFF for i in range(8))


def load_preset(path: str) -> Dict[str, Any]:
    """Load a YAML preset file into a plain ``dict``.

    Keys use the CLI destination names (``percent``, ``kind`` ...).
    """
    with open(path, "r", encoding="utf8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ValueError(f"preset {path!r} must contain a mapping")
    return data
