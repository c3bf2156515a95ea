"""Command line interface for chrome_paint."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List

from PIL import Image

from . import bitmaps, shades
from .color import Color
from .config import load_preset
from .validate import validate_args

KINDS = ("composite16", "color-mask", "transparency-mask")
SHADES = ("light", "light-light", "dark", "dark-dark", "is-dark")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chrome shade and bitmap mask helper")
    parser.add_argument(
        "--preset",
        action="append",
        default=[],
        help="YAML file with default option values (may repeat)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument(
        "--validate", action="store_true", help="Validate arguments and exit"
    )
    parser.add_argument("--color", help="Base colour #RRGGBB or #AARRGGBB")
    parser.add_argument("--shade", choices=SHADES, default="light")
    parser.add_argument(
        "--percent",
        type=float,
        default=None,
        help="Fraction toward the light-light/dark-dark shade",
    )
    parser.add_argument("--input", help="Source image path")
    parser.add_argument("--output", help="Where to write the bitmap")
    parser.add_argument("--kind", choices=KINDS, default="composite16")
    parser.add_argument(
        "--background",
        default=None,
        help="Composite background for composite16 / color-mask",
    )
    parser.add_argument("--mask", help="Mask image for --kind color-mask")
    parser.add_argument(
        "--mask-rule",
        choices=["raster", "luminance"],
        default="raster",
        help="How full-colour masks are reduced",
    )
    return parser


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    prelim, _ = parser.parse_known_args(argv)
    for path in prelim.preset:
        parser.set_defaults(**load_preset(path))
    return parser.parse_args(argv)


def _run_shade(args: argparse.Namespace) -> None:
    color = Color.from_hex(args.color)
    if args.shade == "is-dark":
        print("true" if shades.is_dark(color) else "false")
        return
    result = shades.shade_for(color, args.shade, args.percent)
    print(result.to_hex())


def _build_bitmap(
    args: argparse.Namespace, img: Image.Image, mask: Image.Image | None = None
) -> bitmaps.NativeBitmap:
    if args.kind == "composite16":
        background = Color.from_hex(args.background or "#000000")
        return bitmaps.create_composite16(img, background)
    if args.kind == "color-mask":
        strategy = (
            bitmaps.LuminanceThresholdStrategy()
            if args.mask_rule == "luminance"
            else bitmaps.RasterMaskStrategy()
        )
        background = Color.from_hex(args.background) if args.background else None
        return bitmaps.create_color_mask(
            img, mask, mask_strategy=strategy, background=background
        )
    return bitmaps.create_transparency_mask(img)


def _run_bitmap(args: argparse.Namespace) -> None:
    with Image.open(args.input) as img:
        img.load()
        if args.mask:
            with Image.open(args.mask) as mask:
                mask.load()
                bmp = _build_bitmap(args, img, mask)
        else:
            bmp = _build_bitmap(args, img)
    with bmp:
        bmp.to_image().save(args.output)
        logging.info(
            "wrote %s %dx%d to %s",
            bmp.pixel_format.name,
            bmp.width,
            bmp.height,
            args.output,
        )


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )

    errs = validate_args(args)
    if errs:
        for e in errs:
            print(f"validation error: {e}", file=sys.stderr)
        raise SystemExit(1)
    if args.validate:
        return

    if args.color:
        _run_shade(args)
        return
    try:
        _run_bitmap(args)
    except OSError as e:
        raise SystemExit(f"failed to convert {args.input}: {e}") from e


if __name__ == "__main__":  # pragma: no cover
    main()
