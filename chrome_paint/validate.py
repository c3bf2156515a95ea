"""Argument validation helpers for the chrome_paint CLI."""
from __future__ import annotations

import math
from argparse import Namespace
from typing import List

from .color import Color

MAX_ABS_PERCENT = 10.0


def _check_color(flag: str, value: str | None, errors: List[str]) -> None:
    if value is None:
        return
    try:
        Color.from_hex(value)
    except ValueError:
        errors.append(f"{flag} {value!r} is not #RRGGBB or #AARRGGBB")


def validate_args(args: Namespace) -> List[str]:
    """Validate parsed CLI arguments.

    Returns a list of human readable error messages. The caller should abort
    if the list is non-empty.
    """
    errors: List[str] = []
    if not args.color and not args.input:
        errors.append("nothing to do: pass --color or --input")
    if args.color and args.input:
        errors.append("conflict: --color with --input")

    _check_color("--color", args.color, errors)
    _check_color("--background", args.background, errors)

    if args.percent is not None:
        if not math.isfinite(args.percent):
            errors.append("--percent must be finite")
        elif abs(args.percent) > MAX_ABS_PERCENT:
            errors.append(f"--percent out of range [-{MAX_ABS_PERCENT}, {MAX_ABS_PERCENT}]")
        if args.shade in ("light-light", "dark-dark", "is-dark"):
            errors.append(f"--percent has no effect with --shade {args.shade}")

    if args.input and not args.output:
        errors.append("--output is required with --input")
    if args.mask and args.kind != "color-mask":
        errors.append("--mask only applies to --kind color-mask")
    return errors
