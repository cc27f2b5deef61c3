"""
Pure colour and unit transforms.

Host documents store colour channels as fractions in 0-1. Everything the
extraction layer emits uses 8-bit channels and ``#RRGGBB`` hex strings.
"""

from __future__ import annotations

import math
from typing import Any

from .ir.document import (
    RGBA,
    LetterSpacing,
    LineHeight,
    VariableAlias,
    VariableType,
)
from .ir.records import LetterSpacingRecord, LineHeightRecord, RGBColor
from .ir.values import (
    BooleanValue,
    ColorValue,
    NumberValue,
    StringValue,
    TerminalValue,
)


def channel_to_byte(value: float) -> int:
    """Convert a 0-1 colour channel to a 0-255 integer, rounding halves up."""
    return math.floor(value * 255 + 0.5)


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Format fractional channels as an uppercase ``#RRGGBB`` string."""
    return "#" + "".join(f"{channel_to_byte(c):02X}" for c in (r, g, b))


def round_alpha(alpha: float | None) -> float:
    """Alpha rounded to four decimals; absent alpha is fully opaque."""
    if alpha is None:
        return 1
    return round(alpha, 4)


def color_record(color: RGBA, alpha: float | None = None) -> RGBColor:
    """Build an 8-bit colour record.

    Args:
        color: Fractional colour from the host.
        alpha: Explicit alpha (paint opacity); falls back to ``color.a``.
    """
    a = alpha if alpha is not None else color.a
    return RGBColor(
        hex=rgb_to_hex(color.r, color.g, color.b),
        r=channel_to_byte(color.r),
        g=channel_to_byte(color.g),
        b=channel_to_byte(color.b),
        a=a if a is not None else 1,
    )


def color_value(color: RGBA) -> ColorValue:
    """Convert a raw variable colour into a resolved colour value."""
    return ColorValue(
        hex=rgb_to_hex(color.r, color.g, color.b),
        r=channel_to_byte(color.r),
        g=channel_to_byte(color.g),
        b=channel_to_byte(color.b),
        a=round_alpha(color.a),
    )


def to_terminal(declared: VariableType, raw: Any) -> TerminalValue | None:
    """Convert a concrete raw value according to the variable's declared type.

    Returns None when the raw value does not fit the declared type, which
    callers treat as an unsupported shape.
    """
    if raw is None or isinstance(raw, VariableAlias):
        return None
    if declared == VariableType.COLOR:
        if isinstance(raw, RGBA):
            return color_value(raw)
        return None
    if declared == VariableType.FLOAT:
        if isinstance(raw, bool) or not isinstance(raw, int | float):
            return None
        return NumberValue(value=raw)
    if declared == VariableType.STRING:
        if not isinstance(raw, str):
            return None
        return StringValue(value=raw)
    if declared == VariableType.BOOLEAN:
        if not isinstance(raw, bool):
            return None
        return BooleanValue(value=raw)
    return None


def normalize_line_height(line_height: LineHeight | None) -> LineHeightRecord:
    """Line height as value + unit; AUTO carries no value."""
    if line_height is None or line_height.unit == "AUTO":
        return LineHeightRecord(unit="AUTO")
    return LineHeightRecord(value=line_height.value, unit=line_height.unit)


def normalize_letter_spacing(letter_spacing: LetterSpacing | None) -> LetterSpacingRecord:
    """Letter spacing as value + unit; absent spacing is zero pixels."""
    if letter_spacing is None:
        return LetterSpacingRecord(value=0, unit="PIXELS")
    return LetterSpacingRecord(value=letter_spacing.value, unit=letter_spacing.unit)


def percent_to_em(value: float) -> float:
    """Convert a PERCENT letter spacing or line height to an em multiple."""
    return round(value / 100, 4)
