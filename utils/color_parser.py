"""
Color parser for ComfyTint.

Turns any supported input into a ColorState (canonical color + format tag).

Supported shapes:
- Hex strings: #rgb, #rrggbb (hex), #rgba, #rrggbbaa (hex8), "#" optional
- rgb()/rgba() strings, with numbers (rgb) or percentages (prgb)
- hsl()/hsla() and hsv()/hsva() strings
- CSS color names (via webcolors) and "transparent"
- Mappings with r/g/b[/a], h/s/l[/a] or h/s/v[/a] keys
- CanonicalColor instances

Never raises: anything else becomes opaque black in hex format.
"""

import colorsys
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import webcolors

from .color_types import (
    CanonicalColor,
    ColorFormat,
    ColorState,
    DEFAULT_STATE,
)


class InputKind(str, Enum):
    """Closed set of input shapes the parser understands."""

    HEX = "hex"
    HEX8 = "hex8"
    RGB = "rgb"
    PRGB = "prgb"
    HSL = "hsl"
    HSV = "hsv"
    NAME = "name"
    RGB_OBJECT = "rgb_object"
    PRGB_OBJECT = "prgb_object"
    HSL_OBJECT = "hsl_object"
    HSV_OBJECT = "hsv_object"


# Shapes without a format of their own read back as hex
FORMAT_BY_KIND = {
    InputKind.HEX: ColorFormat.HEX,
    InputKind.HEX8: ColorFormat.HEX8,
    InputKind.RGB: ColorFormat.RGB,
    InputKind.PRGB: ColorFormat.PRGB,
    InputKind.HSL: ColorFormat.HSL,
    InputKind.HSV: ColorFormat.HEX,
    InputKind.NAME: ColorFormat.HEX,
    InputKind.RGB_OBJECT: ColorFormat.RGB,
    InputKind.PRGB_OBJECT: ColorFormat.PRGB,
    InputKind.HSL_OBJECT: ColorFormat.HSL,
    InputKind.HSV_OBJECT: ColorFormat.HEX,
}


@dataclass(frozen=True)
class ColorInput:
    """
    A classified color input.

    values holds the raw channel tokens in the order of the shape
    (r, g, b / h, s, l / h, s, v), alpha the raw alpha token or None.
    """

    kind: InputKind
    values: tuple
    alpha: Any = None

    @property
    def format(self) -> ColorFormat:
        return FORMAT_BY_KIND[self.kind]


NUMBER = r"[-+]?(?:\d+(?:\.\d+)?|\.\d+)%?"
SEPARATOR = r"(?:\s*,\s*|\s+)"
ALPHA_SEPARATOR = r"(?:\s*,\s*|\s*/\s*|\s+)"

HEX_RE = re.compile(r"^#?([0-9a-f]{3}|[0-9a-f]{4}|[0-9a-f]{6}|[0-9a-f]{8})$")
FUNCTION_RE = re.compile(
    rf"^(rgba?|hsla?|hsva?)\s*\(\s*({NUMBER}){SEPARATOR}({NUMBER}){SEPARATOR}({NUMBER})"
    rf"(?:{ALPHA_SEPARATOR}({NUMBER}))?\s*\)$"
)


def _parse_number(token) -> Optional[tuple[float, bool]]:
    """Return (value, is_percent) for a number or numeric string, None if not numeric."""
    if isinstance(token, bool):
        return None
    if isinstance(token, (int, float)):
        try:
            value = float(token)
        except OverflowError:
            return None
        return (value, False) if math.isfinite(value) else None
    if not isinstance(token, str):
        return None

    text = token.strip()
    is_percent = text.endswith("%")
    if is_percent:
        text = text[:-1].strip()
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value, is_percent


def _is_percent(token) -> bool:
    return isinstance(token, str) and token.strip().endswith("%")


def classify_color(value) -> Optional[ColorInput]:
    """
    Detect which shape a raw input has, from its syntax only.

    Returns:
        ColorInput, or None when the input is not a recognizable color
    """
    if isinstance(value, CanonicalColor):
        return ColorInput(InputKind.RGB_OBJECT, value.rgb, value.a)

    if isinstance(value, Mapping):
        return _classify_mapping(value)

    if isinstance(value, str):
        return _classify_string(value)

    return None


def _classify_mapping(value: Mapping) -> Optional[ColorInput]:
    keys = {str(k).lower(): v for k, v in value.items()}
    alpha = keys.get("a")

    if all(k in keys for k in ("r", "g", "b")):
        kind = InputKind.PRGB_OBJECT if _is_percent(keys["r"]) else InputKind.RGB_OBJECT
        return ColorInput(kind, (keys["r"], keys["g"], keys["b"]), alpha)
    if all(k in keys for k in ("h", "s", "l")):
        return ColorInput(InputKind.HSL_OBJECT, (keys["h"], keys["s"], keys["l"]), alpha)
    if all(k in keys for k in ("h", "s", "v")):
        return ColorInput(InputKind.HSV_OBJECT, (keys["h"], keys["s"], keys["v"]), alpha)
    return None


def _classify_string(value: str) -> Optional[ColorInput]:
    text = value.strip().lower()
    if not text:
        return None

    if text == "transparent":
        return ColorInput(InputKind.NAME, (0, 0, 0), 0)

    match = HEX_RE.match(text)
    if match:
        digits = match.group(1)
        if len(digits) in (3, 4):
            digits = "".join(c * 2 for c in digits)
        channels = tuple(int(digits[i:i + 2], 16) for i in (0, 2, 4))
        if len(digits) == 8:
            return ColorInput(InputKind.HEX8, channels, int(digits[6:8], 16) / 255)
        return ColorInput(InputKind.HEX, channels)

    match = FUNCTION_RE.match(text)
    if match:
        name, first, second, third, alpha = match.groups()
        values = (first, second, third)
        if name.startswith("rgb"):
            kind = InputKind.PRGB if _is_percent(first) else InputKind.RGB
        elif name.startswith("hsl"):
            kind = InputKind.HSL
        else:
            kind = InputKind.HSV
        return ColorInput(kind, values, alpha)

    try:
        rgb = webcolors.name_to_rgb(text)
    except ValueError:
        return None
    return ColorInput(InputKind.NAME, (rgb.red, rgb.green, rgb.blue))


def _channel(token) -> Optional[float]:
    parsed = _parse_number(token)
    if parsed is None:
        return None
    value, is_percent = parsed
    return value * 255 / 100 if is_percent else value


def _fraction(token) -> Optional[float]:
    """Saturation/lightness/value as 0-1. Bare numbers above 1 are percentages."""
    parsed = _parse_number(token)
    if parsed is None:
        return None
    value, is_percent = parsed
    if is_percent or value > 1:
        value = value / 100
    return min(1.0, max(0.0, value))


def _hue(token) -> Optional[float]:
    """Hue as 0-1 of a turn. Percent hues are a share of 360 degrees."""
    parsed = _parse_number(token)
    if parsed is None:
        return None
    value, is_percent = parsed
    degrees = value * 360 / 100 if is_percent else value
    return (degrees % 360) / 360


def _alpha(token) -> Optional[float]:
    if token is None:
        return 1.0
    parsed = _parse_number(token)
    if parsed is None:
        return None
    value, is_percent = parsed
    return value / 100 if is_percent else value


def to_canonical(color_input: ColorInput) -> Optional[CanonicalColor]:
    """Convert a classified input to a CanonicalColor, None if a token is not numeric."""
    alpha = _alpha(color_input.alpha)
    if alpha is None:
        return None

    kind = color_input.kind
    if kind in (InputKind.HSL, InputKind.HSL_OBJECT, InputKind.HSV, InputKind.HSV_OBJECT):
        first, second, third = color_input.values
        h, s, x = _hue(first), _fraction(second), _fraction(third)
        if h is None or s is None or x is None:
            return None
        if kind in (InputKind.HSL, InputKind.HSL_OBJECT):
            r, g, b = colorsys.hls_to_rgb(h, x, s)
        else:
            r, g, b = colorsys.hsv_to_rgb(h, s, x)
        return CanonicalColor(r * 255, g * 255, b * 255, alpha)

    channels = [_channel(token) for token in color_input.values]
    if any(c is None for c in channels):
        return None
    return CanonicalColor(channels[0], channels[1], channels[2], alpha)


def parse_color(value) -> ColorState:
    """
    Parse any supported color input.

    Args:
        value: Color string, mapping, CanonicalColor, or None

    Returns:
        ColorState with the clamped canonical color and the detected format.
        Unrecognized input gives opaque black in hex format.
    """
    color_input = classify_color(value)
    if color_input is None:
        return DEFAULT_STATE

    color = to_canonical(color_input)
    if color is None:
        return DEFAULT_STATE

    return ColorState(color, color_input.format)
