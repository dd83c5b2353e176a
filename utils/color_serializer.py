"""
Color serializer for ComfyTint.

Writes a CanonicalColor back out in one of the ColorFormat families.
All percentage and hex conversions round half-up to the nearest integer.
"""

import colorsys

from .color_types import CanonicalColor, ColorFormat, ColorState, round_half_up


def format_alpha(alpha: float) -> str:
    """Alpha rounded to 2 decimals, no trailing zeros (0.5, 0.27, 0)."""
    return f"{round_half_up(alpha * 100) / 100:g}"


def to_hex(color: CanonicalColor) -> str:
    return f"#{color.r:02x}{color.g:02x}{color.b:02x}"


def to_hex8(color: CanonicalColor) -> str:
    return f"{to_hex(color)}{round_half_up(color.a * 255):02x}"


def to_rgb(color: CanonicalColor) -> str:
    if color.is_opaque:
        return f"rgb({color.r}, {color.g}, {color.b})"
    return f"rgba({color.r}, {color.g}, {color.b}, {format_alpha(color.a)})"


def to_percentage_rgb(color: CanonicalColor) -> str:
    r, g, b = (round_half_up(c * 100 / 255) for c in color.rgb)
    if color.is_opaque:
        return f"rgb({r}%, {g}%, {b}%)"
    return f"rgba({r}%, {g}%, {b}%, {format_alpha(color.a)})"


def rgb_to_hsl(color: CanonicalColor) -> tuple[int, int, int]:
    """
    Convert to rounded HSL.

    Returns:
        (hue 0-359, saturation %, lightness %)
    """
    h, l, s = colorsys.rgb_to_hls(color.r / 255, color.g / 255, color.b / 255)
    return (round_half_up(h * 360) % 360, round_half_up(s * 100), round_half_up(l * 100))


def to_hsl(color: CanonicalColor) -> str:
    h, s, l = rgb_to_hsl(color)
    if color.is_opaque:
        return f"hsl({h}, {s}%, {l}%)"
    return f"hsla({h}, {s}%, {l}%, {format_alpha(color.a)})"


def to_hex_or_rgb(color: CanonicalColor) -> str:
    # Plain hex cannot carry alpha
    return to_hex(color) if color.is_opaque else to_rgb(color)


SERIALIZERS = {
    ColorFormat.HEX: to_hex_or_rgb,
    ColorFormat.HEX8: to_hex8,
    ColorFormat.HSL: to_hsl,
    ColorFormat.PRGB: to_percentage_rgb,
    ColorFormat.RGB: to_rgb,
}


def serialize_color(color: CanonicalColor, fmt: ColorFormat = ColorFormat.HEX) -> str:
    """
    Serialize a canonical color in the given format.

    Args:
        color: Canonical color
        fmt: ColorFormat (or its tag string); unknown tags use hex

    Returns:
        Color string, e.g. "#ff0000", "rgba(0, 255, 0, 0.5)", "hsl(210, 50%, 8%)"
    """
    if not isinstance(fmt, ColorFormat):
        fmt = ColorFormat.from_name(fmt)
    return SERIALIZERS[fmt](color)


def serialize_state(state: ColorState) -> str:
    return serialize_color(state.color, state.format)
