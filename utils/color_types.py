"""
Color value types shared by the parser, serializer and state bridge.

All formats convert to and from CanonicalColor:
- r, g, b: int 0-255
- a: float 0.0-1.0
"""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional


class ColorFormat(str, Enum):
    """Textual representation family a color is read back in."""

    HEX = "hex"
    HEX8 = "hex8"
    HSL = "hsl"
    PRGB = "prgb"
    RGB = "rgb"

    @classmethod
    def from_name(cls, name, default: Optional["ColorFormat"] = None) -> "ColorFormat":
        """Look up a format by its tag ("hex", "rgb", ...), case-insensitive."""
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            return cls.HEX if default is None else default


def clamp_channel(value: float) -> int:
    """Round half-up and clamp to 0-255."""
    value = int(round_half_up(float(value)))
    return 0 if value < 0 else 255 if value > 255 else value


def clamp_alpha(value: float) -> float:
    """Clamp to 0.0-1.0. NaN counts as fully opaque."""
    value = float(value)
    if math.isnan(value):
        return 1.0
    return 0.0 if value < 0.0 else 1.0 if value > 1.0 else value


def round_half_up(value: float) -> int:
    """Round to nearest integer, .5 away from zero (not banker's rounding)."""
    if value < 0:
        return -int(-value + 0.5)
    return int(value + 0.5)


@dataclass(frozen=True)
class CanonicalColor:
    """Normalized RGBA color. Always in range, use parse_color() to build from raw input."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "r", clamp_channel(self.r))
        object.__setattr__(self, "g", clamp_channel(self.g))
        object.__setattr__(self, "b", clamp_channel(self.b))
        object.__setattr__(self, "a", clamp_alpha(self.a))

    @property
    def rgb(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    @property
    def is_opaque(self) -> bool:
        return self.a == 1.0

    def with_rgb(self, r: int, g: int, b: int) -> "CanonicalColor":
        """Copy with new channels, alpha kept."""
        return replace(self, r=r, g=g, b=b)

    def to_dict(self) -> dict:
        return {"r": self.r, "g": self.g, "b": self.b, "a": self.a}


@dataclass(frozen=True)
class ColorState:
    """Current color plus the format it is read back in."""

    color: CanonicalColor
    format: ColorFormat = ColorFormat.HEX

    def to_dict(self) -> dict:
        return {"color": self.color.to_dict(), "format": self.format.value}


DEFAULT_COLOR = CanonicalColor(0, 0, 0, 1.0)
DEFAULT_FORMAT = ColorFormat.HEX
DEFAULT_STATE = ColorState(DEFAULT_COLOR, DEFAULT_FORMAT)
