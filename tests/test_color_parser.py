"""Tests for color input detection and parsing."""

import pytest

from comfytint.utils.color_parser import InputKind, classify_color, parse_color
from comfytint.utils.color_types import (
    CanonicalColor,
    ColorFormat,
    ColorState,
    DEFAULT_STATE,
    clamp_alpha,
)


@pytest.mark.parametrize(
    "value, rgb, fmt",
    [
        ("#ff0000", (255, 0, 0), ColorFormat.HEX),
        ("#F00", (255, 0, 0), ColorFormat.HEX),
        ("00ff00", (0, 255, 0), ColorFormat.HEX),
        ("  #0000FF  ", (0, 0, 255), ColorFormat.HEX),
        ("rgb(10, 20, 30)", (10, 20, 30), ColorFormat.RGB),
        ("rgb(10 20 30)", (10, 20, 30), ColorFormat.RGB),
        ("RGB(10,20,30)", (10, 20, 30), ColorFormat.RGB),
        ("rgb(100%, 0%, 50%)", (255, 0, 128), ColorFormat.PRGB),
        ("hsl(0, 100%, 50%)", (255, 0, 0), ColorFormat.HSL),
        ("hsl(120, 100%, 25%)", (0, 128, 0), ColorFormat.HSL),
        ("hsv(240, 100%, 100%)", (0, 0, 255), ColorFormat.HEX),
        ("red", (255, 0, 0), ColorFormat.HEX),
        ("Orange", (255, 165, 0), ColorFormat.HEX),
    ],
)
def test_parse_detects_format_and_channels(value, rgb, fmt) -> None:
    state = parse_color(value)

    assert state.color.rgb == rgb
    assert state.color.a == 1.0
    assert state.format is fmt


def test_parse_rgba_keeps_alpha() -> None:
    state = parse_color("rgba(0,255,0,0.5)")

    assert state == ColorState(CanonicalColor(0, 255, 0, 0.5), ColorFormat.RGB)


def test_parse_hsla_and_slash_alpha() -> None:
    assert parse_color("hsla(0, 100%, 50%, 0.25)").color.a == 0.25
    assert parse_color("rgb(1 2 3 / 40%)").color.a == pytest.approx(0.4)


def test_parse_hex8() -> None:
    state = parse_color("#11223344")

    assert state.format is ColorFormat.HEX8
    assert state.color.rgb == (17, 34, 51)
    assert state.color.a == pytest.approx(0.267, abs=1e-3)


def test_parse_short_hex_with_alpha_is_hex8() -> None:
    state = parse_color("#f008")

    assert state.format is ColorFormat.HEX8
    assert state.color.rgb == (255, 0, 0)
    assert state.color.a == pytest.approx(0x88 / 255)


def test_parse_transparent() -> None:
    state = parse_color("transparent")

    assert state.color == CanonicalColor(0, 0, 0, 0.0)
    assert state.format is ColorFormat.HEX


def test_parse_clamps_out_of_range_values() -> None:
    state = parse_color("rgba(300, -20, 128, 1.5)")

    assert state.color == CanonicalColor(255, 0, 128, 1.0)
    assert parse_color("rgba(0, 0, 0, -1)").color.a == 0.0


@pytest.mark.parametrize(
    "value, rgb, fmt",
    [
        ({"r": 10, "g": 20, "b": 30}, (10, 20, 30), ColorFormat.RGB),
        ({"r": "50%", "g": "0%", "b": "100%"}, (128, 0, 255), ColorFormat.PRGB),
        ({"h": 0, "s": 1, "l": 0.5}, (255, 0, 0), ColorFormat.HSL),
        ({"h": 0, "s": "100%", "l": "50%"}, (255, 0, 0), ColorFormat.HSL),
        ({"h": 120, "s": 1, "v": 1}, (0, 255, 0), ColorFormat.HEX),
        ({"R": 1, "G": 2, "B": 3}, (1, 2, 3), ColorFormat.RGB),
    ],
)
def test_parse_structured_values(value, rgb, fmt) -> None:
    state = parse_color(value)

    assert state.color.rgb == rgb
    assert state.format is fmt


def test_parse_structured_alpha() -> None:
    assert parse_color({"r": 1, "g": 2, "b": 3, "a": 0.3}).color.a == pytest.approx(0.3)
    assert parse_color({"r": 1, "g": 2, "b": 3, "a": None}).color.a == 1.0


def test_parse_canonical_color_instance() -> None:
    color = CanonicalColor(1, 2, 3, 0.5)

    assert parse_color(color) == ColorState(color, ColorFormat.RGB)


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "not-a-color",
        "#12345",
        "rgb(1, 2)",
        "hsl(a, b, c)",
        {"x": 1},
        {"r": "red", "g": 0, "b": 0},
        {"r": 1, "g": 2, "b": 3, "a": "opaque"},
        42,
        [255, 0, 0],
        True,
    ],
)
def test_parse_invalid_input_defaults_to_black_hex(value) -> None:
    assert parse_color(value) == DEFAULT_STATE
    assert DEFAULT_STATE == ColorState(CanonicalColor(0, 0, 0, 1.0), ColorFormat.HEX)


def test_classify_uses_syntax_not_content() -> None:
    # Same color, different shapes
    assert classify_color("#000000").kind is InputKind.HEX
    assert classify_color("rgb(0, 0, 0)").kind is InputKind.RGB
    assert classify_color("rgb(0%, 0%, 0%)").kind is InputKind.PRGB
    assert classify_color("hsl(0, 0%, 0%)").kind is InputKind.HSL
    assert classify_color({"h": 0, "s": 0, "l": 0}).kind is InputKind.HSL_OBJECT
    assert classify_color("black").kind is InputKind.NAME
    assert classify_color("nope") is None


@pytest.mark.parametrize(
    "value, expected",
    [(0.25, 0.25), (-1, 0.0), (2, 1.0), (float("nan"), 1.0), (float("inf"), 1.0)],
)
def test_clamp_alpha(value, expected) -> None:
    assert clamp_alpha(value) == expected


def test_format_from_name() -> None:
    assert ColorFormat.from_name(" HSL ") is ColorFormat.HSL
    assert ColorFormat.from_name("cmyk") is ColorFormat.HEX
    assert ColorFormat.from_name("cmyk", ColorFormat.RGB) is ColorFormat.RGB
