"""
Parameter resolution tests.
"""
import math

import pytest

from src.card.params import (
    COLOR_DEFAULTS,
    NUMERIC_DEFAULTS,
    image_sources,
    normalize_color,
    parse_number,
    resolve_layout,
)


def test_empty_query_uses_defaults():
    config = resolve_layout({}, background_size=(800, 200))

    assert (config.width, config.height) == (800, 200)
    assert config.bar_y == 90
    assert config.bar_height == 48
    assert config.bar_gap == 14
    assert config.radius == 24
    assert [r.label for r in config.rows] == ["PLAYER", "FISH", "WEIGHT", "MUTATION"]
    assert [r.value for r in config.rows] == ["Big Frostborn Sharks", "Shark Megalodon BIG", "WEIGHT", "MUTATION"]
    assert config.label_bg == "#2b3360"
    assert config.font_family == "Open Sans, sans-serif"
    assert config.label_weight == 700
    assert config.value_weight == 600
    assert config.download is False


def test_default_row_positions():
    config = resolve_layout({})
    assert [config.row_top(i) for i in range(4)] == [90, 152, 214, 276]


def test_canvas_falls_back_to_fixed_size_without_background_size():
    config = resolve_layout({}, background_size=(0, 0))
    assert (config.width, config.height) == (1530, 383)


def test_explicit_canvas_size_wins_over_background():
    config = resolve_layout({"w": "640.7", "h": "320"}, background_size=(800, 200))
    assert (config.width, config.height) == (640, 320)


@pytest.mark.parametrize("raw", ["abc", "", "   ", "nan", "inf", "-inf", "1e999", "1_000", " 4_8 "])
def test_malformed_numbers_fall_back(raw):
    config = resolve_layout({"barH": raw})
    assert config.bar_height == 48


def test_out_of_range_numbers_pass_through():
    config = resolve_layout({"barGap": "-5", "labelX": "1e12", "radius": "400"})
    assert config.bar_gap == -5
    assert config.label_x == 1e12
    assert config.radius == 400


def test_defaulted_numeric_fields_are_finite_and_non_negative():
    config = resolve_layout({key: "garbage" for key in NUMERIC_DEFAULTS})
    for key, default in NUMERIC_DEFAULTS.items():
        assert parse_number({key: "garbage"}, key, default) == default
    values = [config.label_x, config.value_x, config.bar_y, config.bar_height, config.bar_gap,
              config.label_width, config.value_width, config.radius, config.stroke_width,
              config.circle.size, config.square.size]
    assert all(math.isfinite(v) and v >= 0 for v in values)


def test_color_prefix_is_idempotent():
    assert normalize_color("ff0000") == normalize_color("#ff0000") == "#ff0000"
    config = resolve_layout({"labelBg": "ff0000", "valueBg": "#ff0000"})
    assert config.label_bg == config.value_bg == "#ff0000"


def test_invalid_colors_are_passed_through():
    config = resolve_layout({"circleFill": "not-a-color"})
    assert config.circle.fill == "#not-a-color"


def test_empty_color_uses_default():
    config = resolve_layout({"squareStroke": ""})
    assert config.square.stroke == COLOR_DEFAULTS["squareStroke"]


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Roboto", "Roboto, sans-serif"),
        ("Roboto, Arial", "Roboto, Arial"),
        ("sans-serif", "sans-serif"),
    ],
)
def test_font_family_chain(raw, expected):
    assert resolve_layout({"font": raw}).font_family == expected


def test_value_precedence_prefers_numbered_key():
    config = resolve_layout({"v1": "Alpha", "player": "Beta", "fish": "Gamma"})
    assert config.rows[0].value == "Alpha"
    assert config.rows[1].value == "Gamma"


def test_empty_numbered_value_uses_alias():
    config = resolve_layout({"v3": "", "weight": "12 kg", "l3": "MASS"})
    assert config.rows[2].label == "MASS"
    assert config.rows[2].value == "12 kg"


@pytest.mark.parametrize("raw,expected", [("1", True), ("0", False), ("true", False), (None, False)])
def test_download_flag(raw, expected):
    query = {} if raw is None else {"download": raw}
    assert resolve_layout(query).download is expected


def test_image_sources():
    assert image_sources({"bg": "a.png", "circleUrl": "", "squareUrl": "http://x/s.png"}) == ("a.png", "", "http://x/s.png")
