import math

import pytest

from src.media.geometry import clamp_radius, pixel_box, rounded_rect_path, square_box, stroke_box


@pytest.mark.parametrize(
    "w,h,r,expected",
    [
        (190, 48, 24, 24),
        (190, 48, 100, 24),
        (30, 48, 100, 15),
        (190, 48, -3, 0),
        (190, 48, 0, 0),
    ],
)
def test_radius_is_clamped(w, h, r, expected):
    rect = rounded_rect_path(10, 20, w, h, r)
    assert rect is not None
    assert rect.radius == expected


@pytest.mark.parametrize("w", [1, 3, 17, 48, 190, 650])
@pytest.mark.parametrize("h", [1, 5, 48, 100])
@pytest.mark.parametrize("r", [0, 2, 24, 60, 1000])
def test_radius_never_exceeds_half_shorter_side(w, h, r):
    rect = rounded_rect_path(0, 0, w, h, r)
    assert 2 * rect.radius <= min(w, h)


@pytest.mark.parametrize(
    "args",
    [
        (0, 0, 0, 48, 24),
        (0, 0, 190, -1, 24),
        (math.nan, 0, 190, 48, 24),
        (0, 0, math.inf, 48, 24),
        (0, 0, 190, 48, math.nan),
    ],
)
def test_degenerate_rects_produce_no_path(args):
    assert rounded_rect_path(*args) is None


def test_box_covers_exact_pixels():
    assert pixel_box(300, 90, 190, 48) == (300, 90, 489, 137)
    assert rounded_rect_path(300, 90, 190, 48, 24).box == (300, 90, 489, 137)


def test_square_box():
    assert square_box(40, 95, 180) == (40, 95, 219, 274)
    assert square_box(40, 95, 0) is None
    assert square_box(40, math.nan, 10) is None


def test_stroke_box_straddles_edge():
    assert stroke_box((40, 95, 219, 274), 4) == (38, 93, 221, 276)


def test_clamp_radius_never_negative():
    assert clamp_radius(-10, 5, 5) == 0
