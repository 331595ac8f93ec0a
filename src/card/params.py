"""
Resolve raw query parameters into a fully defaulted LayoutConfig.

Every numeric and text field has one entry in the default tables below; the
drawing code never looks at the raw request.
"""
import math
from typing import Dict, Mapping, Optional, Tuple

from src.specs.functions.generate_card_spec import LayoutConfig, OrnamentSpec, RowText


FALLBACK_CANVAS_SIZE: Tuple[int, int] = (1530, 383)

NUMERIC_DEFAULTS: Dict[str, float] = {
    "labelX": 300,
    "valueX": 520,
    "barY": 90,
    "barH": 48,
    "barGap": 14,
    "labelW": 190,
    "valueW": 650,
    "radius": 24,
    "labelSize": 24,
    "valueSize": 24,
    "labelWeight": 700,
    "valueWeight": 600,
    "circleX": 40,
    "circleY": 95,
    "circleSize": 180,
    "squareX": 1260,
    "squareY": 95,
    "squareSize": 170,
    "strokeW": 4,
}

COLOR_DEFAULTS: Dict[str, str] = {
    "labelBg": "#2b3360",
    "valueBg": "#000000",
    "labelColor": "#ffffff",
    "valueColor": "#ffffff",
    "circleFill": "#333333",
    "circleStroke": "#111111",
    "squareFill": "#333333",
    "squareStroke": "#111111",
}

DEFAULT_FONT_FAMILY = "Open Sans"
GENERIC_FONT_FALLBACK = "sans-serif"

LABEL_DEFAULTS: Tuple[str, ...] = ("PLAYER", "FISH", "WEIGHT", "MUTATION")

# (primary key, alias key, literal default) per row; the primary key wins
VALUE_FALLBACKS: Tuple[Tuple[str, str, str], ...] = (
    ("v1", "player", "Big Frostborn Sharks"),
    ("v2", "fish", "Shark Megalodon BIG"),
    ("v3", "weight", "WEIGHT"),
    ("v4", "mutation", "MUTATION"),
)


def parse_number(query: Mapping[str, Optional[str]], key: str, fallback: float) -> float:
    raw = query.get(key)
    text = "" if raw is None else str(raw).strip()
    # float() accepts digit separators, a plain numeric literal does not
    if not text or "_" in text:
        return fallback
    try:
        value = float(text)
    except ValueError:
        return fallback
    return value if math.isfinite(value) else fallback


def parse_str(query: Mapping[str, Optional[str]], key: str, fallback: str) -> str:
    raw = query.get(key)
    return raw if isinstance(raw, str) and raw else fallback


def normalize_color(raw: str) -> str:
    return raw if raw.startswith("#") else f"#{raw}"


def parse_color(query: Mapping[str, Optional[str]], key: str) -> str:
    raw = parse_str(query, key, "")
    if not raw:
        return COLOR_DEFAULTS[key]
    return normalize_color(raw)


def font_family_chain(raw: str) -> str:
    if "," in raw or GENERIC_FONT_FALLBACK in raw:
        return raw
    return f"{raw}, {GENERIC_FONT_FALLBACK}"


def _num(query: Mapping[str, Optional[str]], key: str) -> float:
    return parse_number(query, key, NUMERIC_DEFAULTS[key])


def resolve_rows(query: Mapping[str, Optional[str]]) -> Tuple[RowText, RowText, RowText, RowText]:
    rows = []
    for index, (primary, alias, literal) in enumerate(VALUE_FALLBACKS):
        label = parse_str(query, f"l{index + 1}", LABEL_DEFAULTS[index])
        value = parse_str(query, primary, parse_str(query, alias, literal))
        rows.append(RowText(label=label, value=value))
    return tuple(rows)  # type: ignore[return-value]


def resolve_layout(
    query: Mapping[str, Optional[str]],
    background_size: Optional[Tuple[int, int]] = None,
) -> LayoutConfig:
    """Build the LayoutConfig for one request.

    ``background_size`` is the pixel size of the background that will be
    drawn; it supplies the canvas defaults when ``w``/``h`` are omitted.
    Unparsable numbers fall back to their defaults; this never raises for
    string input.
    """
    bg_w, bg_h = background_size or (0, 0)
    default_w = bg_w or FALLBACK_CANVAS_SIZE[0]
    default_h = bg_h or FALLBACK_CANVAS_SIZE[1]

    stroke_width = _num(query, "strokeW")
    circle = OrnamentSpec(
        x=_num(query, "circleX"),
        y=_num(query, "circleY"),
        size=_num(query, "circleSize"),
        fill=parse_color(query, "circleFill"),
        stroke=parse_color(query, "circleStroke"),
    )
    square = OrnamentSpec(
        x=_num(query, "squareX"),
        y=_num(query, "squareY"),
        size=_num(query, "squareSize"),
        fill=parse_color(query, "squareFill"),
        stroke=parse_color(query, "squareStroke"),
    )

    return LayoutConfig(
        width=int(parse_number(query, "w", default_w)),
        height=int(parse_number(query, "h", default_h)),
        label_x=_num(query, "labelX"),
        value_x=_num(query, "valueX"),
        bar_y=_num(query, "barY"),
        bar_height=_num(query, "barH"),
        bar_gap=_num(query, "barGap"),
        label_width=_num(query, "labelW"),
        value_width=_num(query, "valueW"),
        radius=_num(query, "radius"),
        label_bg=parse_color(query, "labelBg"),
        value_bg=parse_color(query, "valueBg"),
        label_color=parse_color(query, "labelColor"),
        value_color=parse_color(query, "valueColor"),
        font_family=font_family_chain(parse_str(query, "font", DEFAULT_FONT_FAMILY)),
        label_size=_num(query, "labelSize"),
        value_size=_num(query, "valueSize"),
        label_weight=_num(query, "labelWeight"),
        value_weight=_num(query, "valueWeight"),
        rows=resolve_rows(query),
        circle=circle,
        square=square,
        stroke_width=stroke_width,
        background_url=parse_str(query, "bg", ""),
        circle_url=parse_str(query, "circleUrl", ""),
        square_url=parse_str(query, "squareUrl", ""),
        download=parse_str(query, "download", "") == "1",
    )


def image_sources(query: Mapping[str, Optional[str]]) -> Tuple[str, str, str]:
    """Return the (background, circle, square) image sources of a request."""
    return (
        parse_str(query, "bg", ""),
        parse_str(query, "circleUrl", ""),
        parse_str(query, "squareUrl", ""),
    )
