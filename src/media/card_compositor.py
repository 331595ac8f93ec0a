from typing import Callable, Optional, Tuple

from PIL import Image, ImageChops, ImageColor, ImageDraw, ImageFont

from src.card.params import COLOR_DEFAULTS
from src.media.fonts import get_font
from src.media.geometry import Box, rounded_rect_path, square_box, stroke_box
from src.media.image_loader import CardAssets
from src.shared.logging_utils import warning as log_warning
from src.specs.common.errors import RenderError
from src.specs.functions.generate_card_spec import LayoutConfig


RGBA = Tuple[int, ...]


def _paint(value: str, key: str, request_id: Optional[str]) -> RGBA:
    """Parse a color; an unparsable one falls back to the field default."""
    try:
        return ImageColor.getrgb(value)
    except ValueError:
        log_warning(request_id, "compose:invalid_color", field=key, color=value)
        return ImageColor.getrgb(COLOR_DEFAULTS[key])


def _round(v: float) -> int:
    return int(round(v))


def _stroke_px(width: float) -> int:
    # any positive width paints at least one pixel
    return max(1, _round(width)) if width > 0 else 0


def _composite_fill(canvas: Image.Image, color: RGBA, draw_mask: Callable[[ImageDraw.ImageDraw], None]) -> None:
    """Paint ``color`` over the canvas through the shape ``draw_mask`` draws in white."""
    mask = Image.new("L", canvas.size, 0)
    draw_mask(ImageDraw.Draw(mask))
    alpha = color[3] if len(color) == 4 else 255
    if alpha < 255:
        mask = mask.point(lambda p: p * alpha // 255)
    layer = Image.new("RGBA", canvas.size, tuple(color[:3]) + (255,))
    layer.putalpha(mask)
    canvas.alpha_composite(layer)


def _draw_centered_text(draw: ImageDraw.ImageDraw, center: Tuple[float, float], text: str, font, fill) -> None:
    cx, cy = center
    if isinstance(font, ImageFont.FreeTypeFont):
        draw.text((cx, cy), text, font=font, fill=fill, anchor="mm")
        return
    # bitmap fonts have no anchor support
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    draw.text((cx - (left + right) / 2, cy - (top + bottom) / 2), text, font=font, fill=fill)


def _fill_rounded(canvas: Image.Image, x: float, y: float, w: float, h: float, r: float, fill: RGBA) -> None:
    rect = rounded_rect_path(x, y, w, h, r)
    if rect is None:
        return
    _composite_fill(canvas, fill, lambda d: d.rounded_rectangle(rect.box, radius=int(rect.radius), fill=255))


def _fill_text(canvas: Image.Image, center: Tuple[float, float], text: str, font, fill: RGBA) -> None:
    _composite_fill(canvas, fill, lambda d: _draw_centered_text(d, center, text, font, 255))


def draw_background(canvas: Image.Image, background: Image.Image) -> None:
    # direct stretch, aspect ratio is not preserved
    stretched = background.convert("RGBA").resize(canvas.size, Image.Resampling.LANCZOS)
    canvas.alpha_composite(stretched)


def draw_rows(canvas: Image.Image, config: LayoutConfig, request_id: Optional[str] = None) -> None:
    label_bg = _paint(config.label_bg, "labelBg", request_id)
    value_bg = _paint(config.value_bg, "valueBg", request_id)
    label_color = _paint(config.label_color, "labelColor", request_id)
    value_color = _paint(config.value_color, "valueColor", request_id)
    label_font = get_font(config.font_family, config.label_weight, config.label_size)
    value_font = get_font(config.font_family, config.value_weight, config.value_size)

    for index, row in enumerate(config.rows):
        y = config.row_top(index)
        mid_y = y + config.bar_height / 2
        _fill_rounded(canvas, config.label_x, y, config.label_width, config.bar_height, config.radius, label_bg)
        _fill_rounded(canvas, config.value_x, y, config.value_width, config.bar_height, config.radius, value_bg)
        _fill_text(canvas, (config.label_x + config.label_width / 2, mid_y), row.label, label_font, label_color)
        _fill_text(canvas, (config.value_x + config.value_width / 2, mid_y), row.value, value_font, value_color)


def _visible_tile(img: Image.Image, box: Box, canvas_size: Tuple[int, int]) -> Optional[Tuple[Image.Image, Tuple[int, int], Box]]:
    """Stretch ``img`` to ``box`` but resample only the part inside the canvas.

    Returns the tile, where to place it, and the full box in tile coordinates.
    """
    ox, oy = _round(box[0]), _round(box[1])
    sw, sh = _round(box[2] - box[0] + 1), _round(box[3] - box[1] + 1)
    x0, y0 = max(ox, 0), max(oy, 0)
    x1, y1 = min(ox + sw, canvas_size[0]), min(oy + sh, canvas_size[1])
    if x1 <= x0 or y1 <= y0:
        return None
    src = img.convert("RGBA")
    sx, sy = src.width / sw, src.height / sh
    region = ((x0 - ox) * sx, (y0 - oy) * sy, (x1 - ox) * sx, (y1 - oy) * sy)
    tile = src.resize((x1 - x0, y1 - y0), Image.Resampling.LANCZOS, box=region)
    full = (ox - x0, oy - y0, ox - x0 + sw - 1, oy - y0 + sh - 1)
    return tile, (x0, y0), full


def draw_circle(canvas: Image.Image, config: LayoutConfig, image: Optional[Image.Image], request_id: Optional[str] = None) -> None:
    spec = config.circle
    box = square_box(spec.x, spec.y, spec.size)
    if box is None:
        return
    if image is not None:
        visible = _visible_tile(image, box, canvas.size)
        if visible is not None:
            tile, dest, full = visible
            mask = Image.new("L", tile.size, 0)
            ImageDraw.Draw(mask).ellipse(full, fill=255)
            tile.putalpha(ImageChops.multiply(mask, tile.getchannel("A")))
            canvas.alpha_composite(tile, dest=dest)
    else:
        _composite_fill(canvas, _paint(spec.fill, "circleFill", request_id), lambda d: d.ellipse(box, fill=255))

    width = _stroke_px(config.stroke_width)
    if width:
        outline = stroke_box(box, width)
        _composite_fill(
            canvas,
            _paint(spec.stroke, "circleStroke", request_id),
            lambda d: d.ellipse(outline, outline=255, width=width),
        )


def draw_square(canvas: Image.Image, config: LayoutConfig, image: Optional[Image.Image], request_id: Optional[str] = None) -> None:
    spec = config.square
    box = square_box(spec.x, spec.y, spec.size)
    if box is None:
        return
    if image is not None:
        visible = _visible_tile(image, box, canvas.size)
        if visible is not None:
            tile, dest, _ = visible
            canvas.alpha_composite(tile, dest=dest)
    else:
        _composite_fill(canvas, _paint(spec.fill, "squareFill", request_id), lambda d: d.rectangle(box, fill=255))

    width = _stroke_px(config.stroke_width)
    if width:
        outline = stroke_box(box, width)
        _composite_fill(
            canvas,
            _paint(spec.stroke, "squareStroke", request_id),
            lambda d: d.rectangle(outline, outline=255, width=width),
        )


def compose_card(config: LayoutConfig, assets: CardAssets, *, request_id: Optional[str] = None) -> Image.Image:
    """Draw the stat card for ``config`` onto a fresh RGBA canvas.

    Z-order is fixed: background, the four rows, the circle, the square.
    Every layer is alpha-composited over what is already drawn.
    """
    if config.width <= 0 or config.height <= 0:
        raise RenderError(
            "Canvas size must be positive",
            details={"width": config.width, "height": config.height},
        )
    canvas = Image.new("RGBA", (config.width, config.height), (0, 0, 0, 0))
    draw_background(canvas, assets.background)
    draw_rows(canvas, config, request_id)
    draw_circle(canvas, config, assets.circle, request_id)
    draw_square(canvas, config, assets.square, request_id)
    return canvas
