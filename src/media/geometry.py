import math
from dataclasses import dataclass
from typing import Optional, Tuple

Box = Tuple[float, float, float, float]


def _finite(*values: float) -> bool:
    return all(math.isfinite(v) for v in values)


def pixel_box(x: float, y: float, w: float, h: float) -> Box:
    """Pillow's inclusive bounding box covering ``[x, x+w) x [y, y+h)``."""
    return (x, y, max(x, x + w - 1), max(y, y + h - 1))


def clamp_radius(r: float, w: float, h: float) -> float:
    return max(0.0, min(r, w / 2, h / 2))


@dataclass(frozen=True)
class RoundedRect:
    x: float
    y: float
    w: float
    h: float
    radius: float

    @property
    def box(self) -> Box:
        return pixel_box(self.x, self.y, self.w, self.h)


def rounded_rect_path(x: float, y: float, w: float, h: float, r: float) -> Optional[RoundedRect]:
    """Closed rectangle with four equal corner radii.

    The radius is clamped so ``2 * radius <= min(w, h)``; corners are laid out
    clockwise from top-left by the drawing backend. Returns None when the
    geometry cannot produce a visible shape.
    """
    if not _finite(x, y, w, h, r) or w <= 0 or h <= 0:
        return None
    return RoundedRect(x, y, w, h, clamp_radius(r, w, h))


def square_box(x: float, y: float, size: float) -> Optional[Box]:
    if not _finite(x, y, size) or size <= 0:
        return None
    return pixel_box(x, y, size, size)


def stroke_box(box: Box, width: float) -> Box:
    # outline centred on the edge: half inside, half outside
    half = width / 2
    return (box[0] - half, box[1] - half, box[2] + half, box[3] + half)
