from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from PIL import ImageFont

from src.shared.logging_utils import info as log_info, warning as log_warning
from src.shared.settings import get_settings


BUNDLED_FAMILY = "Open Sans"
BUNDLED_FONT_FILES: Tuple[Tuple[str, int], ...] = (
    ("OpenSans-Regular.ttf", 400),
    ("OpenSans-SemiBold.ttf", 600),
    ("OpenSans-Bold.ttf", 700),
)
GENERIC_FAMILIES = {"serif", "sans-serif", "monospace", "cursive", "fantasy", "system-ui"}

PillowFont = Union[ImageFont.FreeTypeFont, ImageFont.ImageFont]

# larger glyphs than this cannot fit any sane canvas and exhaust FreeType
MAX_FONT_PX = 1024


@lru_cache(maxsize=64)
def _truetype(path: str, size: int) -> ImageFont.FreeTypeFont:
    return ImageFont.truetype(path, size=size)


def _default_font(size: int) -> PillowFont:
    try:
        return ImageFont.load_default(size=size)
    except OSError as exc:
        log_warning(None, "fonts:default_failed", size=size, error=str(exc))
        return ImageFont.load_default()


def split_family_chain(chain: str) -> List[str]:
    return [name.strip().strip("'\"") for name in chain.split(",") if name.strip()]


class FontRegistry:
    """Process-wide mapping of (family, weight) to font files.

    ``ensure_fonts`` runs its checks once; later calls are no-ops even if the
    files appear afterwards. Registering a variant twice overwrites it with
    the same path.
    """

    def __init__(self, font_dir: Optional[Path] = None):
        self._font_dir = font_dir
        self._variants: Dict[str, Dict[int, str]] = {}
        self.initialized = False

    @property
    def font_dir(self) -> Path:
        return self._font_dir or get_settings().font_dir

    def register(self, path: Union[str, Path], family: str, weight: int) -> None:
        self._variants.setdefault(family.lower(), {})[int(weight)] = str(path)

    def ensure_fonts(self) -> None:
        if self.initialized:
            return
        files = [(self.font_dir / name, weight) for name, weight in BUNDLED_FONT_FILES]
        missing = [str(path) for path, _ in files if not path.exists()]
        if missing:
            log_warning(None, "fonts:missing", missing=missing)
            self.initialized = True
            return
        for path, weight in files:
            self.register(path, BUNDLED_FAMILY, weight)
        log_info(None, "fonts:registered", family=BUNDLED_FAMILY, weights=[w for _, w in files])
        self.initialized = True

    def resolve_path(self, family_chain: str, weight: float) -> Optional[str]:
        """Return the file of the closest registered weight of the first known family."""
        for name in split_family_chain(family_chain):
            if name.lower() in GENERIC_FAMILIES:
                continue
            variants = self._variants.get(name.lower())
            if not variants:
                continue
            # ties go to the heavier variant
            best = min(variants, key=lambda w: (abs(w - weight), -w))
            return variants[best]
        return None

    def get_font(self, family_chain: str, weight: float, size: float) -> PillowFont:
        px = min(MAX_FONT_PX, max(1, int(round(size))))
        path = self.resolve_path(family_chain, weight)
        if path is None:
            return _default_font(px)
        try:
            return _truetype(path, px)
        except OSError as exc:
            log_warning(None, "fonts:load_failed", path=path, error=str(exc))
            return _default_font(px)


_REGISTRY = FontRegistry()


def get_registry() -> FontRegistry:
    return _REGISTRY


def ensure_fonts() -> None:
    _REGISTRY.ensure_fonts()


def get_font(family_chain: str, weight: float, size: float) -> PillowFont:
    return _REGISTRY.get_font(family_chain, weight, size)
