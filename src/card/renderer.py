import uuid
from dataclasses import dataclass
from typing import Mapping, Optional

from src.card.params import image_sources, resolve_layout
from src.card.response import encode_png
from src.media.card_compositor import compose_card
from src.media.fonts import ensure_fonts
from src.media.image_loader import load_card_assets
from src.shared.logging_utils import info as log_info
from src.specs.functions.generate_card_spec import LayoutConfig


@dataclass
class RenderedCard:
    png: bytes
    config: LayoutConfig


def render_card(query: Mapping[str, Optional[str]], *, request_id: Optional[str] = None) -> RenderedCard:
    """Run the full pipeline for one request and return the encoded PNG.

    Image load failures degrade to solid fills; anything else propagates.
    """
    request_id = request_id or uuid.uuid4().hex
    ensure_fonts()

    background_url, circle_url, square_url = image_sources(query)
    assets = load_card_assets(background_url, circle_url, square_url, request_id=request_id)

    config = resolve_layout(query, background_size=assets.background.size)
    canvas = compose_card(config, assets, request_id=request_id)
    png = encode_png(canvas)
    log_info(request_id, "render:completed", width=config.width, height=config.height, bytes=len(png))
    return RenderedCard(png=png, config=config)
