import base64
import io
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

import requests
from PIL import Image

from src.shared.logging_utils import debug as log_debug, info as log_info
from src.shared.settings import get_settings
from src.specs.common.errors import BackgroundUnavailableError


@dataclass
class CardAssets:
    background: Image.Image
    circle: Optional[Image.Image] = None
    square: Optional[Image.Image] = None


def _decode(data: bytes) -> Image.Image:
    img = Image.open(io.BytesIO(data))
    img.load()
    return img.convert("RGBA")


def _read_source(source: str, timeout: float) -> bytes:
    lowered = source.lower()
    if lowered.startswith(("http://", "https://")):
        r = requests.get(source, timeout=timeout)
        r.raise_for_status()
        return r.content
    if lowered.startswith("data:"):
        header, _, payload = source.partition(",")
        if header.endswith(";base64"):
            return base64.b64decode(payload)
        raise ValueError("Only base64 data URIs are supported")
    with open(source, "rb") as f:
        return f.read()


def load_image_safe(source: Optional[str], *, timeout: Optional[float] = None, request_id: Optional[str] = None) -> Optional[Image.Image]:
    """Load an image from a URL, data URI or path; return None on any failure."""
    if not source:
        return None
    if timeout is None:
        timeout = get_settings().fetch_timeout
    try:
        return _decode(_read_source(source, timeout))
    except Exception as exc:
        log_debug(request_id, "image:load_failed", source=source[:200], error=str(exc))
        return None


def load_background(source: Optional[str], *, request_id: Optional[str] = None) -> Image.Image:
    """Load the requested background, falling back to the bundled default.

    The bundled image is the last resort; failing to read it is fatal.
    """
    img = load_image_safe(source, request_id=request_id)
    if img is not None:
        return img
    path = get_settings().default_background_path
    if source:
        log_info(request_id, "image:background_fallback", path=str(path))
    try:
        with open(path, "rb") as f:
            return _decode(f.read())
    except Exception as exc:
        raise BackgroundUnavailableError(str(path), details={"error": str(exc)}) from exc


def load_card_assets(
    background_url: str,
    circle_url: str,
    square_url: str,
    *,
    request_id: Optional[str] = None,
) -> CardAssets:
    """Load the three card images concurrently and wait for all of them."""
    with ThreadPoolExecutor(max_workers=3, thread_name_prefix="statcard-img") as pool:
        bg_future = pool.submit(load_background, background_url, request_id=request_id)
        circle_future = pool.submit(load_image_safe, circle_url, request_id=request_id)
        square_future = pool.submit(load_image_safe, square_url, request_id=request_id)
        assets = CardAssets(
            background=bg_future.result(),
            circle=circle_future.result(),
            square=square_future.result(),
        )
    log_info(
        request_id,
        "image:assets_loaded",
        background=assets.background.size,
        circle=assets.circle is not None,
        square=assets.square is not None,
    )
    return assets
