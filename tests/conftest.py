import base64
import io

import pytest
import requests
from PIL import Image

from src.media import fonts
from src.shared.settings import get_settings


BG_COLOR = (10, 200, 10)
BG_SIZE = (1530, 383)


def png_bytes(size=(10, 10), color=(255, 0, 0, 255), mode="RGBA") -> bytes:
    buf = io.BytesIO()
    Image.new(mode, size, color).save(buf, format="PNG")
    return buf.getvalue()


def data_uri(raw: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(raw).decode("ascii")


@pytest.fixture
def card_dirs(tmp_path, monkeypatch):
    """Point settings at temporary asset/font directories with a solid background."""
    assets = tmp_path / "assets"
    font_dir = tmp_path / "fonts"
    assets.mkdir()
    font_dir.mkdir()
    Image.new("RGB", BG_SIZE, BG_COLOR).save(assets / "original.png")
    monkeypatch.setenv("STATCARD_ASSETS_DIR", str(assets))
    monkeypatch.setenv("STATCARD_FONT_DIR", str(font_dir))
    monkeypatch.delenv("STATCARD_FETCH_TIMEOUT", raising=False)
    get_settings.cache_clear()
    yield {"assets": assets, "fonts": font_dir}
    get_settings.cache_clear()


@pytest.fixture
def fresh_fonts(monkeypatch):
    registry = fonts.FontRegistry()
    monkeypatch.setattr(fonts, "_REGISTRY", registry)
    return registry


class FakeResponse:
    def __init__(self, content: bytes = b"", status_code: int = 200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def fake_http(monkeypatch):
    """Serve registered URLs from memory; anything else is unreachable."""
    routes = {}
    calls = []

    def fake_get(url, timeout=None, **kwargs):
        calls.append({"url": url, "timeout": timeout})
        if url not in routes:
            raise requests.ConnectionError(f"cannot reach {url}")
        return routes[url]

    monkeypatch.setattr(requests, "get", fake_get)

    class Http:
        def serve(self, url: str, content: bytes, status_code: int = 200) -> None:
            routes[url] = FakeResponse(content, status_code)

    http = Http()
    http.calls = calls
    return http


@pytest.fixture
def make_png():
    return png_bytes


@pytest.fixture
def make_data_uri():
    return data_uri
