from io import BytesIO

import httpx
import pytest
from PIL import Image

from app.services.fonts import FontConfig
from app.services.image_loader import fetch_bytes


@pytest.fixture
def fonts():
    return FontConfig.builtin()


@pytest.fixture
def make_image():
    """Factory for solid-color encoded images."""
    def _make(color=(40, 90, 200), size=(400, 300), fmt="JPEG") -> bytes:
        mode = "RGBA" if len(color) == 4 else "RGB"
        buffer = BytesIO()
        Image.new(mode, size, color).save(buffer, fmt)
        return buffer.getvalue()
    return _make


@pytest.fixture
def mock_fetcher():
    """Factory for fetchers served by httpx.MockTransport.

    Unknown URLs answer 404; a route mapped to an exception raises it.
    """
    def _make(routes: dict):
        def handler(request: httpx.Request) -> httpx.Response:
            body = routes.get(str(request.url))
            if body is None:
                return httpx.Response(404)
            if isinstance(body, Exception):
                raise body
            return httpx.Response(200, content=body)

        transport = httpx.MockTransport(handler)

        async def fetch(url: str) -> bytes:
            async with httpx.AsyncClient(transport=transport) as client:
                return await fetch_bytes(url, client=client)
        return fetch
    return _make
