import asyncio

import httpx
import pytest
from PIL import Image

from app.errors import ResourceFetchError
from app.services.image_loader import client_fetcher, decode_image, fetch_bytes


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _fetch(handler, url="https://cdn.test/photo.jpg", **kwargs) -> bytes:
    async def run():
        async with _client(handler) as client:
            return await fetch_bytes(url, client=client, **kwargs)
    return asyncio.run(run())


def test_fetch_returns_body():
    assert _fetch(lambda request: httpx.Response(200, content=b"jpeg!")) == b"jpeg!"


def test_fetch_follows_redirects():
    def handler(request):
        if request.url.path == "/old.jpg":
            return httpx.Response(302, headers={"Location": "https://cdn.test/new.jpg"})
        return httpx.Response(200, content=b"moved")
    assert _fetch(handler, url="https://cdn.test/old.jpg") == b"moved"


def test_http_error_status_is_fetch_error():
    with pytest.raises(ResourceFetchError) as exc:
        _fetch(lambda request: httpx.Response(404))
    assert "404" in str(exc.value)
    assert exc.value.stage == "loading"


def test_transport_error_is_fetch_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)
    with pytest.raises(ResourceFetchError):
        _fetch(handler)


def test_empty_body_is_fetch_error():
    with pytest.raises(ResourceFetchError):
        _fetch(lambda request: httpx.Response(200, content=b""))


def test_oversized_body_is_fetch_error():
    with pytest.raises(ResourceFetchError):
        _fetch(lambda request: httpx.Response(200, content=b"0123456789"), max_bytes=4)


def test_client_fetcher_binds_client():
    async def run():
        async with _client(lambda request: httpx.Response(200, content=b"logo")) as client:
            return await client_fetcher(client)("https://cdn.test/logo.png")
    assert asyncio.run(run()) == b"logo"


def test_decode_image_to_rgba(make_image):
    decoded = decode_image(make_image(size=(64, 32)))
    assert decoded.image.mode == "RGBA"
    assert (decoded.width, decoded.height) == (64, 32)


def test_decode_garbage_is_fetch_error():
    with pytest.raises(ResourceFetchError):
        decode_image(b"<html>not found</html>", "background image")


def test_oversized_stream_stops_reading_early():
    pulled = []

    async def body():
        for _ in range(1000):
            pulled.append(1)
            yield b"x" * 1024

    with pytest.raises(ResourceFetchError):
        _fetch(lambda request: httpx.Response(200, content=body()), max_bytes=4096)
    assert len(pulled) < 10


def test_declared_length_over_limit_is_rejected():
    def handler(request):
        return httpx.Response(200, headers={"Content-Length": "999999"}, content=b"x" * 999999)
    with pytest.raises(ResourceFetchError) as exc:
        _fetch(handler, max_bytes=1024)
    assert "larger than" in str(exc.value)


def test_decompression_bomb_is_fetch_error(make_image, monkeypatch):
    data = make_image(size=(100, 100), fmt="PNG")
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    with pytest.raises(ResourceFetchError):
        decode_image(data, "background image")
