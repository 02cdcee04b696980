"""
Image fetching and decoding for the render pipeline.
"""

import logging
from io import BytesIO
from typing import Awaitable, Callable, Optional

import httpx
from PIL import Image, ImageOps, UnidentifiedImageError

from app.config import get_settings
from app.errors import ResourceFetchError
from app.models import DecodedImage

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[bytes]]


async def fetch_bytes(
    url: str,
    client: Optional[httpx.AsyncClient] = None,
    max_bytes: Optional[int] = None,
) -> bytes:
    """Download a resource. Any transport or HTTP status failure is a ResourceFetchError."""
    settings = get_settings()
    max_bytes = max_bytes or settings.max_image_bytes

    async def _get(c: httpx.AsyncClient) -> bytes:
        async with c.stream("GET", url, follow_redirects=True) as response:
            response.raise_for_status()
            declared = response.headers.get("content-length", "")
            if declared.isdigit() and int(declared) > max_bytes:
                raise ResourceFetchError(f"Image at {url} is larger than {max_bytes} bytes")
            chunks = []
            received = 0
            async for chunk in response.aiter_bytes():
                received += len(chunk)
                if received > max_bytes:
                    raise ResourceFetchError(f"Image at {url} is larger than {max_bytes} bytes")
                chunks.append(chunk)
        return b"".join(chunks)

    try:
        if client is not None:
            content = await _get(client)
        else:
            async with httpx.AsyncClient(timeout=settings.fetch_timeout) as c:
                content = await _get(c)
    except httpx.HTTPStatusError as e:
        raise ResourceFetchError(f"Fetching {url} failed with HTTP {e.response.status_code}") from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise ResourceFetchError(f"Fetching {url} failed: {e}") from e

    if not content:
        raise ResourceFetchError(f"Fetching {url} returned an empty body")
    logger.debug(f"Fetched {len(content)} bytes from {url}")
    return content


def client_fetcher(client: httpx.AsyncClient) -> Fetcher:
    """Bind fetch_bytes to a shared client."""
    async def _fetch(url: str) -> bytes:
        return await fetch_bytes(url, client=client)
    return _fetch


def decode_image(data: bytes, source: str = "image") -> DecodedImage:
    """Decode image bytes into an upright RGBA image."""
    try:
        with Image.open(BytesIO(data)) as img:
            img.load()
            img = ImageOps.exif_transpose(img).convert("RGBA")
        return DecodedImage(image=img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ResourceFetchError(f"Could not decode {source}: {e}") from e
