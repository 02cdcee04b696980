"""Render pipeline - turns an AdRequest into encoded ad image bytes."""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO
from typing import Optional

from app.config import Settings, get_settings
from app.errors import AdRenderError, EncodeError, PaletteExtractionError, ResourceFetchError
from app.models import AdRequest, DecodedImage, Palette, SanitizedText
from app.services.compositors import Layout, StyleCompositor, select_style
from app.services.fonts import FontConfig
from app.services.image_loader import Fetcher, decode_image, fetch_bytes
from app.services.palette import PaletteExtractor
from app.services.shapes import RenderSurface

logger = logging.getLogger(__name__)

CONTENT_TYPE = "image/jpeg"


class PipelineState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SANITIZING = "sanitizing"
    EXTRACTING_PALETTE = "extracting_palette"
    LAYING_OUT = "laying_out"
    DRAWING = "drawing"
    ENCODING = "encoding"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RenderFailure:
    """Why a render failed, and where."""
    stage: str
    style: str
    error_type: str
    message: str


@dataclass
class RenderResult:
    """Result of one pipeline run. Failed results never carry image bytes."""
    success: bool
    state: PipelineState
    style: str
    image: Optional[bytes] = None
    content_type: str = CONTENT_TYPE
    failure: Optional[RenderFailure] = None
    palette_fallback: bool = False
    history: list[PipelineState] = field(default_factory=list)


def encode_jpeg(surface: RenderSurface, quality: int = 90) -> bytes:
    """Flatten the surface onto black and encode it as JPEG."""
    try:
        rgb = surface.image.convert("RGB")
        buffer = BytesIO()
        rgb.save(buffer, "JPEG", quality=quality)
    except (OSError, ValueError) as e:
        raise EncodeError(f"JPEG encoding failed: {e}") from e
    return buffer.getvalue()


class RenderPipeline:
    """Runs one ad render through its stages, strictly in order.

    A pipeline instance handles a single request; its surface and decoded
    images are never shared.
    """

    def __init__(
        self,
        fonts: FontConfig,
        fetcher: Optional[Fetcher] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.fonts = fonts
        self.fetcher = fetcher or fetch_bytes
        self.palette_extractor = PaletteExtractor(
            colors=self.settings.palette_colors,
            sample_size=self.settings.palette_sample_size,
            default_accent=self.settings.default_accent,
        )
        self.state = PipelineState.IDLE
        self.history = [PipelineState.IDLE]

    def _transition(self, state: PipelineState, style: str):
        self.state = state
        self.history.append(state)
        logger.info(f"[{style}] {state.value}")

    def _fail(self, style: str, stage: PipelineState, error: Exception) -> RenderResult:
        self._transition(PipelineState.FAILED, style)
        return RenderResult(
            success=False,
            state=PipelineState.FAILED,
            style=style,
            failure=RenderFailure(
                stage=stage.value,
                style=style,
                error_type=type(error).__name__,
                message=str(error),
            ),
            history=list(self.history),
        )

    async def _load(self, request: AdRequest) -> tuple[DecodedImage, bytes, Optional[DecodedImage]]:
        urls = [request.background_image_url]
        if request.logo_image_url:
            urls.append(request.logo_image_url)
        fetches = [asyncio.ensure_future(self.fetcher(url)) for url in urls]
        try:
            payloads = await asyncio.gather(*fetches)
        except (Exception, asyncio.CancelledError):
            # cancel and join the sibling download
            for fetch in fetches:
                fetch.cancel()
            await asyncio.gather(*fetches, return_exceptions=True)
            raise

        background_bytes = payloads[0]
        background = decode_image(background_bytes, "background image")
        logo = decode_image(payloads[1], "logo image") if len(payloads) > 1 else None
        return background, background_bytes, logo

    async def _extract_palette(self, image_bytes: bytes, style: str) -> tuple[Palette, bool]:
        try:
            return await self.palette_extractor.extract(image_bytes), False
        except PaletteExtractionError as e:
            logger.warning(f"[{style}] Palette extraction failed, using default accent: {e}")
            return Palette.default(self.settings.default_accent), True

    @staticmethod
    def sanitize(compositor: StyleCompositor, request: AdRequest) -> SanitizedText:
        sanitizer = compositor.sanitizer()
        return SanitizedText(
            headline=sanitizer.sanitize(request.headline),
            subtext=sanitizer.sanitize(request.subtext),
            cta=sanitizer.sanitize(request.cta),
        )

    async def run(self, request: AdRequest) -> RenderResult:
        style = request.style.value
        compositor = select_style(request.style, self.fonts, self.settings.logo_width_ratio)
        stage = PipelineState.LOADING

        try:
            self._transition(PipelineState.LOADING, style)
            background, background_bytes, logo = await self._load(request)

            stage = PipelineState.SANITIZING
            self._transition(stage, style)
            text = self.sanitize(compositor, request)

            stage = PipelineState.EXTRACTING_PALETTE
            self._transition(stage, style)
            palette, palette_fallback = await self._extract_palette(background_bytes, style)

            stage = PipelineState.LAYING_OUT
            self._transition(stage, style)
            layout: Layout = compositor.plan(text, background, palette, logo)

            stage = PipelineState.DRAWING
            self._transition(stage, style)
            surface = RenderSurface(background.width, background.height)
            compositor.paint(layout, background, surface, logo)

            stage = PipelineState.ENCODING
            self._transition(stage, style)
            image = encode_jpeg(surface, self.settings.jpeg_quality)
        except ResourceFetchError as e:
            logger.error(f"[{style}] Could not load images: {e}")
            return self._fail(style, stage, e)
        except AdRenderError as e:
            logger.error(f"[{style}] {stage.value} failed: {e}")
            return self._fail(style, stage, e)
        except Exception as e:
            logger.exception(f"[{style}] Unexpected error while {stage.value}")
            return self._fail(style, stage, e)

        self._transition(PipelineState.DONE, style)
        return RenderResult(
            success=True,
            state=PipelineState.DONE,
            style=style,
            image=image,
            palette_fallback=palette_fallback,
            history=list(self.history),
        )


async def render_ad(
    request: AdRequest,
    fonts: FontConfig,
    fetcher: Optional[Fetcher] = None,
) -> RenderResult:
    """
    Convenience function to render one ad with a fresh pipeline.
    """
    pipeline = RenderPipeline(fonts, fetcher=fetcher)
    return await pipeline.run(request)
