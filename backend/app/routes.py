"""
API routes for the ad image generator.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from app.config import get_settings
from app.design_templates import AdStyle, available_style_ids, list_styles
from app.errors import InvalidStyleError
from app.models import AdRequest
from app.services.fonts import FontConfig
from app.services.image_loader import Fetcher, client_fetcher, fetch_bytes
from app.services.pipeline import RenderPipeline

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()


# Request Models

class GenerateAdRequest(BaseModel):
    """Body of POST /generate-ad. Field names follow the public camelCase API."""
    model_config = ConfigDict(populate_by_name=True)

    image_url: Optional[str] = Field(None, alias="imageUrl")
    logo_url: Optional[str] = Field(None, alias="logoUrl")
    headline: Optional[str] = None
    subtext: Optional[str] = None
    cta: Optional[str] = None
    style: Optional[str] = None

    def missing_fields(self) -> list[str]:
        required = {
            "imageUrl": self.image_url,
            "headline": self.headline,
            "subtext": self.subtext,
            "cta": self.cta,
            "style": self.style,
        }
        return [name for name, value in required.items() if not value or not value.strip()]


# Dependencies

def get_fonts(request: Request) -> FontConfig:
    fonts = getattr(request.app.state, "fonts", None)
    if fonts is None:
        fonts = FontConfig.load(settings.font_dir, settings.emoji_font_paths)
        request.app.state.fonts = fonts
    return fonts


def get_fetcher(request: Request) -> Fetcher:
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        return fetch_bytes
    return client_fetcher(client)


def style_availability() -> dict:
    return {style.value: True for style in AdStyle}


# Routes

@router.get("/")
def root():
    logger.info("GET /")
    return {"message": "Hello from Ad Image API", "styles": style_availability()}


@router.get("/health")
def health(fonts: FontConfig = Depends(get_fonts)):
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "styles": style_availability(),
        "fonts": fonts.describe(),
    }


@router.get("/styles")
def styles():
    """List the available ad styles."""
    return list_styles()


@router.post("/generate-ad")
async def generate_ad(
    body: GenerateAdRequest,
    fonts: FontConfig = Depends(get_fonts),
    fetcher: Fetcher = Depends(get_fetcher),
):
    """Render an ad image and return it as JPEG bytes."""
    if body.missing_fields():
        return JSONResponse({"error": "Missing required parameters"}, status_code=400)

    logger.info(f"🎨 Requested style: {body.style}")

    try:
        style = AdStyle.from_id(body.style)
    except InvalidStyleError as e:
        logger.warning(str(e))
        return JSONResponse(
            {"error": "Invalid style selected.", "available_styles": available_style_ids()},
            status_code=400,
        )

    ad_request = AdRequest(
        background_image_url=body.image_url,
        logo_image_url=body.logo_url or None,
        headline=body.headline,
        subtext=body.subtext,
        cta=body.cta,
        style=style,
    )

    pipeline = RenderPipeline(fonts, fetcher=fetcher, settings=settings)
    try:
        result = await asyncio.wait_for(pipeline.run(ad_request), timeout=settings.request_timeout)
    except asyncio.TimeoutError:
        logger.error(f"❌ Request timeout while rendering {style.value}")
        return JSONResponse({"error": "Request timeout"}, status_code=408)

    if not result.success:
        failure = result.failure
        logger.error(f"❌ Error generating {style.value} ad image at {failure.stage}: {failure.message}")
        return JSONResponse(
            {
                "error": "Internal Server Error",
                "message": failure.message,
                "style": style.value,
                "stage": failure.stage,
            },
            status_code=500,
        )

    logger.info(f"✅ {style.value} ad image generated")
    return Response(
        content=result.image,
        media_type=result.content_type,
        headers={"Cache-Control": settings.cache_control},
    )
