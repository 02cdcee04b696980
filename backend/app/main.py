"""FastAPI app serving the ad image API"""
import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.routes import router
from app.services.fonts import FontConfig

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Resolve fonts and open the shared image-fetching client once at startup."""
    logger.info("Starting ad image API...")
    app.state.fonts = FontConfig.load(settings.font_dir, settings.emoji_font_paths)
    logger.info(f"✓ Fonts ready: {app.state.fonts.describe()}")
    app.state.http_client = httpx.AsyncClient(timeout=settings.fetch_timeout)

    yield

    logger.info("Shutting down...")
    await app.state.http_client.aclose()
    app.state.http_client = None


app = FastAPI(title="Ad Image API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(router)


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected request body: {exc.errors()}")
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.error(f"❌ Unhandled error: {exc}", exc_info=exc)
    return JSONResponse({"error": "Internal Server Error"}, status_code=500)
