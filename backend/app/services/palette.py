"""
Accent color extraction from a background photo.

The image is median-cut quantized into a small set of swatches. The most
vibrant swatch (saturated, mid lightness, weighted by population) drives the
accent; without one, the most populous swatch is used instead. The swatch is
then mapped to one of three fixed accent paints.
"""

import asyncio
import colorsys
import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

from PIL import Image, UnidentifiedImageError

from app.errors import PaletteExtractionError
from app.models import Palette, RGB

logger = logging.getLogger(__name__)

DEFAULT_ACCENT = "#FDC830"
ACCENT_WARM = "#FDBB2D"
ACCENT_AMBER = "#FFC107"
ACCENT_PALE_GOLD = "#FDC830"

# Vibrant swatch target (HSL), same weights as the vibrant.js family of libraries
MIN_VIBRANT_SATURATION = 0.35
MIN_VIBRANT_LIGHTNESS = 0.3
MAX_VIBRANT_LIGHTNESS = 0.7
TARGET_SATURATION = 1.0
TARGET_LIGHTNESS = 0.5
WEIGHT_SATURATION = 3.0
WEIGHT_LIGHTNESS = 6.5
WEIGHT_POPULATION = 0.5


@dataclass(frozen=True)
class Swatch:
    rgb: RGB
    population: int

    @property
    def hsl(self) -> tuple:
        r, g, b = (c / 255 for c in self.rgb)
        h, l, s = colorsys.rgb_to_hls(r, g, b)
        return h, s, l


def accent_for_rgb(rgb: RGB) -> str:
    """Map a swatch color to its accent paint."""
    r, g, b = rgb
    if r > g and r > b:
        return ACCENT_WARM
    if (r + g + b) / 3 < 120:
        return ACCENT_AMBER
    return ACCENT_PALE_GOLD


def quantize_swatches(img: Image.Image, colors: int = 64, sample_size: int = 256) -> list[Swatch]:
    """Median-cut the image into at most `colors` swatches, most populous first."""
    img = img.convert("RGB")
    img.thumbnail((sample_size, sample_size), Image.Resampling.BILINEAR)
    quantized = img.quantize(colors=colors, method=Image.Quantize.MEDIANCUT)
    palette = quantized.getpalette() or []
    counts = quantized.getcolors(maxcolors=256) or []

    swatches = []
    for population, index in counts:
        rgb = tuple(palette[index * 3:index * 3 + 3])
        if len(rgb) == 3 and population > 0:
            swatches.append(Swatch(rgb=rgb, population=population))
    swatches.sort(key=lambda s: (-s.population, s.rgb))
    return swatches


def _vibrant_score(swatch: Swatch, max_population: int) -> float:
    _, s, l = swatch.hsl
    return (
        WEIGHT_SATURATION * (1 - abs(s - TARGET_SATURATION))
        + WEIGHT_LIGHTNESS * (1 - abs(l - TARGET_LIGHTNESS))
        + WEIGHT_POPULATION * (swatch.population / max_population)
    )


def select_vibrant(swatches: list[Swatch]) -> Optional[Swatch]:
    candidates = [
        s for s in swatches
        if s.hsl[1] >= MIN_VIBRANT_SATURATION
        and MIN_VIBRANT_LIGHTNESS <= s.hsl[2] <= MAX_VIBRANT_LIGHTNESS
    ]
    if not candidates:
        return None
    max_population = max(s.population for s in swatches)
    # max() keeps the first of equal scores, and swatches are already ordered
    return max(candidates, key=lambda s: _vibrant_score(s, max_population))


def select_muted(swatches: list[Swatch]) -> Optional[Swatch]:
    return swatches[0] if swatches else None


def palette_from_swatches(swatches: list[Swatch], default_accent: str = DEFAULT_ACCENT) -> Palette:
    vibrant = select_vibrant(swatches)
    muted = select_muted(swatches)
    chosen = vibrant or muted
    if chosen is None:
        return Palette.default(default_accent)
    return Palette(
        accent_color=accent_for_rgb(chosen.rgb),
        vibrant=vibrant.rgb if vibrant else None,
        muted=muted.rgb if muted else None,
    )


class PaletteExtractor:
    """Derives a Palette from encoded image bytes."""

    def __init__(self, colors: int = 64, sample_size: int = 256, default_accent: str = DEFAULT_ACCENT):
        self.colors = colors
        self.sample_size = sample_size
        self.default_accent = default_accent

    def extract_sync(self, image_bytes: bytes) -> Palette:
        try:
            with Image.open(BytesIO(image_bytes)) as img:
                img.load()
                swatches = quantize_swatches(img, self.colors, self.sample_size)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            raise PaletteExtractionError(f"Could not read image for palette: {e}") from e
        return palette_from_swatches(swatches, self.default_accent)

    async def extract(self, image_bytes: bytes) -> Palette:
        return await asyncio.to_thread(self.extract_sync, image_bytes)
