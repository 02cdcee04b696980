"""
Font configuration, resolved once at startup.

Faces are looked up as (weight, style) pairs. A missing Montserrat face is
replaced by the matching system DejaVu face, and when that is missing too by
Pillow's built-in font, so font lookup never fails a render.
"""

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional, Sequence

from PIL import ImageFont

from app.errors import FontUnavailableError

logger = logging.getLogger(__name__)

FAMILY = "Montserrat"

FONT_FILES = {
    ("bold", "normal"): "Montserrat-Bold.ttf",
    ("regular", "normal"): "Montserrat-Regular.ttf",
    ("regular", "italic"): "Montserrat-Italic.ttf",
}

FALLBACK_FILES = {
    ("bold", "normal"): "DejaVuSans-Bold.ttf",
    ("regular", "normal"): "DejaVuSans.ttf",
    ("regular", "italic"): "DejaVuSans-Oblique.ttf",
}


@lru_cache(maxsize=128)
def _truetype(source: str, size: int) -> ImageFont.FreeTypeFont:
    return ImageFont.truetype(source, size)


def _can_load(source: str) -> bool:
    try:
        _truetype(source, 12)
    except OSError:
        return False
    return True


def _resolve_face(font_dir: Path, key: tuple) -> str:
    path = font_dir / FONT_FILES[key]
    if not path.exists():
        raise FontUnavailableError(f"{FAMILY} face {key[0]}/{key[1]} not found at {path}")
    if not _can_load(str(path)):
        raise FontUnavailableError(f"{FAMILY} face {key[0]}/{key[1]} at {path} is not a usable font")
    return str(path)


def _resolve_fallback(key: tuple) -> Optional[str]:
    name = FALLBACK_FILES[key]
    return name if _can_load(name) else None


def find_emoji_font(paths: Sequence[str]) -> Optional[str]:
    """Return the first emoji font path that exists."""
    for font_path in paths:
        if Path(font_path).exists():
            logger.info(f"✓ Emoji font found at: {font_path}")
            return font_path
        logger.debug(f"No emoji font at: {font_path}")
    logger.warning("No emoji fonts found, emoji will be substituted or stripped")
    return None


@dataclass(frozen=True)
class FontConfig:
    """Immutable font sources shared by every render.

    faces maps (weight, style) to a font file path or a system font name.
    None means Pillow's built-in font is used for that face.
    """
    faces: dict = field(default_factory=dict)
    family: str = FAMILY
    fallback_used: bool = False
    emoji_font: Optional[str] = None

    @classmethod
    def load(cls, font_dir: str, emoji_font_paths: Sequence[str] = ()) -> "FontConfig":
        font_dir = Path(font_dir)
        faces = {}
        fallback_used = False
        for key in FONT_FILES:
            try:
                faces[key] = _resolve_face(font_dir, key)
            except FontUnavailableError as e:
                fallback = _resolve_fallback(key)
                logger.warning(f"⚠️ {e}; falling back to {fallback or 'built-in font'}")
                faces[key] = fallback
                fallback_used = True

        if not fallback_used:
            logger.info(f"✓ {FAMILY} fonts registered from {font_dir}")

        return cls(
            faces=faces,
            family=FAMILY,
            fallback_used=fallback_used,
            emoji_font=find_emoji_font(emoji_font_paths),
        )

    @classmethod
    def builtin(cls) -> "FontConfig":
        """Config that only uses Pillow's built-in font."""
        return cls(faces={key: None for key in FONT_FILES}, family="builtin", fallback_used=True)

    def font(self, weight: str = "regular", style: str = "normal", size: int = 16) -> ImageFont.FreeTypeFont:
        size = max(1, int(size))
        source = self.faces.get((weight, style))
        if source is None and (weight, style) not in self.faces:
            # bold italic and other unregistered combinations
            source = self.faces.get((weight, "normal")) or self.faces.get(("regular", style))
        if source is None:
            return ImageFont.load_default(size=size)
        return _truetype(source, size)

    def describe(self) -> dict:
        return {
            "family": self.family,
            "fallback": self.fallback_used,
            "emoji_font": self.emoji_font,
        }
