"""
Data model shared by the rendering core.
"""

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from PIL import Image

from app.design_templates import AdStyle

RGB = Tuple[int, int, int]
RGBA = Tuple[int, int, int, int]


@dataclass(frozen=True)
class AdRequest:
    background_image_url: str
    headline: str
    subtext: str
    cta: str
    style: AdStyle
    logo_image_url: Optional[str] = None


@dataclass(frozen=True)
class SanitizedText:
    headline: str
    subtext: str
    cta: str


@dataclass
class DecodedImage:
    """A decoded RGBA image owned by one render."""
    image: Image.Image
    width: int = 0
    height: int = 0

    def __post_init__(self):
        if not self.width or not self.height:
            self.width, self.height = self.image.size
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image has invalid size {self.width}x{self.height}")


@dataclass(frozen=True)
class Palette:
    accent_color: str
    vibrant: Optional[RGB] = None
    muted: Optional[RGB] = None

    @classmethod
    def default(cls, accent_color: str = "#FDC830") -> "Palette":
        return cls(accent_color=accent_color)


@dataclass(frozen=True)
class LayoutBox:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def as_xyxy(self) -> tuple:
        return (self.x, self.y, self.right, self.bottom)


@dataclass(frozen=True)
class TextBlock:
    lines: Tuple[str, ...]
    font_size: int
    line_height: float
    weight: Literal["bold", "regular"] = "regular"
    style: Literal["normal", "italic"] = "normal"

    @property
    def height(self) -> float:
        return len(self.lines) * self.line_height


@dataclass(frozen=True)
class PlacedText:
    block: TextBlock
    x: float
    y: float
    fill: RGBA


@dataclass(frozen=True)
class ButtonSpec:
    label: str
    box: LayoutBox
    corner_radius: float
    fill_color: RGBA
    text_color: RGBA
    font_size: int
    label_width: float = 0.0
