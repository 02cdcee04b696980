"""
Call-to-action button sizing and painting.
"""

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from app.models import ButtonSpec, LayoutBox, RGBA
from app.services.fonts import FontConfig
from app.services.shapes import RenderSurface, fill_linear_gradient, fill_path, rounded_rect_path


@dataclass(frozen=True)
class ButtonAnchor:
    """Where the button sits: horizontally centered or right-aligned, above the bottom edge."""
    horizontal: Literal["center", "right"] = "center"
    margin_x: float = 0
    margin_bottom: float = 30


@dataclass(frozen=True)
class ButtonTheme:
    font_size: int
    padding_x: float
    fill: RGBA
    text_color: RGBA
    radius: float
    padding_y: Optional[float] = None
    height_factor: float = 1.8
    shadow_offset: float = 0
    shadow_color: RGBA = (0, 0, 0, 77)
    highlight: Optional[Tuple[RGBA, RGBA]] = None

    def height(self) -> float:
        if self.padding_y is None:
            return self.font_size * self.height_factor
        return self.font_size + self.padding_y * 2


class CTAButtonRenderer:
    """Renders the CTA as a rounded button with its label centered on both axes."""

    def __init__(self, fonts: FontConfig):
        self.fonts = fonts

    def measure(self, label: str, anchor: ButtonAnchor, theme: ButtonTheme, canvas_size: tuple) -> ButtonSpec:
        width, height = canvas_size
        font = self.fonts.font("bold", "normal", theme.font_size)
        label_width = font.getlength(label)

        btn_width = label_width + theme.padding_x * 2
        btn_height = theme.height()
        if anchor.horizontal == "right":
            btn_x = width - btn_width - anchor.margin_x
        else:
            btn_x = (width - btn_width) / 2
        btn_y = height - btn_height - anchor.margin_bottom

        return ButtonSpec(
            label=label,
            box=LayoutBox(btn_x, btn_y, btn_width, btn_height),
            corner_radius=theme.radius,
            fill_color=theme.fill,
            text_color=theme.text_color,
            font_size=theme.font_size,
            label_width=label_width,
        )

    def paint(self, surface: RenderSurface, spec: ButtonSpec, theme: ButtonTheme):
        path = rounded_rect_path(spec.box, spec.corner_radius)

        if theme.shadow_offset:
            shadow = path.translated(theme.shadow_offset, theme.shadow_offset)
            fill_path(surface, shadow, theme.shadow_color)

        fill_path(surface, path, spec.fill_color)

        if theme.highlight:
            top, bottom = theme.highlight
            fill_linear_gradient(surface, spec.box, top, bottom, horizontal=False, clip=path)

        font = self.fonts.font("bold", "normal", spec.font_size)
        center = (spec.box.x + spec.box.width / 2, spec.box.y + spec.box.height / 2)
        surface.draw.text(center, spec.label, font=font, fill=spec.text_color, anchor="mm")

    def render(self, surface: RenderSurface, label: str, anchor: ButtonAnchor, theme: ButtonTheme) -> ButtonSpec:
        spec = self.measure(label, anchor, theme, (surface.width, surface.height))
        self.paint(surface, spec, theme)
        return spec
