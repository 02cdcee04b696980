"""
Style compositors: one layout engine, three variants.

A compositor works in two steps. plan() measures text and computes geometry
without touching pixels; paint() draws the background, the decorative shapes,
the text, the CTA button and the optional logo onto the surface in that order.
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from PIL import ImageColor

from app.design_templates import AdStyle, get_style_theme
from app.models import AdRequest, ButtonSpec, DecodedImage, LayoutBox, Palette, PlacedText, SanitizedText
from app.services.buttons import ButtonAnchor, ButtonTheme, CTAButtonRenderer
from app.services.emoji import EmojiPolicy, EmojiSanitizer
from app.services.fonts import FontConfig
from app.services.shapes import (
    GradientShape,
    OutlineShape,
    PathShape,
    RectShape,
    RenderSurface,
    wave_band_path,
)
from app.services.text_layout import layout_block

LOGO_MARGIN = 0.04


def font_size_for(height: int, fraction: float) -> int:
    return max(1, math.floor(height * fraction))


@dataclass
class Layout:
    """Everything a compositor decided before drawing."""
    button: ButtonSpec
    button_theme: ButtonTheme
    shapes: list = field(default_factory=list)
    texts: list[PlacedText] = field(default_factory=list)
    logo_box: Optional[LayoutBox] = None


class StyleCompositor:
    """Base compositor. Subclasses implement _plan_decorations for their style."""

    style: AdStyle

    def __init__(self, fonts: FontConfig, logo_width_ratio: float = 0.15):
        self.fonts = fonts
        self.theme = get_style_theme(self.style)
        self.buttons = CTAButtonRenderer(fonts)
        self.logo_width_ratio = logo_width_ratio

    @property
    def emoji_policy(self) -> EmojiPolicy:
        return EmojiPolicy(self.theme["emoji_policy"])

    def sanitizer(self) -> EmojiSanitizer:
        return EmojiSanitizer(self.emoji_policy)

    # Planning

    def button_theme(self, height: int) -> ButtonTheme:
        t = self.theme
        return ButtonTheme(
            font_size=font_size_for(height, t["cta_size"]),
            padding_x=t["cta_padding_x"],
            padding_y=t["cta_padding_y"],
            height_factor=t["cta_height_factor"] or 1.8,
            fill=t["cta_fill"],
            text_color=t["cta_text"],
            radius=t["cta_radius"],
            shadow_offset=t.get("cta_shadow_offset", 0),
            shadow_color=t.get("cta_shadow", (0, 0, 0, 77)),
            highlight=t.get("cta_highlight"),
        )

    def button_anchor(self, width: int) -> ButtonAnchor:
        t = self.theme
        margin_x = width * t["padding_x"] if t["cta_align"] == "right" else 0
        return ButtonAnchor(horizontal=t["cta_align"], margin_x=margin_x, margin_bottom=t["cta_margin_bottom"])

    def logo_box(self, logo: DecodedImage, width: int, height: int) -> LayoutBox:
        logo_w = max(1, round(width * self.logo_width_ratio))
        logo_h = max(1, round(logo.height * logo_w / logo.width))
        margin = width * self.theme.get("padding_x", LOGO_MARGIN)
        position = self.theme["logo_position"]
        if position == "top_center":
            return LayoutBox((width - logo_w) / 2, margin, logo_w, logo_h)
        if position == "bottom_left":
            return LayoutBox(margin, height - logo_h - margin, logo_w, logo_h)
        return LayoutBox(margin, margin, logo_w, logo_h)

    def _plan_decorations(self, text: SanitizedText, width: int, height: int, palette: Palette, layout: Layout):
        raise NotImplementedError

    def plan(
        self,
        text: SanitizedText,
        image: DecodedImage,
        palette: Palette,
        logo: Optional[DecodedImage] = None,
    ) -> Layout:
        width, height = image.width, image.height
        theme = self.button_theme(height)
        button = self.buttons.measure(text.cta, self.button_anchor(width), theme, (width, height))
        layout = Layout(button=button, button_theme=theme)
        self._plan_decorations(text, width, height, palette, layout)
        if logo is not None:
            layout.logo_box = self.logo_box(logo, width, height)
        return layout

    # Drawing

    def _draw_text(self, surface: RenderSurface, placed: PlacedText):
        block = placed.block
        font = self.fonts.font(block.weight, block.style, block.font_size)
        draw = surface.draw
        y = placed.y
        for line in block.lines:
            draw.text((placed.x, y), line, font=font, fill=placed.fill, anchor="la")
            y += block.line_height

    def paint(
        self,
        layout: Layout,
        image: DecodedImage,
        surface: RenderSurface,
        logo: Optional[DecodedImage] = None,
    ):
        surface.draw_image(image.image)
        for shape in layout.shapes:
            shape.paint(surface)
        for placed in layout.texts:
            self._draw_text(surface, placed)
        self.buttons.paint(surface, layout.button, layout.button_theme)
        if logo is not None and layout.logo_box is not None:
            surface.draw_image(logo.image, layout.logo_box)

    def compose(
        self,
        request: AdRequest,
        text: SanitizedText,
        image: DecodedImage,
        palette: Palette,
        surface: RenderSurface,
        logo: Optional[DecodedImage] = None,
    ) -> Layout:
        layout = self.plan(text, image, palette, logo)
        self.paint(layout, image, surface, logo)
        return layout


class OverlayCompositor(StyleCompositor):
    """Dark translucent boxes stacked behind headline and subtext at the top."""

    style = AdStyle.OVERLAY

    def _plan_decorations(self, text, width, height, palette, layout):
        t = self.theme
        pad = width * t["padding_x"]
        max_width = width * t["text_width"]
        inset = t["box_inset"]

        size = font_size_for(height, t["headline_size"])
        headline = layout_block(
            text.headline, self.fonts.font("bold", "normal", size), size,
            max_width, size + t["headline_spacing"], weight="bold",
        )
        layout.shapes.append(RectShape(
            LayoutBox(pad - inset, pad - inset, max_width + inset * 2, headline.height + inset * 2),
            t["box_fill"],
        ))
        layout.texts.append(PlacedText(headline, pad, pad, t["text_color"]))
        cursor_y = pad + headline.height

        size = font_size_for(height, t["subtext_size"])
        subtext = layout_block(
            text.subtext, self.fonts.font("regular", "italic", size), size,
            max_width, size + t["subtext_spacing"], style="italic",
        )
        layout.shapes.append(RectShape(
            LayoutBox(pad - inset, cursor_y, max_width + inset * 2, subtext.height + inset * 2),
            t["box_fill"],
        ))
        layout.texts.append(PlacedText(subtext, pad, cursor_y + inset, t["text_color"]))


class WaveCompositor(StyleCompositor):
    """Accent-colored band with a bezier top edge holding the text."""

    style = AdStyle.WAVE

    def _plan_decorations(self, text, width, height, palette, layout):
        t = self.theme
        band_top = height - height * t["band_height"]
        band = wave_band_path(width, height, band_top, t["wave_dip"], t["wave_rise"], t["wave_tail"])
        layout.shapes.append(PathShape(band, ImageColor.getcolor(palette.accent_color, "RGBA")))

        pad = width * t["padding_x"]
        max_width = width - pad * 2
        cursor_y = band_top + t["text_offset"]

        size = font_size_for(height, t["headline_size"])
        headline = layout_block(
            text.headline, self.fonts.font("bold", "normal", size), size,
            max_width, size * t["headline_line_height"], weight="bold",
        )
        layout.texts.append(PlacedText(headline, pad, cursor_y, t["text_color"]))
        cursor_y += headline.height + t["subtext_gap"]

        size = font_size_for(height, t["subtext_size"])
        subtext = layout_block(
            text.subtext, self.fonts.font("regular", "normal", size), size,
            max_width, size * t["subtext_line_height"],
        )
        layout.texts.append(PlacedText(subtext, pad, cursor_y, t["text_color"]))


class SidePanelCompositor(StyleCompositor):
    """Gradient panels on both sides: headline left, subtext right, height-bounded."""

    style = AdStyle.SIDE_PANEL

    def _plan_decorations(self, text, width, height, palette, layout):
        t = self.theme
        panel_w = width * t["panel_width"]
        panel_h = height * t["panel_height"]
        panel_y = height * t["panel_top"]
        inset = t["panel_inset"]
        text_top = t["panel_text_top"]

        left = LayoutBox(0, panel_y, panel_w, panel_h)
        right = LayoutBox(width - panel_w, panel_y, panel_w, panel_h)
        # darkest at the outer edge, fading toward the product in the middle
        layout.shapes += [
            GradientShape(left, t["panel_dark"], t["panel_light"]),
            OutlineShape(left, t["panel_border"]),
            GradientShape(right, t["panel_light"], t["panel_dark"]),
            OutlineShape(right, t["panel_border"]),
        ]

        text_width = panel_w - inset * 2
        text_height = panel_h - text_top * 2

        size = font_size_for(height, t["headline_size"])
        headline = layout_block(
            text.headline, self.fonts.font("bold", "normal", size), size,
            text_width, size * t["headline_line_height"], weight="bold", max_height=text_height,
        )
        layout.texts.append(PlacedText(headline, left.x + inset, panel_y + text_top, t["text_color"]))

        size = font_size_for(height, t["subtext_size"])
        subtext = layout_block(
            text.subtext, self.fonts.font("regular", "normal", size), size,
            text_width, size * t["subtext_line_height"], max_height=text_height,
        )
        layout.texts.append(PlacedText(subtext, right.x + inset, panel_y + text_top, t["text_color"]))


COMPOSITORS = {
    AdStyle.OVERLAY: OverlayCompositor,
    AdStyle.WAVE: WaveCompositor,
    AdStyle.SIDE_PANEL: SidePanelCompositor,
}


def select_style(style: AdStyle, fonts: FontConfig, logo_width_ratio: float = 0.15) -> StyleCompositor:
    """Instantiate the compositor for a style."""
    return COMPOSITORS[AdStyle(style)](fonts, logo_width_ratio=logo_width_ratio)
