"""
Style catalogue for generated ads.

The set of styles is closed: each one is an AdStyle member carrying a wire id
("Style1".."Style3") and a dict of layout constants consumed by its
compositor. Colors are RGBA tuples; fractions are relative to the background
image's width (x) or height (y).
"""

from enum import Enum

from app.errors import InvalidStyleError


class AdStyle(str, Enum):
    OVERLAY = "Style1"
    WAVE = "Style2"
    SIDE_PANEL = "Style3"

    @classmethod
    def from_id(cls, style_id: str) -> "AdStyle":
        """Resolve a wire id ("Style2") or a style name ("wave", "SidePanel")."""
        if style_id is None:
            raise InvalidStyleError(str(style_id), available_style_ids())
        for style in cls:
            if style.value == style_id:
                return style
        key = style_id.strip().lower().replace("-", "_")
        aliases = {
            "overlay": cls.OVERLAY,
            "wave": cls.WAVE,
            "side_panel": cls.SIDE_PANEL,
            "sidepanel": cls.SIDE_PANEL,
        }
        if key in aliases:
            return aliases[key]
        raise InvalidStyleError(style_id, available_style_ids())


# ============================================
# STYLE THEMES
# ============================================
STYLE_THEMES = {
    AdStyle.OVERLAY: {
        "id": AdStyle.OVERLAY.value,
        "name": "Overlay",
        "description": "Translucent dark boxes behind the text, centered CTA",
        "emoji_policy": "substitute",
        "padding_x": 0.04,
        "text_width": 0.9,
        "headline_size": 0.04,
        "headline_spacing": 6,
        "subtext_size": 0.03,
        "subtext_spacing": 5,
        "box_inset": 10,
        "box_fill": (0, 0, 0, 128),
        "text_color": (255, 255, 255, 255),
        "cta_size": 0.035,
        "cta_padding_x": 24,
        "cta_padding_y": None,
        "cta_height_factor": 1.8,
        "cta_radius": 12,
        "cta_fill": (179, 0, 0, 255),
        "cta_text": (255, 255, 255, 255),
        "cta_align": "center",
        "cta_margin_bottom": 30,
        "logo_position": "bottom_left",
    },
    AdStyle.WAVE: {
        "id": AdStyle.WAVE.value,
        "name": "Wave",
        "description": "Accent-colored wave band across the bottom third",
        "emoji_policy": "substitute",
        "padding_x": 0.05,
        "band_height": 0.35,
        "wave_dip": 60,
        "wave_rise": 60,
        "wave_tail": 40,
        "text_offset": 25,
        "headline_size": 0.04,
        "headline_line_height": 1.3,
        "subtext_size": 0.03,
        "subtext_line_height": 1.4,
        "subtext_gap": 10,
        "text_color": (30, 30, 30, 255),
        "cta_size": 0.03,
        "cta_padding_x": 28,
        "cta_padding_y": None,
        "cta_height_factor": 1.8,
        "cta_radius": 14,
        "cta_fill": (179, 0, 0, 255),
        "cta_text": (255, 255, 255, 255),
        "cta_align": "right",
        "cta_margin_bottom": 20,
        "logo_position": "top_left",
    },
    AdStyle.SIDE_PANEL: {
        "id": AdStyle.SIDE_PANEL.value,
        "name": "Side Panel",
        "description": "Gradient side panels framing the product, shadowed CTA",
        "emoji_policy": "strip",
        "panel_width": 0.18,
        "panel_height": 0.6,
        "panel_top": 0.2,
        "panel_inset": 10,
        "panel_text_top": 20,
        "panel_dark": (0, 0, 0, 191),
        "panel_light": (0, 0, 0, 77),
        "panel_border": (255, 255, 255, 26),
        "headline_size": 0.035,
        "headline_line_height": 1.2,
        "subtext_size": 0.028,
        "subtext_line_height": 1.3,
        "text_color": (255, 255, 255, 255),
        "cta_size": 0.032,
        "cta_padding_x": 32,
        "cta_padding_y": 16,
        "cta_height_factor": None,
        "cta_radius": 16,
        "cta_fill": (220, 38, 38, 255),
        "cta_text": (255, 255, 255, 255),
        "cta_align": "center",
        "cta_margin_bottom": 40,
        "cta_shadow_offset": 2,
        "cta_shadow": (0, 0, 0, 77),
        "cta_highlight": ((255, 255, 255, 51), (255, 255, 255, 13)),
        "logo_position": "top_center",
    },
}


def get_style_theme(style: AdStyle) -> dict:
    """Get the layout constants for a style."""
    return STYLE_THEMES[style]


def available_style_ids() -> list[str]:
    return [style.value for style in AdStyle]


def list_styles():
    """List all ad styles."""
    return [{"id": t["id"], "name": t["name"], "description": t["description"]} for t in STYLE_THEMES.values()]
