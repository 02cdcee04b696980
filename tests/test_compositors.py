import math

import pytest
from PIL import Image

from app.design_templates import AdStyle
from app.models import DecodedImage, Palette, SanitizedText
from app.services.compositors import (
    OverlayCompositor,
    SidePanelCompositor,
    WaveCompositor,
    font_size_for,
    select_style,
)
from app.services.emoji import EmojiPolicy
from app.services.shapes import GradientShape, OutlineShape, PathShape, RectShape, RenderSurface

LONG_TEXT = " ".join(["Premium farm fresh cuts at unbeatable prices"] * 20)


def _image(size=(400, 300), color=(255, 255, 255, 255)) -> DecodedImage:
    return DecodedImage(image=Image.new("RGBA", size, color))


def _text(headline="Fresh Meat Frenzy", subtext="Only this week", cta="Shop Now") -> SanitizedText:
    return SanitizedText(headline=headline, subtext=subtext, cta=cta)


def _render(compositor, image, palette=None, text=None, logo=None):
    surface = RenderSurface(image.width, image.height)
    layout = compositor.compose(None, text or _text(), image, palette or Palette.default(), surface, logo)
    return layout, surface


def test_font_size_for():
    assert font_size_for(1000, 0.04) == 40
    assert font_size_for(10, 0.04) == 1


@pytest.mark.parametrize("style,cls", [
    (AdStyle.OVERLAY, OverlayCompositor),
    (AdStyle.WAVE, WaveCompositor),
    (AdStyle.SIDE_PANEL, SidePanelCompositor),
])
def test_select_style(fonts, style, cls):
    assert isinstance(select_style(style, fonts), cls)


def test_emoji_policy_per_style(fonts):
    assert select_style(AdStyle.OVERLAY, fonts).emoji_policy == EmojiPolicy.SUBSTITUTE
    assert select_style(AdStyle.WAVE, fonts).emoji_policy == EmojiPolicy.SUBSTITUTE
    assert select_style(AdStyle.SIDE_PANEL, fonts).emoji_policy == EmojiPolicy.STRIP


def test_overlay_plan(fonts):
    layout = OverlayCompositor(fonts).plan(_text(), _image(), Palette.default())
    assert [type(s) for s in layout.shapes] == [RectShape, RectShape]
    headline_box, subtext_box = (s.box for s in layout.shapes)
    # subtext box starts where the headline text ends
    assert subtext_box.y == pytest.approx(layout.texts[0].y + layout.texts[0].block.height)
    assert headline_box.x == pytest.approx(400 * 0.04 - 10)
    assert layout.texts[1].block.style == "italic"
    assert layout.button.box.x == pytest.approx((400 - layout.button.box.width) / 2)


def test_overlay_box_darkens_background(fonts):
    _, surface = _render(OverlayCompositor(fonts), _image())
    r, _, _, _ = surface.image.getpixel((8, 8))
    assert 120 <= r <= 135


def test_wave_band_uses_accent(fonts):
    palette = Palette(accent_color="#FDBB2D")
    layout, surface = _render(WaveCompositor(fonts), _image(), palette)
    band = layout.shapes[0]
    assert isinstance(band, PathShape)
    assert band.fill == (253, 187, 45, 255)
    assert surface.image.getpixel((5, 295)) == (253, 187, 45, 255)


def test_wave_button_is_right_aligned(fonts):
    layout = WaveCompositor(fonts).plan(_text(), _image(), Palette.default())
    assert layout.button.box.right == pytest.approx(400 - 400 * 0.05)
    assert layout.button.box.bottom == pytest.approx(300 - 20)


def test_side_panel_shapes(fonts):
    layout = SidePanelCompositor(fonts).plan(_text(), _image((1000, 1000)), Palette.default())
    assert [type(s) for s in layout.shapes] == [GradientShape, OutlineShape, GradientShape, OutlineShape]
    left, right = layout.shapes[0].box, layout.shapes[2].box
    assert left.x == 0 and right.right == pytest.approx(1000)
    assert left.width == pytest.approx(180)


def test_side_panel_text_is_bounded(fonts):
    text = _text(headline=LONG_TEXT, subtext=LONG_TEXT)
    layout = SidePanelCompositor(fonts).plan(text, _image((1000, 1000)), Palette.default())
    text_height = 1000 * 0.6 - 40
    for placed in layout.texts:
        block = placed.block
        assert len(block.lines) <= math.floor(text_height / block.line_height)
        assert block.height <= text_height


def test_side_panel_gradient_darkest_at_outer_edge(fonts):
    _, surface = _render(SidePanelCompositor(fonts), _image((1000, 1000)))
    y = 200 + 600 - 5
    outer = surface.image.getpixel((3, y))[0]
    inner = surface.image.getpixel((177, y))[0]
    assert outer < inner
    right_outer = surface.image.getpixel((996, y))[0]
    right_inner = surface.image.getpixel((823, y))[0]
    assert right_outer < right_inner


@pytest.mark.parametrize("style", list(AdStyle))
def test_logo_is_placed_and_scaled(fonts, style):
    logo = _image((200, 100), (0, 200, 0, 255))
    layout, surface = _render(select_style(style, fonts), _image(), logo=logo)
    box = layout.logo_box
    assert box.width == 60 and box.height == 30
    assert 0 <= box.x and box.right <= 400
    assert 0 <= box.y and box.bottom <= 300
    center = (int(box.x + box.width / 2), int(box.y + box.height / 2))
    r, g, b, a = surface.image.getpixel(center)
    assert g > 190 and r < 10 and b < 10 and a == 255


def test_no_logo_box_without_logo(fonts):
    layout = OverlayCompositor(fonts).plan(_text(), _image(), Palette.default())
    assert layout.logo_box is None
