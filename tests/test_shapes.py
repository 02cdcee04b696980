import pytest
from PIL import Image

from app.models import LayoutBox
from app.services.shapes import (
    Path,
    RenderSurface,
    fill_linear_gradient,
    fill_path,
    fill_rect,
    linear_gradient,
    rounded_rect_path,
    stroke_rect,
    wave_band_path,
)


def test_path_flatten_curves():
    path = Path().move_to(0, 0).quadratic_curve_to(50, 100, 100, 0).close()
    contours = path.flatten(steps=10)
    assert len(contours) == 1
    points = contours[0]
    assert points[0] == (0, 0)
    assert points[-1] == (100, 0)
    assert len(points) == 11


def test_translated_path_moves_every_point():
    path = Path().move_to(0, 0).line_to(10, 0).bezier_curve_to(10, 5, 5, 10, 0, 10).close()
    moved = path.translated(2, 3).flatten()
    before = path.flatten()
    for (x0, y0), (x1, y1) in zip(before[0], moved[0]):
        assert x1 - x0 == pytest.approx(2)
        assert y1 - y0 == pytest.approx(3)


def test_rounded_rect_radius_is_clamped():
    box = LayoutBox(0, 0, 40, 10)
    points = rounded_rect_path(box, 100).flatten()[0]
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    assert min(xs) >= 0 and max(xs) <= 40
    assert min(ys) >= 0 and max(ys) <= 10


def test_wave_band_reaches_bottom_corners():
    points = wave_band_path(200, 100, 60).flatten()[0]
    assert (200, 100) in points
    assert (0, 100) in points
    assert points[0] == (0, 60)


def test_path_mask_covers_inside_only():
    mask = rounded_rect_path(LayoutBox(10, 10, 80, 40), 8).mask((100, 60))
    assert mask.getpixel((50, 30)) == 255
    assert mask.getpixel((2, 2)) == 0


def test_translucent_rect_blends_with_background():
    surface = RenderSurface(50, 50, background=(255, 255, 255, 255))
    fill_rect(surface, LayoutBox(0, 0, 20, 20), (0, 0, 0, 128))
    r, g, b, a = surface.image.getpixel((5, 5))
    assert 120 <= r <= 135
    assert a == 255
    assert surface.image.getpixel((40, 40)) == (255, 255, 255, 255)


def test_fill_path_opaque():
    surface = RenderSurface(100, 100)
    fill_path(surface, wave_band_path(100, 100, 50), (253, 200, 48, 255))
    assert surface.image.getpixel((50, 98)) == (253, 200, 48, 255)
    assert surface.image.getpixel((50, 5)) == (0, 0, 0, 255)


def test_linear_gradient_directions():
    start, end = (0, 0, 0, 255), (255, 255, 255, 255)
    horizontal = linear_gradient((100, 10), start, end, horizontal=True)
    assert horizontal.getpixel((0, 5))[0] < 20
    assert horizontal.getpixel((99, 5))[0] > 235
    vertical = linear_gradient((10, 100), start, end, horizontal=False)
    assert vertical.getpixel((5, 0))[0] < 20
    assert vertical.getpixel((5, 99))[0] > 235


def test_clipped_gradient_stays_inside_clip():
    surface = RenderSurface(100, 100, background=(0, 0, 0, 255))
    box = LayoutBox(10, 10, 80, 80)
    clip = rounded_rect_path(box, 30)
    fill_linear_gradient(surface, box, (255, 255, 255, 255), (255, 255, 255, 255), clip=clip)
    assert surface.image.getpixel((50, 50)) == (255, 255, 255, 255)
    # corner of the box is outside the rounded clip
    assert surface.image.getpixel((11, 11)) == (0, 0, 0, 255)


def test_stroke_rect_draws_border_only():
    surface = RenderSurface(40, 40, background=(0, 0, 0, 255))
    stroke_rect(surface, LayoutBox(0, 0, 40, 40), (255, 255, 255, 255))
    assert surface.image.getpixel((0, 20)) == (255, 255, 255, 255)
    assert surface.image.getpixel((39, 20)) == (255, 255, 255, 255)
    assert surface.image.getpixel((20, 20)) == (0, 0, 0, 255)


def test_draw_image_scales_to_box():
    surface = RenderSurface(100, 100)
    surface.draw_image(Image.new("RGB", (10, 10), (0, 255, 0)), LayoutBox(50, 50, 20, 20))
    r, g, b, a = surface.image.getpixel((60, 60))
    assert g > 240 and r < 15 and a == 255
    assert surface.image.getpixel((40, 40)) == (0, 0, 0, 255)
