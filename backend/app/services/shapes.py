"""
Drawing primitives for ad composition.

Pillow has no path API with curves, so Path records canvas-style commands
(move/line/quadratic/cubic) and flattens curves into polygon points. Every
fill is drawn on a transparent layer and alpha-composited, which keeps
translucent colors blending with the photo underneath.
"""

from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageChops, ImageDraw

from app.models import LayoutBox, RGBA

CURVE_STEPS = 24


class RenderSurface:
    """The single RGBA raster a render draws onto."""

    def __init__(self, width: int, height: int, background: RGBA = (0, 0, 0, 255)):
        self.image = Image.new("RGBA", (int(width), int(height)), background)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def draw(self) -> ImageDraw.ImageDraw:
        return ImageDraw.Draw(self.image)

    def new_layer(self) -> Image.Image:
        return Image.new("RGBA", self.image.size, (0, 0, 0, 0))

    def composite(self, layer: Image.Image):
        self.image.alpha_composite(layer)

    def draw_image(self, img: Image.Image, box: Optional[LayoutBox] = None):
        """Draw an image scaled into box (full-bleed when box is None)."""
        if box is None:
            box = LayoutBox(0, 0, self.width, self.height)
        size = (max(1, round(box.width)), max(1, round(box.height)))
        img = img.convert("RGBA")
        if img.size != size:
            img = img.resize(size, Image.Resampling.LANCZOS)
        layer = self.new_layer()
        layer.paste(img, (round(box.x), round(box.y)))
        self.composite(layer)


class Path:
    """Canvas-like path builder."""

    def __init__(self):
        self.commands = []

    def move_to(self, x: float, y: float) -> "Path":
        self.commands.append(("M", x, y))
        return self

    def line_to(self, x: float, y: float) -> "Path":
        self.commands.append(("L", x, y))
        return self

    def quadratic_curve_to(self, cx: float, cy: float, x: float, y: float) -> "Path":
        self.commands.append(("Q", cx, cy, x, y))
        return self

    def bezier_curve_to(self, c1x: float, c1y: float, c2x: float, c2y: float, x: float, y: float) -> "Path":
        self.commands.append(("C", c1x, c1y, c2x, c2y, x, y))
        return self

    def close(self) -> "Path":
        self.commands.append(("Z",))
        return self

    def translated(self, dx: float, dy: float) -> "Path":
        moved = Path()
        for op, *coords in self.commands:
            shifted = [c + (dx if i % 2 == 0 else dy) for i, c in enumerate(coords)]
            moved.commands.append((op, *shifted))
        return moved

    def flatten(self, steps: int = CURVE_STEPS) -> list[list[tuple]]:
        """Return one polygon (list of points) per subpath."""
        contours = []
        points = []
        for op, *coords in self.commands:
            if op == "M":
                if len(points) > 1:
                    contours.append(points)
                points = [(coords[0], coords[1])]
            elif op == "L":
                points.append((coords[0], coords[1]))
            elif op == "Q":
                x0, y0 = points[-1]
                cx, cy, x, y = coords
                for i in range(1, steps + 1):
                    t = i / steps
                    px = (1 - t) ** 2 * x0 + 2 * (1 - t) * t * cx + t ** 2 * x
                    py = (1 - t) ** 2 * y0 + 2 * (1 - t) * t * cy + t ** 2 * y
                    points.append((px, py))
            elif op == "C":
                x0, y0 = points[-1]
                c1x, c1y, c2x, c2y, x, y = coords
                for i in range(1, steps + 1):
                    t = i / steps
                    mt = 1 - t
                    px = mt ** 3 * x0 + 3 * mt ** 2 * t * c1x + 3 * mt * t ** 2 * c2x + t ** 3 * x
                    py = mt ** 3 * y0 + 3 * mt ** 2 * t * c1y + 3 * mt * t ** 2 * c2y + t ** 3 * y
                    points.append((px, py))
            elif op == "Z":
                if len(points) > 1:
                    contours.append(points)
                points = [points[0]] if points else []
        if len(points) > 1:
            contours.append(points)
        return contours

    def mask(self, size: tuple) -> Image.Image:
        """Rasterize the path into an L-mode coverage mask."""
        mask = Image.new("L", size, 0)
        draw = ImageDraw.Draw(mask)
        for contour in self.flatten():
            if len(contour) >= 3:
                draw.polygon(contour, fill=255)
        return mask


def rounded_rect_path(box: LayoutBox, radius: float) -> Path:
    """Rounded rectangle built from four straight edges and four quadratic corners."""
    x, y, w, h = box.x, box.y, box.width, box.height
    r = max(0.0, min(radius, w / 2, h / 2))
    return (
        Path()
        .move_to(x + r, y)
        .line_to(x + w - r, y)
        .quadratic_curve_to(x + w, y, x + w, y + r)
        .line_to(x + w, y + h - r)
        .quadratic_curve_to(x + w, y + h, x + w - r, y + h)
        .line_to(x + r, y + h)
        .quadratic_curve_to(x, y + h, x, y + h - r)
        .line_to(x, y + r)
        .quadratic_curve_to(x, y, x + r, y)
        .close()
    )


def wave_band_path(width: float, height: float, top: float, dip: float = 60, rise: float = 60, tail: float = 40) -> Path:
    """Band from top to the bottom edge whose upper boundary is one cubic bezier."""
    return (
        Path()
        .move_to(0, top)
        .bezier_curve_to(width * 0.25, top + dip, width * 0.75, top - rise, width, top + tail)
        .line_to(width, height)
        .line_to(0, height)
        .close()
    )


def fill_rect(surface: RenderSurface, box: LayoutBox, fill: RGBA):
    layer = surface.new_layer()
    ImageDraw.Draw(layer).rectangle(box.as_xyxy(), fill=fill)
    surface.composite(layer)


def fill_path(surface: RenderSurface, path: Path, fill: RGBA):
    layer = surface.new_layer()
    draw = ImageDraw.Draw(layer)
    for contour in path.flatten():
        if len(contour) >= 3:
            draw.polygon(contour, fill=fill)
    surface.composite(layer)


def linear_gradient(size: tuple, start: RGBA, end: RGBA, horizontal: bool = True) -> Image.Image:
    """Two-stop gradient image; start sits at the left (or top) edge."""
    mask = Image.linear_gradient("L")
    if horizontal:
        mask = mask.rotate(90, expand=True)
    mask = mask.resize(size, Image.Resampling.BILINEAR)
    return Image.composite(Image.new("RGBA", size, end), Image.new("RGBA", size, start), mask)


def fill_linear_gradient(
    surface: RenderSurface,
    box: LayoutBox,
    start: RGBA,
    end: RGBA,
    horizontal: bool = True,
    clip: Optional[Path] = None,
):
    size = (max(1, round(box.width)), max(1, round(box.height)))
    layer = surface.new_layer()
    layer.paste(linear_gradient(size, start, end, horizontal), (round(box.x), round(box.y)))
    if clip is not None:
        alpha = ImageChops.multiply(layer.getchannel("A"), clip.mask(layer.size))
        layer.putalpha(alpha)
    surface.composite(layer)


def stroke_rect(surface: RenderSurface, box: LayoutBox, color: RGBA, width: int = 1):
    """Hairline (or width px) border just inside box."""
    layer = surface.new_layer()
    x0, y0, x1, y1 = box.as_xyxy()
    # boxes under 2 px collapse to a single row or column
    ImageDraw.Draw(layer).rectangle((x0, y0, max(x0, x1 - 1), max(y0, y1 - 1)), outline=color, width=width)
    surface.composite(layer)


@dataclass(frozen=True)
class RectShape:
    box: LayoutBox
    fill: RGBA

    def paint(self, surface: RenderSurface):
        fill_rect(surface, self.box, self.fill)


@dataclass(frozen=True)
class PathShape:
    path: Path
    fill: RGBA

    def paint(self, surface: RenderSurface):
        fill_path(surface, self.path, self.fill)


@dataclass(frozen=True)
class GradientShape:
    box: LayoutBox
    start: RGBA
    end: RGBA
    horizontal: bool = True
    clip: Optional[Path] = None

    def paint(self, surface: RenderSurface):
        fill_linear_gradient(surface, self.box, self.start, self.end, self.horizontal, self.clip)


@dataclass(frozen=True)
class OutlineShape:
    box: LayoutBox
    color: RGBA
    width: int = 1

    def paint(self, surface: RenderSurface):
        stroke_rect(surface, self.box, self.color, self.width)
