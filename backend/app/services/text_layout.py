"""
Greedy word wrapping against measured text widths.
"""

from typing import Callable, Literal

from PIL import ImageFont

from app.models import TextBlock

MeasureFn = Callable[[str], float]


def font_measure(font: ImageFont.FreeTypeFont) -> MeasureFn:
    """Measure rendered text width (advance) with a Pillow font."""
    return lambda text: font.getlength(text)


def _greedy_lines(text: str, max_width: float, measure: MeasureFn):
    """Yield wrapped lines one at a time, the last one included."""
    current_line = []
    for word in text.split():
        test_line = " ".join(current_line + [word])
        if measure(test_line) > max_width and current_line:
            yield " ".join(current_line)
            current_line = [word]
        else:
            current_line.append(word)
    yield " ".join(current_line)


def wrap(text: str, max_width: float, measure: MeasureFn) -> list[str]:
    """Wrap text to fit within max_width.

    Words are never split; a word wider than max_width sits alone on its own
    line. The final line is always emitted, so empty text gives [""].
    """
    return list(_greedy_lines(text, max_width, measure))


def wrap_bounded(
    text: str,
    max_width: float,
    max_height: float,
    line_height: float,
    measure: MeasureFn,
) -> list[str]:
    """Wrap text, keeping only the lines that fit within max_height.

    Wrapping stops at the first line that would overflow; the words left over
    are dropped without an ellipsis.
    """
    if line_height <= 0:
        raise ValueError("line_height must be positive")
    lines = []
    for line in _greedy_lines(text, max_width, measure):
        if (len(lines) + 1) * line_height > max_height:
            break
        if line:
            lines.append(line)
    return lines


def layout_block(
    text: str,
    font: ImageFont.FreeTypeFont,
    font_size: int,
    max_width: float,
    line_height: float,
    weight: Literal["bold", "regular"] = "regular",
    style: Literal["normal", "italic"] = "normal",
    max_height: float | None = None,
) -> TextBlock:
    """Wrap text with a font and package the result as a TextBlock."""
    measure = font_measure(font)
    if max_height is None:
        lines = wrap(text, max_width, measure)
    else:
        lines = wrap_bounded(text, max_width, max_height, line_height, measure)
    return TextBlock(
        lines=tuple(lines),
        font_size=font_size,
        line_height=line_height,
        weight=weight,
        style=style,
    )
