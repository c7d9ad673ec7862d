"""Output sinks for rendered grids.

Encodes a RenderedGrid as ANSI-colored terminal lines, as a Rich Text, or
draws it onto a Pillow image for saving as PNG or GIF.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from PIL import Image, ImageDraw, ImageFont
from rich.text import Text

from ascii_painter.core.color import colorize_line
from ascii_painter.core.renderer import RenderedGrid

# Monospace font size and metrics
DEFAULT_FONT_SIZE = 14
CHAR_WIDTH_RATIO = 0.6  # Approximate char width / font size for monospace
DEFAULT_FOREGROUND = (255, 255, 255)


def encode_grid(
    grid: RenderedGrid,
    background: bool = True,
    compact: bool = False,
) -> list[str]:
    """Encode each row of a grid as a string with ANSI truecolor escapes."""
    return [
        colorize_line(
            [cell.glyph for cell in row],
            [cell.color for cell in row],
            background=background,
            compact=compact,
        )
        for row in grid.rows
    ]


def write_grid(
    grid: RenderedGrid,
    stream: TextIO | None = None,
    background: bool = True,
    compact: bool = False,
) -> None:
    """Write a grid to a text stream (stdout by default), one line per row."""
    out = stream if stream is not None else sys.stdout
    for line in encode_grid(grid, background=background, compact=compact):
        out.write(line)
        out.write("\n")
    out.flush()


def grid_to_rich_text(grid: RenderedGrid, background: bool = True) -> Text:
    """Convert a grid to a Rich Text object for rendering on a Rich console."""
    text = Text()
    for i, row in enumerate(grid.rows):
        if i > 0:
            text.append("\n")
        for cell in row:
            if cell.color is None:
                text.append(cell.glyph)
                continue
            r, g, b = cell.color
            style = f"on rgb({r},{g},{b})" if background else f"rgb({r},{g},{b})"
            text.append(cell.glyph, style=style)
    return text


def _get_font(size: int = DEFAULT_FONT_SIZE) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """Get a monospace font for rendering."""
    # Try common monospace fonts
    for name in [
        "DejaVuSansMono.ttf",
        "Menlo.ttc",
        "Consolas.ttf",
        "CourierNew.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
        "/System/Library/Fonts/Menlo.ttc",
    ]:
        try:
            return ImageFont.truetype(name, size)
        except (IOError, OSError):
            continue
    return ImageFont.load_default()


def render_grid_to_image(
    grid: RenderedGrid,
    font_size: int = DEFAULT_FONT_SIZE,
    bg_color: tuple[int, int, int] = (0, 0, 0),
) -> Image.Image:
    """Draw a grid onto a PIL Image.

    Colored cells get their color as a filled cell background; glyphs are
    drawn in white on top.
    """
    font = _get_font(font_size)

    char_w = max(int(font_size * CHAR_WIDTH_RATIO), 1)
    char_h = font_size + 2
    img_w = max(grid.width * char_w, 1)
    img_h = max(grid.height * char_h, 1)

    img = Image.new("RGB", (img_w, img_h), bg_color)
    draw = ImageDraw.Draw(img)

    for row_idx, row in enumerate(grid.rows):
        y = row_idx * char_h
        for col_idx, cell in enumerate(row):
            x = col_idx * char_w
            if cell.color is not None:
                draw.rectangle([x, y, x + char_w - 1, y + char_h - 1], fill=cell.color)
            if cell.glyph.strip():
                draw.text((x, y), cell.glyph, fill=DEFAULT_FOREGROUND, font=font)

    return img


def save_image(
    grid: RenderedGrid,
    output_path: Path,
    font_size: int = DEFAULT_FONT_SIZE,
) -> None:
    """Save a grid as an image in the format given by the file extension."""
    output_path = Path(output_path)
    suffix = output_path.suffix.lower()
    if suffix not in (".png", ".gif"):
        raise ValueError(f"Unsupported output format: {suffix}")
    img = render_grid_to_image(grid, font_size)
    img.save(str(output_path))
