"""Color modes and ANSI truecolor escapes for terminal output."""

from __future__ import annotations

from enum import Enum
from typing import Sequence


class ColorMode(str, Enum):
    GRAYSCALE = "grayscale"
    TRUECOLOR = "truecolor"
    PALETTE_DITHER = "dither"


RGB = tuple[int, int, int]

RESET = "\033[0m"


def truecolor_fg(r: int, g: int, b: int) -> str:
    """Return ANSI escape for truecolor (24-bit) foreground."""
    return f"\033[38;2;{r};{g};{b}m"


def truecolor_bg(r: int, g: int, b: int) -> str:
    """Return ANSI escape for truecolor (24-bit) background."""
    return f"\033[48;2;{r};{g};{b}m"


def colorize_glyph(glyph: str, color: RGB | None, background: bool = True) -> str:
    """Wrap a glyph with a color escape and a reset.

    Uncolored glyphs are returned as-is.
    """
    if color is None:
        return glyph
    escape = truecolor_bg(*color) if background else truecolor_fg(*color)
    return f"{escape}{glyph}{RESET}"


def colorize_line(
    glyphs: Sequence[str],
    colors: Sequence[RGB | None],
    background: bool = True,
    compact: bool = False,
) -> str:
    """Colorize a row of glyphs with per-glyph colors.

    Args:
        glyphs: glyphs for this row.
        colors: one RGB tuple (or None for no color) per glyph.
        background: color the cell background instead of the glyph.
        compact: emit an escape only when the color changes, with one
            trailing reset, instead of wrapping every glyph.

    Returns:
        String with ANSI color escapes.
    """
    if not compact:
        return "".join(
            colorize_glyph(glyph, color, background) for glyph, color in zip(glyphs, colors)
        )

    parts: list[str] = []
    prev_escape = ""
    for glyph, color in zip(glyphs, colors):
        if color is None:
            esc = RESET if prev_escape else ""
        elif background:
            esc = truecolor_bg(*color)
        else:
            esc = truecolor_fg(*color)

        # Avoid repeating the same escape code
        if esc != prev_escape:
            parts.append(esc)
            prev_escape = esc if esc != RESET else ""
        parts.append(glyph)

    if prev_escape:
        parts.append(RESET)
    return "".join(parts)
