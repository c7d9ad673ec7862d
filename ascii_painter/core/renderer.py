"""Glyph rendering pipeline.

Tone map → resize → { grayscale | truecolor | palette dither } → grid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from ascii_painter.core.charsets import CharsetTable, CharStyle, charset_for
from ascii_painter.core.color import RGB, ColorMode
from ascii_painter.core.dither import floyd_steinberg
from ascii_painter.core.edges import edge_strength
from ascii_painter.core.geometry import resize, target_size
from ascii_painter.core.palette import DEFAULT_PALETTE, Palette, PaletteColor
from ascii_painter.core.pixels import PixelBuffer
from ascii_painter.core.tone import adjust, luminance

logger = logging.getLogger(__name__)

# Display gamma applied to the edge-blended brightness in dither mode.
GAMMA = 2.2

# Share of edge strength added to luminance before gamma correction.
EDGE_WEIGHT = 0.5


@dataclass(frozen=True)
class RenderOptions:
    """Settings that affect output."""

    width: int = 120
    height: int = 40
    char_style: CharStyle = CharStyle.SIMPLE
    color_mode: ColorMode = ColorMode.GRAYSCALE
    preserve_aspect_ratio: bool = True
    contrast: float = 1.0  # multiplicative gain
    brightness: float = 0.0  # additive offset in 0-255 space


@dataclass(frozen=True)
class Cell:
    glyph: str
    color: RGB | None = None  # background color; None in grayscale mode


@dataclass(frozen=True)
class RenderedGrid:
    """Rows of colored glyph cells."""

    rows: tuple[tuple[Cell, ...], ...]

    @property
    def height(self) -> int:
        return len(self.rows)

    @property
    def width(self) -> int:
        return len(self.rows[0]) if self.rows else 0

    @property
    def lines(self) -> list[str]:
        """Plain glyph text, one string per row."""
        return ["".join(cell.glyph for cell in row) for row in self.rows]


def _resolve_charset(charset: CharsetTable | str | Sequence[str] | None, style: CharStyle) -> CharsetTable:
    if charset is None:
        return charset_for(style)
    if isinstance(charset, CharsetTable):
        return charset
    return CharsetTable.from_glyphs(charset)


def _resolve_palette(palette: Palette | Iterable[PaletteColor] | None) -> Palette:
    if palette is None:
        return DEFAULT_PALETTE
    if isinstance(palette, Palette):
        return palette
    return Palette(tuple(palette))


def _gamma_indices(luma: np.ndarray, edges: np.ndarray, max_index: int) -> np.ndarray:
    """Glyph indices from gamma-corrected luminance blended with edge strength."""
    blended = (luma.astype(np.float64) + EDGE_WEIGHT * edges.astype(np.float64)) / 255.0
    adjusted = np.power(blended, GAMMA) * 255.0
    indices = (adjusted * max_index / 255.0).astype(np.int64)
    return np.clip(indices, 0, max_index)


def _color_cell(glyphs: tuple[str, ...], idx: int, color: RGB) -> Cell:
    if 0 <= idx < len(glyphs) and glyphs[idx]:
        return Cell(glyphs[idx], color)
    return Cell(" ", color)


def _render_grayscale(img: PixelBuffer, charset: CharsetTable) -> RenderedGrid:
    indices = charset.map_indices(luminance(img))
    glyphs = charset.glyphs
    return RenderedGrid(tuple(tuple(Cell(glyphs[i]) for i in row) for row in indices))


def _render_truecolor(img: PixelBuffer, charset: CharsetTable) -> RenderedGrid:
    indices = charset.map_indices(luminance(img))
    rgb = np.clip(img.data, 0, 255)
    glyphs = charset.glyphs

    rows = []
    for y in range(img.rows):
        rows.append(
            tuple(
                _color_cell(glyphs, int(indices[y, x]), tuple(int(c) for c in rgb[y, x]))
                for x in range(img.cols)
            )
        )
    return RenderedGrid(tuple(rows))


def _render_palette_dither(img: PixelBuffer, charset: CharsetTable, palette: Palette) -> RenderedGrid:
    luma = luminance(img)
    # The edge pass needs the whole plane before any cell is finalized
    edges = edge_strength(luma)
    glyph_indices = _gamma_indices(luma, edges, charset.max_index)
    color_indices = floyd_steinberg(img.data, palette)
    glyphs = charset.glyphs

    rows = []
    for y in range(img.rows):
        rows.append(
            tuple(
                _color_cell(
                    glyphs,
                    int(glyph_indices[y, x]),
                    palette.colors[color_indices[y, x]].rgb,
                )
                for x in range(img.cols)
            )
        )
    return RenderedGrid(tuple(rows))


def render(
    buffer: PixelBuffer,
    options: RenderOptions = RenderOptions(),
    charset: CharsetTable | str | Sequence[str] | None = None,
    palette: Palette | Iterable[PaletteColor] | None = None,
) -> RenderedGrid:
    """Render a pixel buffer to a grid of glyph cells.

    All inputs are validated before any pixel is touched, so a failure never
    leaves a partial grid.

    Args:
        buffer: decoded source image.
        options: render settings.
        charset: glyph table overriding the preset chosen by char_style.
        palette: colors for dither mode; defaults to DEFAULT_PALETTE.

    Raises:
        InvalidCharset: fewer than 2 glyphs.
        InvalidPalette: empty palette in dither mode.
        InvalidGeometry: zero or negative target dimensions.
    """
    table = _resolve_charset(charset, options.char_style)
    mode = ColorMode(options.color_mode)
    colors = _resolve_palette(palette) if mode == ColorMode.PALETTE_DITHER else None

    width, height = target_size(
        buffer.cols,
        buffer.rows,
        options.width,
        options.height,
        options.preserve_aspect_ratio,
    )
    logger.debug(
        "Rendering %dx%d source as %dx%d cells (%s, %d glyphs)",
        buffer.cols,
        buffer.rows,
        width,
        height,
        mode.value,
        len(table),
    )

    img = adjust(buffer, options.contrast, options.brightness)
    img = resize(img, width, height)

    if mode == ColorMode.GRAYSCALE:
        return _render_grayscale(img, table)
    if mode == ColorMode.TRUECOLOR:
        return _render_truecolor(img, table)
    return _render_palette_dither(img, table, colors)
