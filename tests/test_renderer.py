"""Tests for the glyph rendering pipeline."""

import numpy as np
import pytest

from ascii_painter.core.charsets import CharsetTable, CharStyle
from ascii_painter.core.color import ColorMode
from ascii_painter.core.errors import InvalidCharset, InvalidGeometry, InvalidPalette
from ascii_painter.core.palette import DEFAULT_PALETTE, Palette
from ascii_painter.core.pixels import PixelBuffer
from ascii_painter.core.renderer import (
    Cell,
    RenderedGrid,
    RenderOptions,
    _gamma_indices,
    render,
)

ALL_MODES = [ColorMode.GRAYSCALE, ColorMode.TRUECOLOR, ColorMode.PALETTE_DITHER]


def _exact(width, height, **kwargs):
    """Options that keep the requested size exactly."""
    return RenderOptions(width=width, height=height, preserve_aspect_ratio=False, **kwargs)


def _noise(rows=24, cols=30, seed=11):
    rng = np.random.default_rng(seed)
    return PixelBuffer.from_array(rng.integers(0, 256, (rows, cols, 3), dtype=np.uint8))


class TestRenderOptions:
    def test_defaults(self):
        opts = RenderOptions()
        assert (opts.width, opts.height) == (120, 40)
        assert opts.char_style == CharStyle.SIMPLE
        assert opts.color_mode == ColorMode.GRAYSCALE
        assert opts.preserve_aspect_ratio is True
        assert opts.contrast == 1.0
        assert opts.brightness == 0.0


class TestGrayscale:
    def test_all_black_is_spaces(self):
        grid = render(PixelBuffer.filled(10, 10, (0, 0, 0)), _exact(10, 10))
        assert grid.lines == [" " * 10] * 10
        assert all(cell.color is None for row in grid.rows for cell in row)

    def test_all_white_is_densest_glyph(self):
        grid = render(PixelBuffer.filled(10, 10, (255, 255, 255)), _exact(10, 10))
        assert grid.lines == ["@" * 10] * 10

    def test_all_white_default_geometry(self):
        grid = render(PixelBuffer.filled(10, 10, (255, 255, 255)), RenderOptions())
        # square source, corrected aspect 2.0 <= 3.0: width = 40 * 2
        assert (grid.width, grid.height) == (80, 40)
        assert set("".join(grid.lines)) == {"@"}

    def test_aspect_correct_size(self):
        grid = render(PixelBuffer.filled(100, 200, (50, 50, 50)), RenderOptions())
        assert (grid.width, grid.height) == (120, 30)

    def test_custom_charset_string(self):
        grid = render(PixelBuffer.filled(2, 2, (255, 255, 255)), _exact(2, 2), charset="ab")
        assert grid.lines == ["bb", "bb"]

    def test_charset_override_beats_style(self):
        table = CharsetTable.from_glyphs("xyz")
        grid = render(
            PixelBuffer.filled(2, 2, (0, 0, 0)),
            _exact(2, 2, char_style=CharStyle.BLOCKS),
            charset=table,
        )
        assert grid.lines == ["xx", "xx"]

    def test_blocks_style(self):
        grid = render(
            PixelBuffer.filled(3, 3, (255, 255, 255)), _exact(3, 3, char_style=CharStyle.BLOCKS)
        )
        assert grid.lines == ["███"] * 3

    def test_brightness_changes_output(self):
        buf = PixelBuffer.filled(4, 4, (128, 128, 128))
        bright = render(buf, _exact(4, 4, brightness=100.0))
        dark = render(buf, _exact(4, 4, brightness=-100.0))
        assert bright.lines != dark.lines

    def test_contrast_identity_matches_default(self):
        buf = _noise()
        assert render(buf, _exact(30, 24)) == render(buf, _exact(30, 24, contrast=1.0, brightness=0.0))


class TestTruecolor:
    def test_background_is_pixel_color(self):
        grid = render(PixelBuffer.filled(3, 4, (200, 10, 30)), _exact(4, 3, color_mode=ColorMode.TRUECOLOR))
        assert (grid.width, grid.height) == (4, 3)
        for row in grid.rows:
            for cell in row:
                assert cell.color == (200, 10, 30)

    def test_glyph_from_luminance(self):
        grid = render(
            PixelBuffer.filled(2, 2, (255, 255, 255)), _exact(2, 2, color_mode=ColorMode.TRUECOLOR)
        )
        assert grid.lines == ["@@", "@@"]

    def test_empty_glyph_replaced_by_space(self):
        table = CharsetTable.from_glyphs(["", "#"])
        grid = render(
            PixelBuffer.filled(2, 3, (0, 0, 0)),
            _exact(3, 2, color_mode=ColorMode.TRUECOLOR),
            charset=table,
        )
        assert grid.lines == ["   ", "   "]
        assert grid.rows[0][0] == Cell(" ", (0, 0, 0))

    def test_row_length_equals_width(self):
        grid = render(_noise(), _exact(30, 24, color_mode=ColorMode.TRUECOLOR))
        assert all(len(row) == 30 for row in grid.rows)


class TestPaletteDither:
    def test_colors_come_from_palette(self):
        grid = render(_noise(), _exact(30, 24, color_mode=ColorMode.PALETTE_DITHER))
        allowed = {c.rgb for c in DEFAULT_PALETTE.colors}
        assert {cell.color for row in grid.rows for cell in row} <= allowed

    def test_deterministic(self):
        buf = _noise()
        opts = _exact(30, 24, color_mode=ColorMode.PALETTE_DITHER, char_style=CharStyle.DETAILED)
        assert render(buf, opts) == render(buf, opts)

    def test_solid_palette_color(self):
        grid = render(
            PixelBuffer.filled(5, 5, (0, 0, 255)), _exact(5, 5, color_mode=ColorMode.PALETTE_DITHER)
        )
        assert {cell.color for row in grid.rows for cell in row} == {(0, 0, 255)}

    def test_flat_image_uses_gamma_curve(self):
        # luma 128, no edges: (128/255)^2.2 * 255 = 55.98 -> 55.98 * 9 / 255 = 1.98 -> 1
        grid = render(
            PixelBuffer.filled(4, 4, (128, 128, 128)),
            _exact(4, 4, color_mode=ColorMode.PALETTE_DITHER),
        )
        assert set("".join(grid.lines)) == {"."}

    def test_custom_palette(self):
        pal = Palette.from_colors([("black", (0, 0, 0)), ("white", (255, 255, 255))])
        grid = render(
            _noise(), _exact(30, 24, color_mode=ColorMode.PALETTE_DITHER), palette=pal
        )
        assert {cell.color for row in grid.rows for cell in row} <= {(0, 0, 0), (255, 255, 255)}

    def test_empty_palette_raises(self):
        with pytest.raises(InvalidPalette):
            render(_noise(), _exact(30, 24, color_mode=ColorMode.PALETTE_DITHER), palette=[])

    def test_empty_palette_ignored_outside_dither(self):
        grid = render(_noise(), _exact(30, 24), palette=[])
        assert grid.height == 24


class TestGammaIndices:
    def test_black_and_white(self):
        luma = np.array([[0, 255]], dtype=np.uint8)
        edges = np.zeros((1, 2), dtype=np.uint8)
        assert _gamma_indices(luma, edges, 9).tolist() == [[0, 9]]

    def test_edges_raise_density_and_clamp(self):
        luma = np.array([[200, 250]], dtype=np.uint8)
        flat = _gamma_indices(luma, np.zeros((1, 2), dtype=np.uint8), 9)
        edged = _gamma_indices(luma, np.full((1, 2), 255, dtype=np.uint8), 9)
        assert edged[0, 0] > flat[0, 0]
        assert edged[0, 1] == 9


class TestBoundaries:
    @pytest.mark.parametrize("mode", ALL_MODES)
    def test_single_pixel(self, mode):
        grid = render(PixelBuffer.filled(1, 1, (90, 160, 220)), _exact(1, 1, color_mode=mode))
        assert (grid.width, grid.height) == (1, 1)

    @pytest.mark.parametrize("mode", ALL_MODES)
    def test_single_pixel_source_upscaled(self, mode):
        grid = render(PixelBuffer.filled(1, 1, (90, 160, 220)), RenderOptions(color_mode=mode))
        assert (grid.width, grid.height) == (80, 40)

    @pytest.mark.parametrize("mode", ALL_MODES)
    def test_single_row_and_column(self, mode):
        assert len(render(_noise(1, 9), _exact(9, 1, color_mode=mode)).lines[0]) == 9
        assert render(_noise(9, 1), _exact(1, 9, color_mode=mode)).height == 9


class TestValidation:
    def test_short_charset(self):
        with pytest.raises(InvalidCharset):
            render(_noise(), _exact(10, 10), charset="#")

    def test_zero_target_height(self):
        with pytest.raises(InvalidGeometry):
            render(_noise(), RenderOptions(height=0))

    def test_zero_target_without_aspect(self):
        with pytest.raises(InvalidGeometry):
            render(_noise(), _exact(0, 10))


class TestRenderedGrid:
    def test_empty_grid(self):
        grid = RenderedGrid(())
        assert (grid.width, grid.height) == (0, 0)
        assert grid.lines == []
