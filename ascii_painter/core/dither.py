"""Floyd-Steinberg error diffusion onto a fixed palette."""

from __future__ import annotations

import numpy as np

from ascii_painter.core.palette import Palette

# (row offset, col offset, weight); weights sum to 1
FLOYD_STEINBERG_WEIGHTS: tuple[tuple[int, int, float], ...] = (
    (0, 1, 7 / 16),
    (1, -1, 3 / 16),
    (1, 0, 5 / 16),
    (1, 1, 1 / 16),
)


def diffuse_error(errors: np.ndarray, y: int, x: int, quant_error: np.ndarray) -> None:
    """Spread quant_error from (y, x) to its not-yet-visited neighbors.

    Targets outside the raster are skipped; their share is dropped.
    """
    h, w = errors.shape[:2]
    for dy, dx, weight in FLOYD_STEINBERG_WEIGHTS:
        ty, tx = y + dy, x + dx
        if 0 <= ty < h and 0 <= tx < w:
            errors[ty, tx] += quant_error * weight


def floyd_steinberg(rgb: np.ndarray, palette: Palette) -> np.ndarray:
    """Quantize an RGB image to a palette with Floyd-Steinberg dithering.

    Pixels are visited in raster order. Each pixel takes its accumulated
    error, is clamped to [0, 255] for the nearest-color search, and the
    difference between the unclamped value and the chosen color is diffused
    forward.

    Args:
        rgb: array of shape (h, w, 3), any numeric dtype.
        palette: colors to quantize to.

    Returns:
        int array of shape (h, w) holding palette indices.
    """
    src = rgb.astype(np.float64)
    h, w = src.shape[:2]
    errors = np.zeros((h, w, 3), dtype=np.float64)
    indices = np.zeros((h, w), dtype=np.int64)
    table = np.array([c.rgb for c in palette.colors], dtype=np.float64)

    for y in range(h):
        for x in range(w):
            px = src[y, x] + errors[y, x]
            errors[y, x] = 0.0

            idx = palette.nearest_index(np.clip(px, 0.0, 255.0))
            indices[y, x] = idx

            diffuse_error(errors, y, x, px - table[idx])

    return indices
