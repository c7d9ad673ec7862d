"""Brightness/contrast adjustment and luminance derivation."""

from __future__ import annotations

import numpy as np

from ascii_painter.core.pixels import PixelBuffer

# ITU-R BT.601 luma weights, in R, G, B order
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def adjust(buffer: PixelBuffer, contrast: float = 1.0, brightness: float = 0.0) -> PixelBuffer:
    """Apply out = clamp(round(in * contrast + brightness), 0, 255) per channel.

    contrast: multiplicative gain (1.0 = no change)
    brightness: additive offset in 0-255 space (0.0 = no change)
    """
    if contrast == 1.0 and brightness == 0.0:
        return buffer

    result = buffer.data.astype(np.float64) * contrast + brightness
    return PixelBuffer(np.clip(np.rint(result), 0, 255).astype(np.uint8))


def luminance(buffer: PixelBuffer) -> np.ndarray:
    """Perceptual grayscale plane, uint8 of shape (rows, cols)."""
    luma = buffer.data.astype(np.float64) @ LUMA_WEIGHTS
    return np.clip(np.rint(luma), 0, 255).astype(np.uint8)
