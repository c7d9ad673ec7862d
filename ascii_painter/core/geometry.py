"""Target cell geometry and resampling."""

from __future__ import annotations

import logging

import cv2

from ascii_painter.core.errors import InvalidGeometry
from ascii_painter.core.pixels import PixelBuffer

logger = logging.getLogger(__name__)

# A terminal cell is roughly twice as tall as it is wide.
CELL_ASPECT_CORRECTION = 2.0

# Smallest width/height produced when the aspect ratio is preserved.
MIN_CELLS = 20


def target_size(
    src_width: int,
    src_height: int,
    width: int,
    height: int,
    preserve_aspect_ratio: bool = True,
) -> tuple[int, int]:
    """Compute the (width, height) cell grid for a source image.

    With preserve_aspect_ratio the source aspect is corrected for tall
    terminal cells, then fitted into the width x height box. Derived
    dimensions are floored and clamped to at least MIN_CELLS.
    """
    if src_width <= 0 or src_height <= 0:
        raise InvalidGeometry(f"Invalid source size: {src_width}x{src_height}")
    if width <= 0 or height <= 0:
        raise InvalidGeometry(f"Invalid target size: {width}x{height}")

    if not preserve_aspect_ratio:
        return width, height

    corrected = src_width / src_height * CELL_ASPECT_CORRECTION

    if corrected > width / height:
        # Width-constrained
        height = int(width / corrected)
    else:
        # Height-constrained
        width = int(height * corrected)

    return max(width, MIN_CELLS), max(height, MIN_CELLS)


def resize(buffer: PixelBuffer, width: int, height: int) -> PixelBuffer:
    """Bilinear resample to exactly height rows by width columns."""
    if width <= 0 or height <= 0:
        raise InvalidGeometry(f"Invalid target size: {width}x{height}")
    if (buffer.cols, buffer.rows) == (width, height):
        return buffer
    logger.debug("Resizing %dx%d -> %dx%d", buffer.cols, buffer.rows, width, height)
    # cv2 wants a writable array; buffer data is read-only
    resized = cv2.resize(buffer.data.copy(), (width, height), interpolation=cv2.INTER_LINEAR)
    return PixelBuffer(resized)
