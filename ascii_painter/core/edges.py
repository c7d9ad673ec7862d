"""Edge strength from the discrete Laplacian of the luminance plane."""

from __future__ import annotations

import cv2
import numpy as np


def edge_strength(luma: np.ndarray) -> np.ndarray:
    """Compute per-pixel edge strength in 0-255.

    Takes the 3x3 aperture Laplacian of the whole plane, its magnitude, then
    min-max normalizes across the image. A flat plane yields zeros.

    Args:
        luma: 2D uint8 luminance array.

    Returns:
        2D uint8 array of the same shape.
    """
    laplacian = cv2.Laplacian(np.ascontiguousarray(luma, dtype=np.uint8), cv2.CV_16S, ksize=3)
    magnitude = cv2.convertScaleAbs(laplacian)
    return cv2.normalize(magnitude, None, 0, 255, cv2.NORM_MINMAX, cv2.CV_8U)
