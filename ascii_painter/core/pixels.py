"""Owned, read-only RGB pixel buffer."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from PIL import Image

from ascii_painter.core.errors import EmptyImage


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """A rows x cols grid of RGB triples, row-major, origin top-left.

    The backing array is uint8 with shape (rows, cols, 3). The buffer holds a
    read-only view, so a render call can borrow the caller's array without
    copying it or locking the caller out of it.
    """

    data: np.ndarray

    def __post_init__(self) -> None:
        if self.data.ndim != 3 or self.data.shape[2] != 3:
            raise ValueError(f"Expected (rows, cols, 3) array, got {self.data.shape}")
        if self.data.shape[0] == 0 or self.data.shape[1] == 0:
            raise EmptyImage(f"Pixel buffer is empty: {self.data.shape[:2]}")
        if self.data.dtype != np.uint8:
            raise ValueError(f"Expected uint8 data, got {self.data.dtype}")
        data = self.data.view()
        data.setflags(write=False)
        object.__setattr__(self, "data", data)

    @classmethod
    def from_array(cls, arr: np.ndarray) -> PixelBuffer:
        """Build from a (rows, cols, 3) RGB or (rows, cols) gray array.

        Values outside 0-255 are clipped; floats are rounded.
        """
        arr = np.asarray(arr)
        if arr.ndim == 2:
            arr = np.repeat(arr[:, :, np.newaxis], 3, axis=2)
        if arr.ndim != 3 or arr.shape[2] != 3:
            raise ValueError(f"Expected (rows, cols) or (rows, cols, 3), got {arr.shape}")
        if arr.shape[0] == 0 or arr.shape[1] == 0:
            raise EmptyImage(f"Pixel buffer is empty: {arr.shape[:2]}")
        if arr.dtype != np.uint8:
            arr = np.clip(np.rint(arr.astype(np.float64)), 0, 255).astype(np.uint8)
        else:
            arr = arr.copy()
        return cls(arr)

    @classmethod
    def from_image(cls, img: Image.Image) -> PixelBuffer:
        """Build from a Pillow image of any mode."""
        return cls.from_array(np.array(img.convert("RGB"), dtype=np.uint8))

    @classmethod
    def filled(cls, rows: int, cols: int, rgb: tuple[int, int, int]) -> PixelBuffer:
        """Solid-color buffer."""
        if rows <= 0 or cols <= 0:
            raise EmptyImage(f"Pixel buffer is empty: {(rows, cols)}")
        arr = np.empty((rows, cols, 3), dtype=np.uint8)
        arr[:, :] = rgb
        return cls(arr)

    @property
    def rows(self) -> int:
        return self.data.shape[0]

    @property
    def cols(self) -> int:
        return self.data.shape[1]

    def to_image(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.data))
