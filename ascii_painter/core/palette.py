"""Fixed color palettes and nearest-color search."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from ascii_painter.core.errors import InvalidPalette


@dataclass(frozen=True)
class PaletteColor:
    name: str
    rgb: tuple[int, int, int]


@dataclass(frozen=True, eq=False)
class Palette:
    """Ordered, non-empty set of named colors.

    Declaration order breaks distance ties: the first closest color wins.
    """

    colors: tuple[PaletteColor, ...]

    def __post_init__(self) -> None:
        if not self.colors:
            raise InvalidPalette("Palette must contain at least one color")
        table = np.array([c.rgb for c in self.colors], dtype=np.float64)
        object.__setattr__(self, "_table", table)

    @classmethod
    def from_colors(cls, colors: Iterable[tuple[str, tuple[int, int, int]]]) -> Palette:
        return cls(tuple(PaletteColor(name, tuple(rgb)) for name, rgb in colors))

    def __len__(self) -> int:
        return len(self.colors)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Palette):
            return NotImplemented
        return self.colors == other.colors

    def __hash__(self) -> int:
        return hash(self.colors)

    def nearest_index(self, rgb: np.ndarray) -> int:
        """Index of the palette color closest to rgb in Euclidean RGB distance."""
        diff = self._table - np.asarray(rgb, dtype=np.float64)
        dist = np.einsum("ij,ij->i", diff, diff)
        # argmin returns the first minimum, so earlier entries win ties
        return int(np.argmin(dist))


DEFAULT_PALETTE = Palette.from_colors(
    [
        ("red", (255, 0, 0)),
        ("green", (0, 255, 0)),
        ("blue", (0, 0, 255)),
        ("yellow", (255, 255, 0)),
        ("cyan", (0, 255, 255)),
        ("magenta", (255, 0, 255)),
        ("white", (255, 255, 255)),
        ("black", (0, 0, 0)),
    ]
)
