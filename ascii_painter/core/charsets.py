"""Character set presets for glyph rendering.

Each charset is ordered from lowest to highest visual density, so a
luminance of 0 (black) maps to the first glyph and 255 (white) to the last.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

import numpy as np

from ascii_painter.core.errors import InvalidCharset


class CharStyle(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"
    BLOCKS = "blocks"


# Ordered sparse → dense
SIMPLE_GLYPHS = " .:-=+*#%@"

DETAILED_GLYPHS = (
    " .'`^\",:;Il!i><~+_-?][}{1)(|\\/"
    "tfjrxnuvczXYUJCLQ0OZmwqpdbkhao"
    "*#MW&8%B@$"
)

# Unicode shade blocks
BLOCK_GLYPHS = " ░▒▓█"


@dataclass(frozen=True)
class CharsetTable:
    glyphs: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.glyphs) < 2:
            raise InvalidCharset(
                f"Charset needs at least 2 glyphs, got {len(self.glyphs)}"
            )

    @classmethod
    def from_glyphs(cls, glyphs: str | Iterable[str]) -> CharsetTable:
        """Build a table from a string (one glyph per code point) or a sequence."""
        return cls(tuple(glyphs))

    def __len__(self) -> int:
        return len(self.glyphs)

    @property
    def max_index(self) -> int:
        return len(self.glyphs) - 1

    def index_for_luminance(self, luminance: int) -> int:
        """Map a luminance value (0-255) to a glyph index."""
        idx = int(luminance) * self.max_index // 255
        return max(0, min(idx, self.max_index))

    def map_indices(self, luminance: np.ndarray) -> np.ndarray:
        """Map a 2D uint8 luminance plane to glyph indices."""
        indices = luminance.astype(np.int64) * self.max_index // 255
        return np.clip(indices, 0, self.max_index)


CHARSETS: dict[CharStyle, CharsetTable] = {
    CharStyle.SIMPLE: CharsetTable.from_glyphs(SIMPLE_GLYPHS),
    CharStyle.DETAILED: CharsetTable.from_glyphs(DETAILED_GLYPHS),
    CharStyle.BLOCKS: CharsetTable.from_glyphs(BLOCK_GLYPHS),
}


def charset_for(style: CharStyle) -> CharsetTable:
    """Look up the preset table for a style."""
    return CHARSETS[CharStyle(style)]
