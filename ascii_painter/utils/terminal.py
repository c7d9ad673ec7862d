"""Terminal size detection utilities."""

from __future__ import annotations

import shutil


def get_terminal_size(
    fallback_width: int = 120,
    fallback_height: int = 40,
) -> tuple[int, int]:
    """Get current terminal size in columns and rows.

    Returns (width, height). Falls back to provided defaults
    if terminal size cannot be determined.
    """
    try:
        size = shutil.get_terminal_size(fallback=(fallback_width, fallback_height))
        return size.columns, size.lines
    except (ValueError, OSError):
        return fallback_width, fallback_height


def fit_box(reserve_lines: int = 1) -> tuple[int, int]:
    """Target (width, height) box filling the terminal.

    reserve_lines rows are left free for the shell prompt.
    """
    width, height = get_terminal_size()
    return max(width, 1), max(height - reserve_lines, 1)
