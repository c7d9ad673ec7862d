"""Precondition failures raised before any per-pixel work starts."""

from __future__ import annotations


class RenderError(ValueError):
    """Base class for invalid render inputs."""


class InvalidGeometry(RenderError):
    """A source or target dimension is zero or negative."""


class InvalidCharset(RenderError):
    """A charset has fewer than two glyphs."""


class InvalidPalette(RenderError):
    """A palette has no colors."""


class EmptyImage(RenderError):
    """A pixel buffer has zero rows or zero columns."""
