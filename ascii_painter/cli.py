"""Command-line interface for ascii_painter.

Renders an image file or URL to the terminal, with a JSON mode for
scripting.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from ascii_painter.core.charsets import CharStyle
from ascii_painter.core.color import ColorMode
from ascii_painter.core.reader import VALID_TAGS
from ascii_painter.logging_conf import setup_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ascii-painter",
        description="Render an image as ASCII/Unicode block art in the terminal.",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("input", nargs="?", help="Input image file path or HTTP(S) URL.")
    source.add_argument(
        "--tag",
        help="Fetch a random image for this search tag instead of INPUT "
        "(one of: " + ", ".join(VALID_TAGS) + ").",
    )
    parser.add_argument(
        "--style",
        choices=[s.value for s in CharStyle],
        default="simple",
        help="Character set preset (default: simple).",
    )
    parser.add_argument(
        "--color",
        choices=[c.value for c in ColorMode],
        default="grayscale",
        help="Color mode (default: grayscale).",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=120,
        help="Target width in characters (default: 120).",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=40,
        help="Target height in characters (default: 40).",
    )
    parser.add_argument(
        "--fit",
        action="store_true",
        help="Use the terminal size as the target box.",
    )
    parser.add_argument(
        "--no-aspect",
        action="store_true",
        help="Use --width/--height verbatim instead of preserving aspect ratio.",
    )
    parser.add_argument(
        "--contrast",
        type=float,
        default=1.0,
        help="Contrast gain (default: 1.0).",
    )
    parser.add_argument(
        "--brightness",
        type=float,
        default=0.0,
        help="Brightness offset in 0-255 space (default: 0.0).",
    )
    parser.add_argument(
        "--glyphs",
        help="Custom glyph ramp, sparse to dense. Overrides --style.",
    )
    parser.add_argument(
        "--compact",
        action="store_true",
        help="Only emit a color escape when the color changes.",
    )
    parser.add_argument(
        "--rich",
        action="store_true",
        help="Print through a Rich console instead of raw escape codes.",
    )
    parser.add_argument(
        "--save",
        help="Also save the rendering as a .png or .gif image.",
    )
    parser.add_argument(
        "--font-size",
        type=int,
        default=14,
        help="Font size for --save (default: 14).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output structured JSON instead of colored text.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING).",
    )
    parser.add_argument(
        "--log-file",
        help="Also write logs to this rotating file.",
    )
    return parser


def _fail(message: str, code: str, is_json: bool) -> int:
    """Report an error on stderr, as JSON or plain text; returns exit status 1."""
    if is_json:
        err = {"status": "error", "error": message, "code": code}
        print(json.dumps(err), file=sys.stderr)
    else:
        print(f"Error: {message}", file=sys.stderr)
    return 1


def _save(grid, args: argparse.Namespace) -> int | None:
    """Save the grid with --save; returns an exit status on failure."""
    from ascii_painter.core.writer import save_image

    try:
        save_image(grid, Path(args.save), font_size=args.font_size)
    except (OSError, ValueError) as e:
        logger.error("Saving %s failed: %s", args.save, e)
        return _fail(f"Could not save {args.save}: {e}", "SAVE_FAILED", args.json)
    return None


def _run(args: argparse.Namespace) -> int:
    from ascii_painter.core.reader import (
        FetchError,
        UnknownTagError,
        is_url,
        load_image,
        search_image_url,
    )
    from ascii_painter.core.renderer import RenderOptions, render
    from ascii_painter.core.writer import grid_to_rich_text, write_grid
    from ascii_painter.utils.terminal import fit_box

    is_json = args.json

    if args.tag:
        try:
            source = search_image_url(args.tag)
        except UnknownTagError as e:
            return _fail(str(e), "INVALID_TAG", is_json)
        except FetchError as e:
            logger.error("Image search failed: %s", e)
            return _fail(str(e), "DOWNLOAD_FAILED", is_json)
        input_display = source
    else:
        source = args.input
        input_display = source if is_url(source) else str(Path(source).resolve())

    try:
        buffer = load_image(source)
    except FileNotFoundError as e:
        return _fail(str(e), "FILE_NOT_FOUND", is_json)
    except FetchError as e:
        logger.error("Download failed: %s", e)
        return _fail(str(e), "DOWNLOAD_FAILED", is_json)
    except ValueError as e:
        logger.error("Could not load %s: %s", input_display, e)
        return _fail(str(e), "INVALID_INPUT", is_json)

    width, height = fit_box() if args.fit else (args.width, args.height)
    options = RenderOptions(
        width=width,
        height=height,
        char_style=CharStyle(args.style),
        color_mode=ColorMode(args.color),
        preserve_aspect_ratio=not args.no_aspect,
        contrast=args.contrast,
        brightness=args.brightness,
    )

    try:
        grid = render(buffer, options, charset=args.glyphs)
    except ValueError as e:
        logger.error("Rendering failed: %s", e)
        return _fail(str(e), "RENDER_ERROR", is_json)

    if not is_json:
        # The grid goes out before saving so a failed save does not lose it
        if args.rich:
            from rich.console import Console

            console = Console(file=sys.stdout, highlight=False)
            console.print(grid_to_rich_text(grid), soft_wrap=True)
        else:
            write_grid(grid, sys.stdout, compact=args.compact)
        if args.save:
            status = _save(grid, args)
            if status is not None:
                return status
            print(f"Saved to {args.save}", file=sys.stderr)
        return 0

    if args.save:
        status = _save(grid, args)
        if status is not None:
            return status

    result = {
        "status": "success",
        "input": input_display,
        "width": grid.width,
        "height": grid.height,
        "settings": {
            "style": options.char_style.value,
            "color": options.color_mode.value,
            "preserve_aspect_ratio": options.preserve_aspect_ratio,
            "contrast": options.contrast,
            "brightness": options.brightness,
        },
        "lines": grid.lines,
    }
    if args.tag:
        result["tag"] = args.tag
    if args.save:
        result["output"] = str(Path(args.save).resolve())
    print(json.dumps(result, indent=2))
    return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    sys.exit(_run(args))


if __name__ == "__main__":
    main()
