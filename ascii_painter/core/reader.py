"""Image loading from local files and HTTP(S) URLs.

Fetching and decoding both fail before a PixelBuffer exists, so the
renderer only ever sees a valid, non-empty image.
"""

from __future__ import annotations

import io
import json
import logging
import urllib.error
import urllib.request
from pathlib import Path
from urllib.parse import urlencode, urlparse

from PIL import Image, UnidentifiedImageError

from ascii_painter.core.pixels import PixelBuffer

logger = logging.getLogger(__name__)

USER_AGENT = "ascii-painter/0.1"
DEFAULT_TIMEOUT = 30.0

SEARCH_URL = "https://api.waifu.im/search"

# Tags accepted by --tag; the search itself is restricted to SFW results.
VALID_TAGS = (
    "maid",
    "waifu",
    "marin-kitagawa",
    "mori-calliope",
    "raiden-shogun",
    "selfies",
    "uniform",
    "kamisato-ayaka",
)


class FetchError(ValueError):
    """The image could not be downloaded."""


class DecodeError(ValueError):
    """The bytes are not a decodable image."""


class UnknownTagError(ValueError):
    """The search tag is not one of VALID_TAGS."""


def is_url(path: str) -> bool:
    """Check if the input looks like an HTTP(S) URL."""
    parsed = urlparse(str(path))
    return parsed.scheme in ("http", "https")


def fetch_bytes(url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """Download the body of an HTTP(S) GET.

    Raises:
        FetchError: on network failure, a non-200 status, or an empty body.
    """
    logger.debug("Fetching %s", url)
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            status = getattr(resp, "status", 200)
            if status != 200:
                raise FetchError(f"Failed to download {url}: status {status}")
            data = resp.read()
    except urllib.error.HTTPError as e:
        raise FetchError(f"Failed to download {url}: status {e.code}") from e
    except urllib.error.URLError as e:
        raise FetchError(f"Failed to download {url}: {e.reason}") from e

    if not data:
        raise FetchError(f"Downloaded file is empty: {url}")
    logger.debug("Fetched %d bytes from %s", len(data), url)
    return data


def search_image_url(tag: str, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Ask the image search API for a picture matching tag; returns its URL.

    Raises:
        UnknownTagError: if tag is not in VALID_TAGS.
        FetchError: on network failure, a non-200 status, a malformed
            response, or no matching images.
    """
    if tag not in VALID_TAGS:
        raise UnknownTagError(f"Unknown tag {tag!r}; choose from: {', '.join(VALID_TAGS)}")

    query = urlencode({"included_tags": tag, "is_nsfw": "false"})
    url = f"{SEARCH_URL}?{query}"
    logger.debug("Searching %s", url)
    req = urllib.request.Request(
        url, headers={"User-Agent": USER_AGENT, "Accept": "application/json"}
    )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            status = getattr(resp, "status", 200)
            if status != 200:
                raise FetchError(f"Image search failed: status {status}")
            body = resp.read()
    except urllib.error.HTTPError as e:
        raise FetchError(f"Image search failed: status {e.code}") from e
    except urllib.error.URLError as e:
        raise FetchError(f"Image search failed: {e.reason}") from e

    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise FetchError(f"Image search returned invalid JSON: {e}") from e

    images = payload.get("images") if isinstance(payload, dict) else None
    if not isinstance(images, list) or not images:
        raise FetchError(f"No images found for tag {tag!r}")
    first = images[0]
    image_url = first.get("url") if isinstance(first, dict) else None
    if not image_url:
        raise FetchError(f"Image search result has no url for tag {tag!r}")

    logger.info("Found %s for tag %s", image_url, tag)
    return image_url


def decode_image(data: bytes) -> PixelBuffer:
    """Decode compressed image bytes (PNG, JPEG, GIF, ...) to RGB pixels.

    Raises:
        DecodeError: if Pillow cannot identify or read the data.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return PixelBuffer.from_image(img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise DecodeError(f"Failed to decode image: {e}") from e


def load_image(path: str | Path, timeout: float = DEFAULT_TIMEOUT) -> PixelBuffer:
    """Load an image from a local path or an HTTP(S) URL."""
    path_str = str(path)
    if is_url(path_str):
        return decode_image(fetch_bytes(path_str, timeout=timeout))

    local_path = Path(path_str)
    if not local_path.exists():
        raise FileNotFoundError(f"File not found: {local_path}")
    return decode_image(local_path.read_bytes())
