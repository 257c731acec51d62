"""Image helpers for page payloads.

Pages store JPEG bytes. Anything Pillow can open is accepted on capture and
re-encoded; anything it cannot open is treated as undecodable.
"""

import io
import logging
from typing import Optional

from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_JPEG_QUALITY = 80
DEFAULT_THUMBNAIL_SIZE = 256

_DECODE_ERRORS = (OSError, ValueError, TypeError, Image.DecompressionBombError)


def load_image(data: Optional[bytes]) -> Optional[Image.Image]:
    """Decode image bytes into a fully loaded PIL Image.

    Returns:
        The image, or None if ``data`` is None or cannot be decoded
    """
    if data is None:
        return None
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except _DECODE_ERRORS as e:
        logger.debug("Could not decode image (%d bytes): %s", len(data), e)
        return None
    return img


def to_rgb(img: Image.Image) -> Image.Image:
    """Convert to RGB if necessary (e.g., RGBA, P, L, CMYK mode)."""
    if img.mode != "RGB":
        return img.convert("RGB")
    return img


def encode_page_image(
    blob: bytes,
    quality: int = DEFAULT_JPEG_QUALITY,
) -> Optional[bytes]:
    """Re-encode a captured image as JPEG page data.

    Args:
        blob: Raw image bytes (any format Pillow understands)
        quality: JPEG quality, 1-100

    Returns:
        JPEG bytes, or None if the blob is not a decodable image
    """
    img = load_image(blob)
    if img is None:
        return None

    buffer = io.BytesIO()
    to_rgb(img).save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def downscale_image(img: Image.Image, max_dimension: int) -> Image.Image:
    """Downscale image if it exceeds the maximum dimension.

    Maintains aspect ratio. Only downscales; never upscales images.
    """
    width, height = img.size

    if width <= max_dimension and height <= max_dimension:
        return img

    scale = min(max_dimension / width, max_dimension / height)
    new_width = max(1, int(width * scale))
    new_height = max(1, int(height * scale))

    return img.resize((new_width, new_height), Image.Resampling.LANCZOS)


def make_thumbnail(
    data: Optional[bytes],
    max_dimension: int = DEFAULT_THUMBNAIL_SIZE,
) -> Optional[bytes]:
    """Render a PNG thumbnail of page data, or None if it can't be decoded."""
    img = load_image(data)
    if img is None:
        return None

    buffer = io.BytesIO()
    downscale_image(to_rgb(img), max_dimension).save(buffer, format="PNG")
    return buffer.getvalue()
