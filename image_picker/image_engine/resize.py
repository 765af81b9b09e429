"""Resize selected photos before they are stored.

Pure functions, no Qt dependencies. Geometry is plain float math; pixel work
is done with pyvips.
"""

from __future__ import annotations

import contextlib
from typing import Any

from image_picker.logger import get_logger

_logger = get_logger("resize")

_pyvips: Any | None = None


class ImageProcessingError(Exception):
    """Raised when image bytes cannot be decoded, resized or encoded."""


def _get_pyvips_module() -> Any:
    global _pyvips
    if _pyvips is None:
        import pyvips  # type: ignore

        # Configure pyvips caches to avoid memory growth
        with contextlib.suppress(Exception):
            pyvips.cache_set_max(0)
            pyvips.cache_set_max_mem(0)
            pyvips.cache_set_max_files(0)
        _pyvips = pyvips
    return _pyvips


def aspect_fit_rect(
    aspect_width: float, aspect_height: float, bounds_width: float, bounds_height: float
) -> tuple[float, float, float, float]:
    """Largest rect with the given aspect ratio that fits inside the bounds.

    The rect is centered in the bounds. Returns (x, y, width, height).

    Raises:
        ValueError: if any dimension is not positive
    """
    if aspect_width <= 0 or aspect_height <= 0:
        raise ValueError(f"invalid aspect size {aspect_width}x{aspect_height}")
    if bounds_width <= 0 or bounds_height <= 0:
        raise ValueError(f"invalid bounds {bounds_width}x{bounds_height}")

    scale = min(bounds_width / aspect_width, bounds_height / aspect_height)
    width = aspect_width * scale
    height = aspect_height * scale
    x = (bounds_width - width) / 2.0
    y = (bounds_height - height) / 2.0
    return x, y, width, height


def _to_pixels(value: float) -> int:
    return max(1, round(value))


def _orientation(image: Any) -> int:
    try:
        if image.get_typeof("orientation") == 0:
            return 1
        return int(image.get("orientation"))
    except Exception:
        return 1


def image_size(data: bytes) -> tuple[int, int]:
    """(width, height) of encoded image bytes as displayed.

    EXIF orientations 5-8 swap the stored width and height, the same way
    `thumbnail_buffer` auto-rotates when resizing.
    """
    pyvips = _get_pyvips_module()
    try:
        image = pyvips.Image.new_from_buffer(data, "", access="sequential")
    except Exception as e:
        raise ImageProcessingError(f"could not decode image: {e}") from e
    width, height = int(image.width), int(image.height)
    if _orientation(image) in (5, 6, 7, 8):
        return height, width
    return width, height


def resize_image_data(data: bytes, width: float, height: float) -> Any:
    """Decode `data` and resample it to exactly width x height (rounded).

    Returns a pyvips image in sRGB without alpha.
    """
    pyvips = _get_pyvips_module()
    tw = _to_pixels(width)
    th = _to_pixels(height)
    try:
        image = pyvips.Image.thumbnail_buffer(data, tw, height=th, size="force")
        with contextlib.suppress(Exception):
            image = image.colourspace("srgb")
        if image.hasalpha():
            image = image.flatten(background=[0, 0, 0])
        if image.bands > 3:
            image = image.extract_band(0, n=3)
        elif image.bands < 3:
            image = pyvips.Image.bandjoin([image] * 3)
        if image.format != "uchar":
            image = image.cast("uchar")
    except Exception as e:
        _logger.debug("resize failed: %s", e)
        raise ImageProcessingError(f"could not resize image to {tw}x{th}: {e}") from e
    return image


def encode_jpeg(image: Any, quality: int = 100) -> bytes:
    q = max(1, min(100, int(quality)))
    try:
        return bytes(image.write_to_buffer(".jpg", Q=q))
    except Exception as e:
        raise ImageProcessingError(f"could not encode JPEG: {e}") from e


def prepare_image_data(data: bytes, bounds: tuple[float, float], quality: int = 100) -> bytes:
    """Fit an image into `bounds` keeping its aspect ratio and return JPEG bytes.

    Images smaller than the bounds are scaled up, matching a full-screen
    gallery cell.
    """
    if not data:
        raise ImageProcessingError("no image data")

    src_w, src_h = image_size(data)
    _logger.debug("original image size is %dx%d", src_w, src_h)

    _, _, fit_w, fit_h = aspect_fit_rect(src_w, src_h, bounds[0], bounds[1])
    resized = resize_image_data(data, fit_w, fit_h)
    _logger.debug("resized image size is %dx%d", resized.width, resized.height)

    return encode_jpeg(resized, quality)
