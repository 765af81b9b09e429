"""Image processing for newly selected photos (aspect-fit resize + JPEG encode)."""

from .resize import (
    ImageProcessingError,
    aspect_fit_rect,
    encode_jpeg,
    image_size,
    prepare_image_data,
    resize_image_data,
)

__all__ = [
    "ImageProcessingError",
    "aspect_fit_rect",
    "encode_jpeg",
    "image_size",
    "prepare_image_data",
    "resize_image_data",
]
