"""Headless gallery UI layer: grid model, cells and the controller that drives the store."""

from .cell import ImageCell, ImageCellDelegate, LongPressState
from .controller import GalleryController
from .grid_model import ImageGridModel

__all__ = ["GalleryController", "ImageCell", "ImageCellDelegate", "ImageGridModel", "LongPressState"]
