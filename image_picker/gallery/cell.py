from __future__ import annotations

import enum
from typing import Protocol

from PySide6.QtGui import QImage

from image_picker.logger import get_logger
from image_picker.models import ImageObject

_logger = get_logger("cell")


class LongPressState(enum.Enum):
    BEGAN = "began"
    CHANGED = "changed"
    ENDED = "ended"
    CANCELLED = "cancelled"


class ImageCellDelegate(Protocol):
    def did_long_press(self, cell: ImageCell) -> None: ...


class ImageCell:
    """One grid cell: shows a record's image and reports long presses.

    A long press is reported once per gesture. The `BEGAN` state only arms
    the cell (the host cancels the gesture); the next state update notifies
    the delegate.
    """

    def __init__(self, row: int = -1, delegate: ImageCellDelegate | None = None) -> None:
        self.row = row
        self.delegate = delegate
        self.image: QImage | None = None
        self.identifier: str | None = None
        self._armed = False

    def configure_cell(self, image_object: ImageObject) -> bool:
        """Decode the record's bytes for display. Returns False if they do not decode."""
        self.identifier = image_object.identifier
        image = QImage.fromData(image_object.image_data)
        if image.isNull():
            _logger.debug("could not decode image for %s", image_object.identifier)
            self.image = None
            return False
        self.image = image
        return True

    def long_press_action(self, state: LongPressState) -> None:
        if state is LongPressState.BEGAN:
            self._armed = True
            return
        if not self._armed:
            return
        self._armed = False
        if self.delegate is not None:
            self.delegate.did_long_press(self)
