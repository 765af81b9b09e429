"""Gallery controller: glue between the grid, the cells and the store.

The host UI (action sheets, image picker, camera) calls into this object:

- `load_image_objects()` at startup
- `on_image_selected(data)` when the picker returns a photo
- `did_long_press(cell)` from cells, answered with `deleteRequested(row)`
- `delete_image_object(row)` once the user confirmed the deletion

Store failures are logged and re-emitted through `errorOccurred`; the grid is
never rolled back.
"""

from __future__ import annotations

from PySide6.QtCore import QObject, Signal

from image_picker.image_engine.resize import ImageProcessingError, prepare_image_data
from image_picker.logger import get_logger
from image_picker.models import ImageObject
from image_picker.path_utils import path_to_documents
from image_picker.persistence import DataPersistenceError, FileDoesNotExistError, PersistenceHelper
from image_picker.settings_manager import SettingsManager

from .cell import ImageCell
from .grid_model import ImageGridModel

_logger = get_logger("gallery")


class GalleryController(QObject):
    imageInserted = Signal(int)  # row
    imageRemoved = Signal(int)  # row
    deleteRequested = Signal(int)  # row
    errorOccurred = Signal(str)

    def __init__(
        self,
        store: PersistenceHelper | None = None,
        settings: SettingsManager | None = None,
        screen_bounds: tuple[int, int] | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        if settings is None:
            settings = SettingsManager(str(path_to_documents("settings.json")))
        self._settings = settings
        if store is None:
            store = PersistenceHelper(path_to_documents(settings.images_filename))
        self._store = store
        self._screen_bounds = screen_bounds or settings.screen_bounds
        self.model = ImageGridModel(self)

    @property
    def store(self) -> PersistenceHelper:
        return self._store

    @property
    def image_objects(self) -> list[ImageObject]:
        return self.model.objects()

    def load_image_objects(self) -> bool:
        try:
            objects = self._store.load_items()
        except FileDoesNotExistError:
            # First launch: nothing saved yet.
            _logger.info("no saved images at %s", self._store.file_path)
            return False
        except DataPersistenceError as e:
            self._report("loading objects error", e)
            return False
        self.model.set_objects(objects)
        _logger.debug("loaded %d image objects", len(objects))
        return True

    def on_image_selected(self, data: bytes | None) -> ImageObject | None:
        """Resize, insert at the top of the grid and persist a newly picked image."""
        if data is None:
            _logger.warning("image is nil")
            return None

        try:
            resized = prepare_image_data(data, self._screen_bounds, self._settings.jpeg_quality)
        except ImageProcessingError as e:
            self._report("image processing error", e)
            return None

        image_object = ImageObject.now(resized)

        self.model.insert_object(0, image_object)
        self.imageInserted.emit(0)

        # The store appends; the grid shows newest first.
        try:
            self._store.create(image_object)
        except DataPersistenceError as e:
            self._report("saving error", e)
        return image_object

    # ---- cells -----------------------------------------------------------
    def configure_cell(self, row: int, cell: ImageCell | None = None) -> ImageCell:
        image_object = self.model.object_at(row)
        if image_object is None:
            raise IndexError(f"row {row} out of range for {self.model.rowCount()} rows")
        if cell is None:
            cell = ImageCell()
        cell.row = row
        cell.delegate = self
        cell.configure_cell(image_object)
        return cell

    def did_long_press(self, cell: ImageCell) -> None:
        row = cell.row
        if not 0 <= row < self.model.rowCount():
            _logger.debug("long press on stale cell (row=%s)", row)
            return
        self.deleteRequested.emit(row)

    def item_size(self, screen_width: float | None = None) -> tuple[float, float]:
        """Square grid item, a fixed fraction of the screen width."""
        width = float(screen_width if screen_width is not None else self._screen_bounds[0])
        side = width * self._settings.grid_item_ratio
        return side, side

    # ---- deletion ----------------------------------------------------------
    def delete_image_object(self, row: int) -> bool:
        # Bring the store in line with what the grid shows before deleting by row.
        self._store.sync(self.model.objects())
        try:
            objects = self._store.load_items()
        except DataPersistenceError as e:
            self._report("loading error", e)
        else:
            if objects != self.model.objects():
                self.model.set_objects(objects)

        if not 0 <= row < self.model.rowCount():
            _logger.warning("delete ignored, row %d out of range", row)
            return False

        self.model.remove_row(row)
        self.imageRemoved.emit(row)

        try:
            self._store.delete(row)
        except (DataPersistenceError, IndexError) as e:
            self._report("error deleting item", e)
        return True

    def _report(self, what: str, error: Exception) -> None:
        _logger.error("%s: %s", what, error)
        self.errorOccurred.emit(f"{what}: {error}")
