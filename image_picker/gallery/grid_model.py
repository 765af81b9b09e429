from __future__ import annotations

from datetime import datetime

from PySide6.QtCore import QAbstractListModel, QByteArray, QModelIndex, Qt

from image_picker.models import ImageObject

_KB = 1000
_MB = 1000**2
_GB = 1000**3


class ImageGridModel(QAbstractListModel):
    """List model behind the gallery grid.

    Row 0 is the first cell shown. Rows hold `ImageObject`s; image bytes are
    exposed as a QByteArray for the cell to decode.
    """

    class Roles:
        Identifier = Qt.ItemDataRole.UserRole + 1
        Date = Qt.ItemDataRole.UserRole + 2
        DateText = Qt.ItemDataRole.UserRole + 3
        SizeBytes = Qt.ItemDataRole.UserRole + 4
        SizeText = Qt.ItemDataRole.UserRole + 5
        ImageData = Qt.ItemDataRole.UserRole + 6

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._objects: list[ImageObject] = []
        self._role_getters = {
            int(self.Roles.Identifier): lambda o: o.identifier,
            int(self.Roles.Date): lambda o: o.date,
            int(self.Roles.DateText): lambda o: self._fmt_date(o.date),
            int(self.Roles.SizeBytes): lambda o: o.size,
            int(self.Roles.SizeText): lambda o: self._fmt_size(o.size),
            int(self.Roles.ImageData): lambda o: QByteArray(o.image_data),
            int(Qt.ItemDataRole.DisplayRole): lambda o: o.identifier,
        }

    # ---- Qt model basics -----------------------------------------
    def rowCount(self, parent: QModelIndex | None = None) -> int:  # type: ignore[override]
        if parent is not None and parent.isValid():
            return 0
        return len(self._objects)

    def roleNames(self) -> dict[int, bytes]:  # type: ignore[override]
        return {
            int(self.Roles.Identifier): b"identifier",
            int(self.Roles.Date): b"date",
            int(self.Roles.DateText): b"dateText",
            int(self.Roles.SizeBytes): b"sizeBytes",
            int(self.Roles.SizeText): b"sizeText",
            int(self.Roles.ImageData): b"imageData",
        }

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):  # type: ignore[override]
        if not index.isValid():
            return None

        row = int(index.row())
        if not (0 <= row < len(self._objects)):
            return None

        getter = self._role_getters.get(int(role))
        if getter is None:
            return None
        return getter(self._objects[row])

    # ---- mutations -------------------------------------------------
    def set_objects(self, objects: list[ImageObject]) -> None:
        self.beginResetModel()
        try:
            self._objects = list(objects)
        finally:
            self.endResetModel()

    def insert_object(self, row: int, obj: ImageObject) -> None:
        if not 0 <= row <= len(self._objects):
            raise IndexError(f"row {row} out of range for insert into {len(self._objects)} rows")
        self.beginInsertRows(QModelIndex(), row, row)
        try:
            self._objects.insert(row, obj)
        finally:
            self.endInsertRows()

    def remove_row(self, row: int) -> ImageObject:
        if not 0 <= row < len(self._objects):
            raise IndexError(f"row {row} out of range for {len(self._objects)} rows")
        self.beginRemoveRows(QModelIndex(), row, row)
        try:
            return self._objects.pop(row)
        finally:
            self.endRemoveRows()

    def objects(self) -> list[ImageObject]:
        return list(self._objects)

    def object_at(self, row: int) -> ImageObject | None:
        if 0 <= row < len(self._objects):
            return self._objects[row]
        return None

    @staticmethod
    def _fmt_date(value: datetime) -> str:
        return value.astimezone().strftime("%Y-%m-%d %H:%M")

    @staticmethod
    def _fmt_size(size_bytes: int) -> str:
        size_bytes = max(int(size_bytes), 0)
        if size_bytes < _KB:
            return f"{size_bytes} B"
        if size_bytes < _MB:
            return f"{size_bytes / _KB:.1f} KB"
        if size_bytes < _GB:
            return f"{size_bytes / _MB:.1f} MB"
        return f"{size_bytes / _GB:.1f} GB"
