"""Gallery persistence: one plist file holding the whole ordered collection.

Usage:
    from image_picker.persistence import PersistenceHelper

    store = PersistenceHelper(path_to_documents("images.plist"))
    items = store.load_items()
    store.create(ImageObject.now(jpeg_bytes))
    store.delete(0)
"""

from .errors import (
    DataPersistenceError,
    DecodingError,
    DeletingError,
    FileDoesNotExistError,
    ItemIndexError,
    NoDataError,
    SavingError,
)
from .store import PersistenceHelper

__all__ = [
    "DataPersistenceError",
    "DecodingError",
    "DeletingError",
    "FileDoesNotExistError",
    "ItemIndexError",
    "NoDataError",
    "PersistenceHelper",
    "SavingError",
]
