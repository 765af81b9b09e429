"""Failures raised by the gallery store.

Write failures chain the underlying exception (`raise ... from e`) so callers
can inspect `__cause__`.
"""

from __future__ import annotations


class DataPersistenceError(Exception):
    """Base class for every store failure."""


class FileDoesNotExistError(DataPersistenceError):
    def __init__(self, path: str) -> None:
        super().__init__(f"file does not exist: {path}")
        self.path = path


class NoDataError(DataPersistenceError):
    def __init__(self, path: str) -> None:
        super().__init__(f"no data could be read from: {path}")
        self.path = path


class DecodingError(DataPersistenceError):
    pass


class SavingError(DataPersistenceError):
    pass


class DeletingError(DataPersistenceError):
    pass


class ItemIndexError(DataPersistenceError, IndexError):
    def __init__(self, index: int, count: int) -> None:
        super().__init__(f"index {index} out of range for {count} items")
        self.index = index
        self.count = count
