"""Single-file store for the gallery.

`PersistenceHelper` keeps an ordered list of `ImageObject` in memory and
rewrites the whole list to one file after every mutation. Positions, not
identifiers, address entries.

Not thread-safe, and there is no file locking: two helpers pointed at the
same path will overwrite each other's writes.
"""

from __future__ import annotations

import contextlib
import os
import stat
import tempfile
from collections.abc import Iterable
from pathlib import Path

from image_picker.logger import get_logger
from image_picker.metrics import metrics
from image_picker.models import ImageObject
from image_picker.path_utils import abs_path

from .codec import decode_items, encode_items
from .errors import (
    DecodingError,
    DeletingError,
    FileDoesNotExistError,
    ItemIndexError,
    NoDataError,
    SavingError,
)

_logger = get_logger("persistence")


def _target_mode(path: Path) -> int:
    """Permission bits for the saved file: the existing file's, else 0666 minus umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _fsync_dir(directory: Path) -> None:
    """Flush the directory entry so the rename survives a power loss (POSIX only)."""
    if os.name != "posix":
        return
    try:
        fd = os.open(directory, os.O_RDONLY)
    except OSError as e:
        _logger.debug("cannot open %s for fsync: %s", directory, e)
        return
    try:
        os.fsync(fd)
    except OSError as e:
        # Some filesystems refuse fsync on directories; the file data is already flushed.
        _logger.debug("directory fsync failed for %s: %s", directory, e)
    finally:
        os.close(fd)


class PersistenceHelper:
    def __init__(self, file_path: str | Path, items: Iterable[ImageObject] | None = None) -> None:
        self._file_path = abs_path(file_path)
        self._items: list[ImageObject] = list(items) if items is not None else []

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def items(self) -> list[ImageObject]:
        """Snapshot of the in-memory collection."""
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    # ---- persistence -------------------------------------------------
    def save(self) -> None:
        """Write the whole collection to `file_path`, replacing it atomically.

        The data goes to a temp file in the same directory first and is then
        renamed over the target, so the previous file survives a failed write.
        """
        path = self._file_path
        tmp_name: str | None = None
        try:
            with metrics.timed("persistence.write_duration"):
                data = encode_items(self._items)
                path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                    f.flush()
                    os.fsync(f.fileno())
                # mkstemp creates 0600; keep the mode of the file being replaced
                os.chmod(tmp_name, _target_mode(path))
                os.replace(tmp_name, path)
                tmp_name = None
                _fsync_dir(path.parent)
        except Exception as e:
            metrics.inc("persistence.write_failures")
            _logger.error("save failed: %s (%s)", path, e)
            raise SavingError(f"could not save {len(self._items)} items to {path}: {e}") from e
        finally:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)

        metrics.inc("persistence.writes")
        _logger.debug("saved %d items (%d bytes): %s", len(self._items), len(data), path)

    def sync(self, items: Iterable[ImageObject]) -> None:
        """Replace the collection (e.g. after the UI reordered it) and save best-effort.

        A failed save is logged, not raised.
        """
        self._items = list(items)
        try:
            self.save()
        except SavingError as e:
            _logger.warning("sync save failed, memory and disk may differ: %s", e)

    # ---- CRUD ----------------------------------------------------------
    def create(self, item: ImageObject) -> None:
        """Append `item` and save. On SavingError the append is kept."""
        self._items.append(item)
        self.save()

    def load_items(self) -> list[ImageObject]:
        path = self._file_path
        if not path.exists():
            raise FileDoesNotExistError(str(path))

        try:
            data = path.read_bytes()
        except OSError as e:
            raise NoDataError(str(path)) from e
        if not data:
            raise NoDataError(str(path))

        try:
            items = decode_items(data)
        except Exception as e:
            _logger.warning("decode failed: %s (%s)", path, e)
            raise DecodingError(f"could not decode {path}: {e}") from e

        self._items = items
        metrics.inc("persistence.loads")
        _logger.debug("loaded %d items: %s", len(items), path)
        return list(items)

    def delete(self, index: int) -> None:
        """Remove the item at `index` and save. On failure the removal is kept."""
        count = len(self._items)
        if not 0 <= index < count:
            raise ItemIndexError(index, count)

        removed = self._items.pop(index)
        _logger.debug("deleting item %d (%s)", index, removed.identifier)
        try:
            self.save()
        except SavingError as e:
            cause = e.__cause__ or e
            raise DeletingError(f"could not save after deleting item {index}: {cause}") from cause
