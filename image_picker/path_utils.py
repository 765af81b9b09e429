"""Path helpers.

- Use absolute paths when interacting with the filesystem.
- Resolve the per-user documents directory the gallery file lives in.

`IMAGE_PICKER_DOCUMENTS_DIR` overrides the platform documents location
(useful for tests and portable installs).
"""

from __future__ import annotations

import os
from pathlib import Path

from PySide6.QtCore import QStandardPaths

from image_picker.logger import get_logger

_logger = get_logger("paths")

_DOCUMENTS_ENV = "IMAGE_PICKER_DOCUMENTS_DIR"


def abs_path(path: str | Path) -> Path:
    """Return an absolute path without requiring that it exists."""
    p = Path(path).expanduser()
    try:
        # strict=False avoids exceptions for non-existent paths.
        return p.resolve(strict=False)
    except OSError:
        return p.absolute()


def documents_dir() -> Path:
    """Directory that holds the app's persisted files."""
    override = (os.getenv(_DOCUMENTS_ENV) or "").strip()
    if override:
        return abs_path(override)

    location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.DocumentsLocation)
    if location:
        return abs_path(location)

    _logger.debug("no documents location from Qt, falling back to ~/Documents")
    return abs_path(Path.home() / "Documents")


def path_to_documents(filename: str) -> Path:
    """Path of `filename` inside the documents directory (used for both reads and writes)."""
    return documents_dir() / filename
