"""Pytest configuration.

Cells decode images with QtGui, so a single `QGuiApplication` is created for
the whole session (offscreen platform, no display needed) and shut down at
the end.
"""

from __future__ import annotations

import io
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

_APP: Any | None = None


def pytest_configure(config) -> None:  # noqa: ARG001
    """Ensure a Qt application exists before collecting/running tests."""

    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    # Import lazily so non-Qt environments can still import this conftest.
    try:
        from PySide6.QtGui import QGuiApplication
    except ImportError:
        return

    global _APP

    app = QGuiApplication.instance()
    if app is None:
        # Keep a strong ref so it isn't GC'd mid-session.
        _APP = QGuiApplication([])
    else:
        _APP = app


def pytest_sessionfinish(session, exitstatus) -> None:  # noqa: ARG001
    try:
        from PySide6.QtGui import QGuiApplication
    except ImportError:
        return

    app = QGuiApplication.instance()
    if app is None:
        return

    app.quit()
    app.processEvents()


def make_jpeg(width: int, height: int, color: tuple[int, int, int] = (200, 40, 40)) -> bytes:
    from PIL import Image

    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format="JPEG")
    return buf.getvalue()


@pytest.fixture
def documents(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the documents directory at a temp folder."""
    docs = tmp_path / "Documents"
    docs.mkdir()
    monkeypatch.setenv("IMAGE_PICKER_DOCUMENTS_DIR", str(docs))
    return docs


@pytest.fixture
def when() -> datetime:
    return datetime(2020, 1, 20, 15, 30, 12, tzinfo=timezone.utc)


@pytest.fixture
def jpeg_factory():
    return make_jpeg
