from __future__ import annotations

import os
from pathlib import Path

import pytest

import image_picker.gallery.controller as controller_mod
from image_picker.gallery.cell import ImageCell, LongPressState
from image_picker.gallery.controller import GalleryController
from image_picker.image_engine.resize import ImageProcessingError
from image_picker.persistence import PersistenceHelper
from image_picker.settings_manager import SettingsManager


@pytest.fixture
def fake_resize(monkeypatch):
    """Skip pyvips: 'resizing' just tags the bytes."""
    calls = []

    def _prepare(data, bounds, quality=100):
        calls.append((data, bounds, quality))
        return b"jpeg:" + data

    monkeypatch.setattr(controller_mod, "prepare_image_data", _prepare)
    return calls


@pytest.fixture
def controller(tmp_path: Path) -> GalleryController:
    settings = SettingsManager(str(tmp_path / "settings.json"))
    store = PersistenceHelper(tmp_path / "images.plist")
    return GalleryController(store=store, settings=settings, screen_bounds=(300, 600))


def _signals(ctrl: GalleryController) -> dict[str, list]:
    seen: dict[str, list] = {"inserted": [], "removed": [], "delete": [], "error": []}
    ctrl.imageInserted.connect(lambda row: seen["inserted"].append(row))
    ctrl.imageRemoved.connect(lambda row: seen["removed"].append(row))
    ctrl.deleteRequested.connect(lambda row: seen["delete"].append(row))
    ctrl.errorOccurred.connect(lambda msg: seen["error"].append(msg))
    return seen


def test_default_store_lives_in_documents(documents: Path, tmp_path: Path) -> None:
    settings = SettingsManager(str(tmp_path / "settings.json"))
    ctrl = GalleryController(settings=settings)

    assert ctrl.store.file_path == documents.resolve() / "images.plist"


def test_load_on_first_launch_keeps_grid_empty(controller: GalleryController) -> None:
    seen = _signals(controller)

    assert controller.load_image_objects() is False
    assert controller.model.rowCount() == 0
    assert seen["error"] == []


def test_load_corrupt_file_reports_error(controller: GalleryController) -> None:
    controller.store.file_path.write_bytes(b"garbage")
    seen = _signals(controller)

    assert controller.load_image_objects() is False
    assert len(seen["error"]) == 1
    assert seen["error"][0].startswith("loading objects error")


def test_selected_image_is_inserted_first_and_persisted(controller: GalleryController, fake_resize) -> None:
    seen = _signals(controller)

    first = controller.on_image_selected(b"one")
    second = controller.on_image_selected(b"two")

    assert fake_resize == [(b"one", (300, 600), 100), (b"two", (300, 600), 100)]
    assert seen["inserted"] == [0, 0]
    assert controller.image_objects == [second, first]
    assert first is not None and first.image_data == b"jpeg:one"
    # the store appends, so disk order is oldest first
    assert PersistenceHelper(controller.store.file_path).load_items() == [first, second]


def test_none_selection_is_ignored(controller: GalleryController, fake_resize) -> None:
    assert controller.on_image_selected(None) is None
    assert controller.model.rowCount() == 0
    assert fake_resize == []


def test_processing_failure_is_reported(controller: GalleryController, monkeypatch) -> None:
    def _fail(data, bounds, quality=100):
        raise ImageProcessingError("bad image")

    monkeypatch.setattr(controller_mod, "prepare_image_data", _fail)
    seen = _signals(controller)

    assert controller.on_image_selected(b"x") is None
    assert controller.model.rowCount() == 0
    assert seen["error"] == ["image processing error: bad image"]


def test_save_failure_keeps_grid_and_reports(tmp_path: Path, fake_resize) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("x", encoding="utf-8")
    ctrl = GalleryController(
        store=PersistenceHelper(blocker / "images.plist"),
        settings=SettingsManager(str(tmp_path / "settings.json")),
        screen_bounds=(10, 10),
    )
    seen = _signals(ctrl)

    obj = ctrl.on_image_selected(b"x")

    assert ctrl.image_objects == [obj]
    assert len(seen["error"]) == 1
    assert seen["error"][0].startswith("saving error")


def test_long_press_requests_delete_for_cell_row(controller: GalleryController, fake_resize) -> None:
    controller.on_image_selected(b"one")
    controller.on_image_selected(b"two")
    seen = _signals(controller)

    cell = controller.configure_cell(1)
    assert cell.delegate is controller
    assert cell.row == 1

    cell.long_press_action(LongPressState.BEGAN)
    cell.long_press_action(LongPressState.CANCELLED)

    assert seen["delete"] == [1]


def test_long_press_on_stale_cell_is_ignored(controller: GalleryController) -> None:
    seen = _signals(controller)

    controller.did_long_press(ImageCell(row=4))

    assert seen["delete"] == []


def test_configure_cell_out_of_range(controller: GalleryController) -> None:
    with pytest.raises(IndexError):
        controller.configure_cell(0)


def test_delete_removes_the_row_shown(controller: GalleryController, fake_resize) -> None:
    a = controller.on_image_selected(b"a")
    b = controller.on_image_selected(b"b")
    c = controller.on_image_selected(b"c")
    assert controller.image_objects == [c, b, a]
    seen = _signals(controller)

    assert controller.delete_image_object(1) is True

    assert seen["removed"] == [1]
    assert seen["error"] == []
    assert controller.image_objects == [c, a]
    # store was synced to the grid order before deleting by row
    assert PersistenceHelper(controller.store.file_path).load_items() == [c, a]


def test_delete_out_of_range_is_ignored(controller: GalleryController, fake_resize) -> None:
    a = controller.on_image_selected(b"a")

    assert controller.delete_image_object(5) is False
    assert controller.image_objects == [a]


def test_delete_write_failure_is_reported(controller: GalleryController, fake_resize, monkeypatch) -> None:
    a = controller.on_image_selected(b"a")
    b = controller.on_image_selected(b"b")
    real_replace = os.replace
    calls = {"n": 0}

    def _replace(src, dst):
        # let the sync write through, fail the delete write
        calls["n"] += 1
        if calls["n"] > 1:
            raise OSError("disk full")
        real_replace(src, dst)

    monkeypatch.setattr(os, "replace", _replace)
    seen = _signals(controller)

    controller.delete_image_object(0)

    assert controller.image_objects == [a]
    assert len(seen["error"]) == 1
    assert seen["error"][0].startswith("error deleting item")
    monkeypatch.undo()
    assert PersistenceHelper(controller.store.file_path).load_items() == [b, a]


def test_reload_after_restart(tmp_path: Path, fake_resize) -> None:
    settings = SettingsManager(str(tmp_path / "settings.json"))
    path = tmp_path / "images.plist"
    first = GalleryController(store=PersistenceHelper(path), settings=settings, screen_bounds=(10, 10))
    a = first.on_image_selected(b"a")
    b = first.on_image_selected(b"b")

    second = GalleryController(store=PersistenceHelper(path), settings=settings, screen_bounds=(10, 10))

    assert second.load_image_objects() is True
    assert second.image_objects == [a, b]


def test_item_size_uses_ratio(controller: GalleryController) -> None:
    assert controller.item_size() == pytest.approx((240.0, 240.0))
    assert controller.item_size(500) == pytest.approx((400.0, 400.0))


def test_end_to_end_with_real_resize(controller: GalleryController, jpeg_factory) -> None:
    pytest.importorskip("pyvips")

    obj = controller.on_image_selected(jpeg_factory(600, 300))

    assert obj is not None
    cell = controller.configure_cell(0)
    assert cell.image is not None
    assert (cell.image.width(), cell.image.height()) == (300, 150)
