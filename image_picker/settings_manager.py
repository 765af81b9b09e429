from __future__ import annotations

import json
import os
from typing import Any

from .logger import get_logger

_logger = get_logger("settings")


class SettingsManager:
    def __init__(self, settings_path: str):
        self.settings_path = settings_path
        self._settings: dict[str, Any] = {}
        self.load()

    DEFAULTS: dict[str, Any] = {
        "images_filename": "images.plist",
        "jpeg_quality": 100,
        "grid_item_ratio": 0.8,
        "screen_width": 390,
        "screen_height": 844,
    }

    def load(self) -> None:
        try:
            if os.path.exists(self.settings_path):
                with open(self.settings_path, encoding="utf-8") as f:
                    data = json.load(f)
                    if isinstance(data, dict):
                        self._settings = data
                        _logger.debug("settings loaded: %s", self.settings_path)
                        return
                    _logger.warning("settings file is not an object, ignoring: %s", self.settings_path)
        except (OSError, ValueError) as e:
            _logger.warning("settings load failed: %s", e)
        self._settings = {}

    def save(self) -> None:
        try:
            parent = os.path.dirname(self.settings_path)
            if parent:
                os.makedirs(parent, exist_ok=True)
            with open(self.settings_path, "w", encoding="utf-8") as f:
                json.dump(self._settings, f, ensure_ascii=False, indent=2)
            _logger.debug("settings saved: %s", self.settings_path)
        except (OSError, TypeError) as e:
            _logger.error("settings save failed: %s", e)

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._settings:
            return self._settings[key]
        if default is not None:
            return default
        return self.DEFAULTS.get(key)

    def has(self, key: str) -> bool:
        return key in self._settings

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value
        self.save()

    @property
    def data(self) -> dict[str, Any]:
        return self._settings

    @property
    def images_filename(self) -> str:
        val = self.get("images_filename")
        return val if isinstance(val, str) and val else self.DEFAULTS["images_filename"]

    @property
    def jpeg_quality(self) -> int:
        try:
            q = int(self.get("jpeg_quality"))
        except (TypeError, ValueError):
            _logger.warning("invalid jpeg_quality, using default")
            return int(self.DEFAULTS["jpeg_quality"])
        return max(1, min(100, q))

    @property
    def grid_item_ratio(self) -> float:
        try:
            ratio = float(self.get("grid_item_ratio"))
        except (TypeError, ValueError):
            return float(self.DEFAULTS["grid_item_ratio"])
        return ratio if 0.0 < ratio <= 1.0 else float(self.DEFAULTS["grid_item_ratio"])

    @property
    def screen_bounds(self) -> tuple[int, int]:
        try:
            w = int(self.get("screen_width"))
            h = int(self.get("screen_height"))
        except (TypeError, ValueError):
            w, h = 0, 0
        if w <= 0 or h <= 0:
            return int(self.DEFAULTS["screen_width"]), int(self.DEFAULTS["screen_height"])
        return w, h
