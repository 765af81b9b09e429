from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


def _new_identifier() -> str:
    return str(uuid.uuid4()).upper()


def _normalize_date(value: datetime) -> datetime:
    # Property lists only keep whole seconds; store aware UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).replace(microsecond=0)


@dataclass(frozen=True)
class ImageObject:
    """One persisted gallery entry: encoded image bytes plus when it was added.

    `identifier` is generated once at construction and survives persistence.
    It is for display/debugging only; the store addresses entries by position.
    """

    image_data: bytes
    date: datetime
    identifier: str = field(default_factory=_new_identifier)

    def __post_init__(self) -> None:
        if not isinstance(self.image_data, (bytes, bytearray)):
            raise TypeError(f"image_data must be bytes, got {type(self.image_data).__name__}")
        if not self.image_data:
            raise ValueError("image_data must not be empty")
        if not isinstance(self.date, datetime):
            raise TypeError(f"date must be a datetime, got {type(self.date).__name__}")
        if not isinstance(self.identifier, str) or not self.identifier:
            raise ValueError("identifier must be a non-empty string")
        object.__setattr__(self, "image_data", bytes(self.image_data))
        object.__setattr__(self, "date", _normalize_date(self.date))

    @classmethod
    def now(cls, image_data: bytes) -> ImageObject:
        return cls(image_data=image_data, date=datetime.now(timezone.utc))

    @property
    def size(self) -> int:
        return len(self.image_data)

    def to_plist(self) -> dict[str, Any]:
        return {
            "imageData": self.image_data,
            # plistlib writes naive datetimes; keep them in UTC
            "date": self.date.replace(tzinfo=None),
            "identifier": self.identifier,
        }

    @classmethod
    def from_plist(cls, data: Any) -> ImageObject:
        """Build from a decoded plist dict, keeping the stored identifier.

        Raises KeyError/TypeError/ValueError on malformed entries.
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected dict entry, got {type(data).__name__}")
        image_data = data["imageData"]
        date = data["date"]
        identifier = data["identifier"]
        if not isinstance(identifier, str):
            raise TypeError("identifier must be a string")
        return cls(image_data=image_data, date=date, identifier=identifier)
