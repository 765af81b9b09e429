"""Property list encoding of the gallery.

The file is a binary plist whose root is an array of dicts:
``{"imageData": <data>, "date": <date>, "identifier": <string>}``.
Either plist flavour (binary or XML) is accepted on decode.
"""

from __future__ import annotations

import plistlib
from collections.abc import Iterable

from image_picker.models import ImageObject


def encode_items(items: Iterable[ImageObject]) -> bytes:
    return plistlib.dumps([item.to_plist() for item in items], fmt=plistlib.FMT_BINARY, sort_keys=True)


def decode_items(data: bytes) -> list[ImageObject]:
    """Decode plist bytes into records.

    Raises plistlib.InvalidFileException, ValueError, TypeError or KeyError
    when the payload is not a well formed gallery.
    """
    root = plistlib.loads(data)
    if not isinstance(root, list):
        raise TypeError(f"expected array at plist root, got {type(root).__name__}")
    return [ImageObject.from_plist(entry) for entry in root]
