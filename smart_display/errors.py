from __future__ import annotations

from pathlib import Path


class SmartDisplayError(Exception):
    """Base class for errors raised by the slideshow core."""


class ValidationError(SmartDisplayError):
    """A slide entry, duration or index was rejected."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class NotFound(SmartDisplayError):
    def __init__(self, image_url: str) -> None:
        super().__init__(f"image not in rotation: {image_url}")
        self.image_url = image_url


class CorruptConfig(SmartDisplayError):
    """The persisted slide document does not match the schema.

    The file is left untouched for the operator to repair.
    """

    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(f"corrupt config at {path}: {detail}")
        self.path = path
        self.detail = detail
