from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError as SchemaError

from .config import CONFIG_FILE
from .errors import CorruptConfig
from .models import ConfigDocument, SlideEntry

logger = logging.getLogger(__name__)

_lock = threading.Lock()


class ConfigStore:
    """Reads and writes the slide list as a single JSON document."""

    def __init__(self, path: Path | str = CONFIG_FILE) -> None:
        self.path = Path(path)

    def _ensure_dirs(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> ConfigDocument:
        if not self.path.exists():
            logger.warning("no config at %s, starting with an empty rotation", self.path)
            self.save(())
            return ConfigDocument(entries=[])

        with _lock:
            raw = self.path.read_bytes()

        try:
            document = ConfigDocument.model_validate_json(raw)
        except SchemaError as exc:
            logger.error("config at %s failed validation: %s", self.path, exc)
            raise CorruptConfig(self.path, str(exc)) from exc

        logger.info("loaded %d slides from %s", len(document.entries), self.path)
        return document

    def save(self, slides: Sequence[SlideEntry], duration_secs: float | None = None) -> None:
        self._ensure_dirs()
        document = ConfigDocument.model_validate({"durationSecs": duration_secs, "entries": list(slides)})
        payload = document.model_dump(mode="json", by_alias=True, exclude_none=True)

        with _lock:
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".smart-display-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(payload, f, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                os.unlink(tmp_name)
                raise
