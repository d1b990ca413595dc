from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from json_store import atomic_write_json, read_json

from .interfaces import KeyValueDocumentStore, empty_document

logger = logging.getLogger(__name__)


class DiskJsonDocumentStore(KeyValueDocumentStore):
    """
    Stores a single JSON document on disk at a fixed path.

    - Always returns a dict (empty document on missing/invalid JSON).
    - Writes atomically.
    """

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    @property
    def key(self) -> str:
        return str(self._path.resolve())

    def load(self) -> dict[str, Any]:
        try:
            raw = read_json(self._path)
        except Exception as e:
            logger.warning("SCOREBOARD LOAD: failed to read %s: %r", self._path, e)
            return empty_document()
        return raw if isinstance(raw, dict) else empty_document()

    def save(self, doc: dict[str, Any]) -> None:
        try:
            atomic_write_json(self._path, doc)
        except Exception as e:
            logger.warning("SCOREBOARD SAVE: failed to write %s: %r", self._path, e)

    def close(self) -> None:
        return None
