from __future__ import annotations

import logging
from typing import Any

import redis

from json_store import decode_document, encode_document

from .interfaces import KeyValueDocumentStore, empty_document

logger = logging.getLogger(__name__)

DEFAULT_KEY = "scoreboardData"


class RedisDocumentStore(KeyValueDocumentStore):
    """
    Stores the whole scoreboard document as pretty-printed JSON under one Redis key.

    Redis errors never reach the caller: a failed read yields an empty document and a
    failed write is dropped after logging.
    """

    def __init__(self, client: redis.Redis, *, key: str = DEFAULT_KEY):
        self._client = client
        self._key = key

    @classmethod
    def from_url(cls, url: str, *, key: str = DEFAULT_KEY) -> "RedisDocumentStore":
        # Connections are opened lazily on the first command.
        return cls(redis.Redis.from_url(url), key=key)

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> dict[str, Any]:
        try:
            doc = decode_document(self._client.get(self._key))
        except Exception as e:
            logger.warning("SCOREBOARD LOAD: failed to read redis key %s: %r", self._key, e)
            return empty_document()
        return doc if isinstance(doc, dict) else empty_document()

    def save(self, doc: dict[str, Any]) -> None:
        try:
            self._client.set(self._key, encode_document(doc))
        except Exception as e:
            logger.warning("SCOREBOARD SAVE: failed to write redis key %s: %r", self._key, e)

    def close(self) -> None:
        try:
            self._client.close()
        except Exception:
            logger.debug("SCOREBOARD: error closing redis client", exc_info=True)
