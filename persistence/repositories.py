from __future__ import annotations

import asyncio
from typing import Any, Mapping, Protocol

from settings import Settings

from .disk_store import DiskJsonDocumentStore
from .interfaces import KeyValueDocumentStore
from . import paths
from .redis_store import RedisDocumentStore
from .scoreboard_state import DocumentMatchStateRepository, MatchRecord, MatchSetup


class AsyncMatchRepository(Protocol):
    """
    Domain-level scoreboard persistence interface used by the endpoints.
    """

    async def get_match(self, match_id: str) -> MatchRecord | None: ...
    async def merge_match(self, match_id: str, patch: Mapping[str, Any]) -> bool: ...
    async def set_total_runs(self, match_id: str, total_runs: Any) -> bool: ...
    async def create_match(self, setup: MatchSetup) -> str: ...
    async def close(self) -> None: ...


def create_document_store(settings: Settings) -> KeyValueDocumentStore:
    if settings.redis_url:
        return RedisDocumentStore.from_url(settings.redis_url, key=settings.store_key)
    path = settings.scoreboard_file or paths.scoreboard_file(paths.data_dir())
    return DiskJsonDocumentStore(path)


class AsyncDocumentMatchRepository(AsyncMatchRepository):
    """
    Async wrapper around the document-backed match repository.
    Uses asyncio.to_thread to avoid blocking the event loop on store I/O.
    """

    def __init__(self, store: KeyValueDocumentStore) -> None:
        self._repo = DocumentMatchStateRepository(store)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AsyncDocumentMatchRepository":
        return cls(create_document_store(settings))

    @property
    def store(self) -> KeyValueDocumentStore:
        return self._repo.store

    async def get_match(self, match_id: str) -> MatchRecord | None:
        return await asyncio.to_thread(self._repo.get_match, match_id)

    async def merge_match(self, match_id: str, patch: Mapping[str, Any]) -> bool:
        return await asyncio.to_thread(self._repo.merge_match, match_id, patch)

    async def set_total_runs(self, match_id: str, total_runs: Any) -> bool:
        return await asyncio.to_thread(self._repo.set_total_runs, match_id, total_runs)

    async def create_match(self, setup: MatchSetup) -> str:
        return await asyncio.to_thread(self._repo.create_match, setup)

    async def close(self) -> None:
        await asyncio.to_thread(self._repo.store.close)
