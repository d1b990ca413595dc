from __future__ import annotations

from .disk_store import DiskJsonDocumentStore
from .interfaces import KeyValueDocumentStore
from .redis_store import RedisDocumentStore
from .repositories import AsyncDocumentMatchRepository, AsyncMatchRepository, create_document_store
from .scoreboard_state import (
    DocumentMatchStateRepository,
    MatchRecord,
    MatchSetup,
    MatchStateRepository,
    ScoreboardDocument,
    ScoreboardPatch,
)

__all__ = [
    "KeyValueDocumentStore",
    "DiskJsonDocumentStore",
    "RedisDocumentStore",
    "create_document_store",
    "MatchRecord",
    "MatchSetup",
    "ScoreboardDocument",
    "ScoreboardPatch",
    "MatchStateRepository",
    "DocumentMatchStateRepository",
    "AsyncMatchRepository",
    "AsyncDocumentMatchRepository",
]
