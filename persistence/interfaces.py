from __future__ import annotations

from typing import Any, Protocol


def empty_document() -> dict[str, Any]:
    return {"matches": {}}


class KeyValueDocumentStore(Protocol):
    """
    Minimal DB-friendly interface: a single JSON-like document persisted under a key.
    """

    @property
    def key(self) -> str:
        """Identifies the stored document; used to scope read-modify-write locks."""
        ...

    def load(self) -> dict[str, Any]:
        """Load and return the full document (never None, empty document on any failure)."""
        ...

    def save(self, doc: dict[str, Any]) -> None:
        """Persist the full document, overwriting the previous value. Failures are logged, not raised."""
        ...

    def close(self) -> None:
        """Release any client resources."""
        ...
