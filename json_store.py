from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def encode_document(payload: Any, *, indent: int = 2) -> str:
    """
    Serialize a document the way it is kept in the store: pretty-printed JSON.

    Key order is preserved so a stored document reads back in the order it was written.
    """
    return json.dumps(payload, indent=indent, ensure_ascii=False)


def decode_document(raw: str | bytes | None) -> Any | None:
    """
    Parse stored JSON text.

    Returns None for missing or blank values. Invalid JSON raises ValueError.
    """
    if raw is None:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    if not raw.strip():
        return None
    return json.loads(raw)


def read_json(path: Path) -> Any | None:
    """
    Read JSON from disk.

    Returns None for missing or empty files. Invalid JSON raises ValueError.
    """
    if not path.exists():
        return None
    return decode_document(path.read_text(encoding="utf-8"))


def atomic_write_json(path: Path, payload: Any, *, indent: int = 2) -> None:
    """
    Atomically write JSON to disk by writing to a temp file then replacing.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        f.write(encode_document(payload, indent=indent))
        f.write("\n")
    tmp_path.replace(path)
