from __future__ import annotations

import threading


class KeyLockRegistry:
    """
    Provides a stable lock per store key so read-modify-write cycles on one document
    don't interleave within this process.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def lock_for(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock


GLOBAL_KEY_LOCKS = KeyLockRegistry()
