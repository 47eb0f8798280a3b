"""Short-lived in-process cache for lookup lists.

Used by the form renderer to avoid re-fetching the same option lists
(organizations, corporate entities, payment terms, ...) on every request.
Entries live for ``settings.cache_ttl_seconds``; writes to a cached entity
kind call :func:`invalidate` for its namespace.
"""

from __future__ import annotations

import copy
import threading
import time
from collections.abc import Awaitable, Callable
from typing import Any

from bizops.core.config import settings


class TtlCache:
    """Namespaced key/value store with per-entry expiry."""

    def __init__(self, ttl_seconds: int):
        self._ttl_seconds = max(0, int(ttl_seconds))
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[float, Any]] = {}

    @staticmethod
    def make_key(namespace: str, identifier: Any = "") -> str:
        return f"{namespace}:{identifier}"

    def get(self, key: str) -> Any | None:
        if self._ttl_seconds <= 0:
            return None
        now = time.monotonic()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at <= now:
                self._entries.pop(key, None)
                return None
            return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        if self._ttl_seconds <= 0:
            return
        with self._lock:
            self._entries[key] = (time.monotonic() + self._ttl_seconds, copy.deepcopy(value))

    async def get_or_load(self, key: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        cached = self.get(key)
        if cached is not None:
            return cached
        value = await loader()
        self.set(key, value)
        return value

    def invalidate(self, namespace: str | None = None) -> None:
        """Drop everything, or only keys under ``namespace``."""
        with self._lock:
            if namespace is None:
                self._entries.clear()
                return
            prefix = f"{namespace}:"
            for key in [k for k in self._entries if k.startswith(prefix)]:
                del self._entries[key]


lookup_cache = TtlCache(settings.cache_ttl_seconds)


def invalidate(namespace: str | None = None) -> None:
    lookup_cache.invalidate(namespace)
