# src/cache/memory_store.py — v1
"""In-process cache store (CACHE_BACKEND=memory).

Values are JSON round-tripped on write so callers never share mutable state
with the cache, matching the behaviour of the out-of-process backends.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from storykeeper.cache.base_cache_store import BaseCacheStore
from storykeeper.cache.models import CacheEntry
from storykeeper.core.clock import Clock, SystemClock

logger = logging.getLogger(__name__)


class MemoryCacheStore(BaseCacheStore):
    """Dict-backed cache with lazy expiry."""

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> tuple[Any, bool]:
        entry = self._entries.get(key)
        if entry is None:
            return None, False
        if entry.is_expired(self._clock.now()):
            del self._entries[key]
            return None, False
        return json.loads(entry.value), True

    def set(self, key: str, value: Any, ttl: int) -> None:
        payload = json.dumps(value, default=str)
        self._entries[key] = CacheEntry.build(key, payload, ttl, self._clock.now())

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def delete_by_prefix(self, prefix: str) -> int:
        doomed = [k for k in self._entries if k.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def keys(self) -> list[str]:
        """Live (unexpired) keys, sorted. Intended for diagnostics and tests."""
        now = self._clock.now()
        return sorted(k for k, e in self._entries.items() if not e.is_expired(now))

    def __len__(self) -> int:
        return len(self.keys())
