# src/cache/resilient.py — v1
"""Fall-through wrapper around a cache backend.

An unreachable backend costs performance, never correctness: reads degrade to
misses (so readers recompute from the record store) and writes/deletes to
no-ops.
"""

from __future__ import annotations

import logging
from typing import Any

from storykeeper.cache.base_cache_store import BaseCacheStore
from storykeeper.core.errors import CacheUnavailableError

logger = logging.getLogger(__name__)


class ResilientCacheStore(BaseCacheStore):
    """Swallow CacheUnavailableError from the wrapped store, logging a warning."""

    def __init__(self, inner: BaseCacheStore) -> None:
        self._inner = inner
        self.failures = 0

    @property
    def inner(self) -> BaseCacheStore:
        return self._inner

    def _degraded(self, op: str, key: str, error: CacheUnavailableError) -> None:
        self.failures += 1
        logger.warning("Cache %s failed for %s, falling through: %s", op, key, error)

    def get(self, key: str) -> tuple[Any, bool]:
        try:
            return self._inner.get(key)
        except CacheUnavailableError as e:
            self._degraded("get", key, e)
            return None, False

    def set(self, key: str, value: Any, ttl: int) -> None:
        try:
            self._inner.set(key, value, ttl)
        except CacheUnavailableError as e:
            self._degraded("set", key, e)

    def delete(self, key: str) -> None:
        try:
            self._inner.delete(key)
        except CacheUnavailableError as e:
            self._degraded("delete", key, e)

    def delete_by_prefix(self, prefix: str) -> int:
        try:
            return self._inner.delete_by_prefix(prefix)
        except CacheUnavailableError as e:
            self._degraded("delete_by_prefix", prefix, e)
            return 0

    def close(self) -> None:
        self._inner.close()
