# src/readers/base.py — v1
"""Cache-first read helper shared by the aggregate readers."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from storykeeper.cache.base_cache_store import BaseCacheStore
from storykeeper.cache.keys import CacheKeys
from storykeeper.store.base_record_store import BaseRecordStore

logger = logging.getLogger(__name__)


class CachedReader:
    """Reads are pure: on a miss the value is recomputed from the record store
    and written back with the data kind's TTL. Concurrent misses may both
    recompute; the values are identical so the last write wins harmlessly.
    """

    def __init__(
        self,
        store: BaseRecordStore,
        cache: BaseCacheStore,
        keys: CacheKeys | None = None,
    ) -> None:
        self._store = store
        self._cache = cache
        self._keys = keys or CacheKeys()

    def _remember(self, key: str, ttl: int, compute: Callable[[], Any]) -> Any:
        value, found = self._cache.get(key)
        if found:
            return value
        logger.debug("Cache miss: %s", key)
        value = compute()
        self._cache.set(key, value, ttl)
        return value
