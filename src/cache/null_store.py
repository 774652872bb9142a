# src/cache/null_store.py — v1
"""Cache store used when CACHE_ENABLED=false: every read misses."""

from __future__ import annotations

from typing import Any

from storykeeper.cache.base_cache_store import BaseCacheStore


class NullCacheStore(BaseCacheStore):
    def get(self, key: str) -> tuple[Any, bool]:
        return None, False

    def set(self, key: str, value: Any, ttl: int) -> None:
        return None

    def delete(self, key: str) -> None:
        return None

    def delete_by_prefix(self, prefix: str) -> int:
        return 0
