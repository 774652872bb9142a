# src/cache/redis_store.py — v2
"""Redis-based cache store (CACHE_BACKEND=redis).

Requires 'redis' package: pip install redis.
Suitable for distributed/multi-instance deployments. Expiry is delegated to
Redis (SET ... EX ttl); prefix deletion walks the keyspace with SCAN.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from storykeeper.cache.base_cache_store import BaseCacheStore
from storykeeper.core.errors import CacheUnavailableError

logger = logging.getLogger(__name__)

_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")
_DELETE_BATCH = 500


class RedisCacheStore(BaseCacheStore):
    """Redis-backed cache store for distributed deployments."""

    def __init__(self, redis_url: str) -> None:
        try:
            import redis
        except ImportError as e:
            raise ImportError(
                "redis package required: pip install redis"
            ) from e

        self._client = redis.Redis.from_url(redis_url, decode_responses=True)
        self._errors: tuple[type[BaseException], ...] = (redis.RedisError,)

    def get(self, key: str) -> tuple[Any, bool]:
        try:
            data = self._client.get(key)
        except self._errors as e:
            raise CacheUnavailableError(f"redis get failed: {e}") from e
        if data is None:
            return None, False
        try:
            return json.loads(data), True
        except json.JSONDecodeError as e:
            logger.warning("Failed to deserialize cache entry %s: %s", key, e)
            return None, False

    def set(self, key: str, value: Any, ttl: int) -> None:
        try:
            self._client.set(key, json.dumps(value, default=str), ex=max(1, int(ttl)))
        except self._errors as e:
            raise CacheUnavailableError(f"redis set failed: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._client.delete(key)
        except self._errors as e:
            raise CacheUnavailableError(f"redis delete failed: {e}") from e

    def delete_by_prefix(self, prefix: str) -> int:
        pattern = _GLOB_SPECIAL.sub(r"\\\1", prefix) + "*"
        removed = 0
        batch: list[str] = []
        try:
            for key in self._client.scan_iter(match=pattern, count=_DELETE_BATCH):
                batch.append(key)
                if len(batch) >= _DELETE_BATCH:
                    removed += self._client.delete(*batch)
                    batch.clear()
            if batch:
                removed += self._client.delete(*batch)
        except self._errors as e:
            raise CacheUnavailableError(f"redis prefix delete failed: {e}") from e
        return removed

    def close(self) -> None:
        """Close the Redis connection."""
        self._client.close()
