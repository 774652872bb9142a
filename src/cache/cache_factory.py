# src/cache/cache_factory.py — v3
"""Factory for cache store instantiation."""

from __future__ import annotations

from storykeeper.cache.base_cache_store import BaseCacheStore
from storykeeper.config.settings import Settings
from storykeeper.core.clock import Clock


def create_cache_store(
    settings: Settings | None = None, clock: Clock | None = None
) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Every backend except the disabled one is wrapped in a ResilientCacheStore
    so readers keep working when the backend is unreachable.

    Args:
        settings: Application settings. Defaults to the in-memory backend.
        clock: Time source for backends that track expiry themselves.

    Returns:
        Configured BaseCacheStore implementation.
    """
    from storykeeper.cache.resilient import ResilientCacheStore

    if settings is not None and not settings.cache_enabled:
        from storykeeper.cache.null_store import NullCacheStore
        return NullCacheStore()

    backend = "memory" if settings is None else settings.cache_backend

    if backend == "memory":
        from storykeeper.cache.memory_store import MemoryCacheStore
        return ResilientCacheStore(MemoryCacheStore(clock=clock))

    if backend == "sqlite":
        from storykeeper.cache.sqlite_store import SqliteCacheStore
        db_path = settings.cache_root.expanduser() / "storykeeper_cache.db"
        return ResilientCacheStore(SqliteCacheStore(db_path=db_path, clock=clock))

    if backend == "redis":
        from storykeeper.cache.redis_store import RedisCacheStore
        if not settings.cache_redis_url:
            raise ValueError(
                "CACHE_REDIS_URL must be set when CACHE_BACKEND=redis"
            )
        return ResilientCacheStore(RedisCacheStore(redis_url=settings.cache_redis_url))

    raise ValueError(f"Unsupported cache backend: {backend!r}")
