# src/cache/base_cache_store.py — v2
"""Abstract cache store interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseCacheStore(ABC):
    """Key/value store with per-entry TTL.

    Values must be JSON-serialisable. Stored falsy values (False, 0, None,
    empty list) are hits; only an absent or expired key is a miss.
    """

    @abstractmethod
    def get(self, key: str) -> tuple[Any, bool]:
        """Return ``(value, True)`` on hit, ``(None, False)`` on miss."""

    @abstractmethod
    def set(self, key: str, value: Any, ttl: int) -> None:
        """Store value for ``ttl`` seconds."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove an entry. Deleting an absent key is a no-op."""

    @abstractmethod
    def delete_by_prefix(self, prefix: str) -> int:
        """Remove every entry whose key starts with prefix. Returns count removed."""

    def close(self) -> None:
        """Release backend resources."""
