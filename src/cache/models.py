# src/cache/models.py — v2
"""Cache domain model: CacheEntry."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """Single cached value with its absolute expiry instant.

    An entry whose expiry is at or before "now" is equivalent to no entry.
    """

    key: str
    value: Any = None
    expires_at: datetime

    @classmethod
    def build(cls, key: str, value: Any, ttl: int, now: datetime) -> CacheEntry:
        return cls(key=key, value=value, expires_at=now + timedelta(seconds=ttl))

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
