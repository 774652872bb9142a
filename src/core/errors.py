# src/core/errors.py — v1
"""Exception taxonomy shared by the store, cache and publication layers.

A cache miss is not an error: cache stores report it as ``(None, False)``.
"""

from __future__ import annotations


class StoryKeeperError(Exception):
    """Base class for all recoverable storykeeper errors."""


class ValidationError(StoryKeeperError):
    """A required field is missing or invalid.

    Attributes:
        missing_fields: Field key -> user-facing message.
    """

    def __init__(self, message: str, missing_fields: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.missing_fields = dict(missing_fields or {})


class ConflictError(StoryKeeperError):
    """Duplicate prologue/epilogue or chapter-number collision. No write applied."""


class DateGuardRejection(StoryKeeperError):
    """Anti-cheat publish-date rule triggered."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class StoreError(StoryKeeperError):
    """Durable read/write failure reported by the record store."""


class RecordNotFoundError(StoreError):
    """Requested record does not exist."""

    def __init__(self, kind: str, record_id: int) -> None:
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class CacheUnavailableError(StoryKeeperError):
    """Cache backend is unreachable. Never escapes ResilientCacheStore."""
