# src/logging/context.py — v2
"""Contextual logging support: attach request, actor and subject ids to log records.

Handlers set the request context once per incoming request and narrow it to
the story/chapter being written, so invalidation and cascade log lines can be
traced back to the write that caused them.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)
_actor_id: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "actor_id", default=None
)
_story_id: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "story_id", default=None
)
_chapter_id: contextvars.ContextVar[int | None] = contextvars.ContextVar(
    "chapter_id", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    request_id: str | None = None
    actor_id: int | None = None
    story_id: int | None = None
    chapter_id: int | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        request_id=_request_id.get(),
        actor_id=_actor_id.get(),
        story_id=_story_id.get(),
        chapter_id=_chapter_id.get(),
    )


def set_request_context(request_id: str | None, actor_id: int | None) -> None:
    """Set request-level context (called once per handled request)."""
    _request_id.set(request_id)
    _actor_id.set(actor_id)


def set_subject_context(
    story_id: int | None = None, chapter_id: int | None = None
) -> None:
    """Set the story/chapter the current operation is writing."""
    _story_id.set(story_id)
    _chapter_id.set(chapter_id)


def clear_context() -> None:
    """Reset all context variables."""
    _request_id.set(None)
    _actor_id.set(None)
    _story_id.set(None)
    _chapter_id.set(None)
