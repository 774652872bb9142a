# src/interactions/bookmarks.py — v1
"""Bookmark/unbookmark stories."""

from __future__ import annotations

import logging

from storykeeper.core.clock import Clock
from storykeeper.core.errors import RecordNotFoundError
from storykeeper.invalidation.models import InvalidationEvent
from storykeeper.invalidation.router import InvalidationRouter
from storykeeper.store.base_record_store import BaseRecordStore

logger = logging.getLogger(__name__)


class BookmarkService:
    def __init__(self, store: BaseRecordStore, router: InvalidationRouter, clock: Clock) -> None:
        self._store = store
        self._router = router
        self._clock = clock

    def add(self, user_id: int, story_id: int) -> bool:
        """Returns False when the story is already bookmarked.

        Raises:
            RecordNotFoundError: If the story does not exist.
        """
        if self._store.get_story(story_id) is None:
            raise RecordNotFoundError("story", story_id)
        if self._store.count_where("bookmark", user_id=user_id, story_id=story_id):
            return False
        self._store.create_record(
            "bookmark",
            {"user_id": user_id, "story_id": story_id, "created_at": self._clock.now()},
        )
        self._router.invalidate(InvalidationEvent.for_bookmark(user_id, story_id, "create"))
        return True

    def remove(self, user_id: int, story_id: int) -> bool:
        rows = self._store.find_where("bookmark", user_id=user_id, story_id=story_id)
        if not rows:
            return False
        for row in rows:
            self._store.delete_record("bookmark", row.id)
        self._router.invalidate(InvalidationEvent.for_bookmark(user_id, story_id, "delete"))
        return True
