# src/interactions/follows.py — v1
"""Follow/unfollow authors."""

from __future__ import annotations

import logging

from storykeeper.core.clock import Clock
from storykeeper.core.errors import ValidationError
from storykeeper.invalidation.models import InvalidationEvent
from storykeeper.invalidation.router import InvalidationRouter
from storykeeper.store.base_record_store import BaseRecordStore

logger = logging.getLogger(__name__)


class FollowService:
    def __init__(self, store: BaseRecordStore, router: InvalidationRouter, clock: Clock) -> None:
        self._store = store
        self._router = router
        self._clock = clock

    def follow(self, follower_id: int, author_id: int) -> bool:
        """Returns False when the follow already exists.

        Raises:
            ValidationError: On a self-follow.
        """
        if follower_id == author_id:
            raise ValidationError(
                "Users cannot follow themselves",
                {"author": "You cannot follow yourself."},
            )
        if self._store.count_where("follow", follower_id=follower_id, author_id=author_id):
            return False
        self._store.create_record(
            "follow",
            {"follower_id": follower_id, "author_id": author_id, "created_at": self._clock.now()},
        )
        self._router.invalidate(InvalidationEvent.for_follow(follower_id, author_id, "create"))
        logger.debug("User %d followed author %d", follower_id, author_id)
        return True

    def unfollow(self, follower_id: int, author_id: int) -> bool:
        """Returns False when there was nothing to remove."""
        rows = self._store.find_where("follow", follower_id=follower_id, author_id=author_id)
        if not rows:
            return False
        for row in rows:
            self._store.delete_record("follow", row.id)
        self._router.invalidate(InvalidationEvent.for_follow(follower_id, author_id, "delete"))
        logger.debug("User %d unfollowed author %d", follower_id, author_id)
        return True
