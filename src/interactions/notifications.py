# src/interactions/notifications.py — v1
"""Notification writes that affect cached counts and pages.

Dispatch (email, on-site rendering) happens elsewhere; this only records
notifications and their read state.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from storykeeper.core.clock import Clock
from storykeeper.invalidation.models import InvalidationEvent
from storykeeper.invalidation.router import InvalidationRouter
from storykeeper.store.base_record_store import BaseRecordStore

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, store: BaseRecordStore, router: InvalidationRouter, clock: Clock) -> None:
        self._store = store
        self._router = router
        self._clock = clock

    def notify(self, user_id: int, message: str, type: str = "info", link: str = "") -> int:
        notification_id = self._store.create_record(
            "notification",
            {
                "user_id": user_id,
                "type": type,
                "message": message,
                "link": link,
                "created_at": self._clock.now(),
            },
        )
        self._router.invalidate(InvalidationEvent.for_notifications(user_id))
        return notification_id

    def mark_read(self, user_id: int, notification_ids: Iterable[int] | None = None) -> int:
        """Mark the user's notifications read (all unread ones when ids is None).

        Ids belonging to another user are ignored. Returns the number changed.
        """
        filters: dict = {"user_id": user_id, "is_read": False}
        if notification_ids is not None:
            filters["id__in"] = list(notification_ids)
        rows = self._store.find_where("notification", **filters)
        for row in rows:
            self._store.update_record("notification", row.id, {"is_read": True})
        if rows:
            self._router.invalidate(InvalidationEvent.for_notifications(user_id))
        logger.debug("Marked %d notifications read for user %d", len(rows), user_id)
        return len(rows)
