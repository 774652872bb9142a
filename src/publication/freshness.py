# src/publication/freshness.py — v1
"""Content freshness: the single owner of ``Story.content_updated_at``.

The marker records the last *qualifying* content change. Story creation sets
the baseline, chapter creation advances it, chapter edits advance it only when
the content changed significantly, and date-only edits and story-level edits
never touch it. Status automation reads the same marker through
``status_transition_target`` so the two rules cannot drift apart.
"""

from __future__ import annotations

import calendar
import logging
from datetime import datetime
from typing import Literal

from storykeeper.core.clock import Clock
from storykeeper.core.models import Story
from storykeeper.store.base_record_store import BaseRecordStore

logger = logging.getLogger(__name__)

StatusSlug = Literal["ongoing", "on-hiatus", "abandoned"]


def months_before(moment: datetime, months: int) -> datetime:
    """Same wall time ``months`` calendar months earlier, day clamped to month end."""
    index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class ContentFreshness:
    def __init__(
        self,
        store: BaseRecordStore,
        clock: Clock,
        hiatus_months: int = 4,
        abandoned_months: int = 10,
    ) -> None:
        self._store = store
        self._clock = clock
        self.hiatus_months = hiatus_months
        self.abandoned_months = abandoned_months

    # --- Writers ---

    def _touch(self, story_id: int) -> datetime:
        now = self._clock.now()
        self._store.update_story(story_id, {"content_updated_at": now})
        return now

    def mark_story_created(self, story_id: int) -> datetime:
        return self._touch(story_id)

    def mark_chapter_created(self, story_id: int) -> datetime:
        return self._touch(story_id)

    def mark_chapter_edited(
        self, story_id: int, significant: bool, metadata_only: bool = False
    ) -> bool:
        """Advance the marker for a significant edit. Returns True when advanced."""
        if metadata_only or not significant:
            logger.debug("Content marker preserved for story %d", story_id)
            return False
        self._touch(story_id)
        return True

    # --- Readers ---

    @staticmethod
    def last_content_update(story: Story) -> datetime | None:
        """Marker, falling back to the publish then creation date for legacy rows."""
        return story.content_updated_at or story.publish_date_utc or story.created_at

    def hiatus_cutoff(self, now: datetime | None = None) -> datetime:
        return months_before(now or self._clock.now(), self.hiatus_months)

    def abandoned_cutoff(self, now: datetime | None = None) -> datetime:
        return months_before(now or self._clock.now(), self.abandoned_months)

    def status_transition_target(
        self, story: Story, current_status_slug: str, now: datetime | None = None
    ) -> StatusSlug | None:
        """Inactivity transition due for a published story, if any.

        ongoing -> on-hiatus once the marker is at or before the hiatus cutoff;
        on-hiatus -> abandoned once it is at or before the abandoned cutoff.
        """
        if story.status != "published":
            return None
        last = self.last_content_update(story)
        if last is None:
            return None
        if current_status_slug == "ongoing" and last <= self.hiatus_cutoff(now):
            return "on-hiatus"
        if current_status_slug == "on-hiatus" and last <= self.abandoned_cutoff(now):
            return "abandoned"
        return None
