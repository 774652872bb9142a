# src/publication/date_guard.py — v1
"""Anti-cheat publish date guard.

Stops authors from moving a publish date forward to make stale content look
freshly updated. Forward moves on a chapter need a significant content change;
forward moves on a story are never allowed from the story form. Backdating is
always allowed, to support importing older work.
"""

from __future__ import annotations

import difflib
import logging
import re
from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from storykeeper.core.errors import DateGuardRejection
from storykeeper.core.text import normalize_whitespace

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Texts at or above this length fall back to the length heuristic.
SIMILARITY_MAX_LENGTH = 5000
SIMILARITY_THRESHOLD = 0.90
LENGTH_CHANGE_THRESHOLD = 0.10

MALFORMED_DATE = "Publish date must be a calendar date in YYYY-MM-DD format."
FUTURE_DATE = "Publish date cannot be in the future."
CHAPTER_FORWARD_DATE = (
    "The publish date can only be moved forward when the chapter content "
    "has changed significantly."
)
STORY_FORWARD_DATE = (
    "A story's publish date cannot be moved forward. Publish or update a "
    "chapter to refresh the story."
)


def parse_publish_date(raw: str, today: date) -> date:
    """Parse a strict ``YYYY-MM-DD`` date that is not after ``today``.

    Raises:
        DateGuardRejection: Malformed or future date.
    """
    value = (raw or "").strip()
    if not _DATE_RE.match(value):
        raise DateGuardRejection(MALFORMED_DATE)
    try:
        parsed = datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as e:
        raise DateGuardRejection(MALFORMED_DATE) from e
    if parsed > today:
        raise DateGuardRejection(FUTURE_DATE)
    return parsed


def is_content_significantly_changed(old_content: str, new_content: str) -> bool:
    """Judge whether an edit is substantive.

    Both texts are whitespace-normalised first. Short texts compare by
    character similarity (< 90% is significant); long texts by relative
    length difference (>= 10% is significant).
    """
    old = normalize_whitespace(old_content)
    new = normalize_whitespace(new_content)

    if old == new:
        return False
    if not old or not new:
        return True

    if len(old) < SIMILARITY_MAX_LENGTH and len(new) < SIMILARITY_MAX_LENGTH:
        ratio = difflib.SequenceMatcher(None, old, new, autojunk=False).ratio()
        return ratio < SIMILARITY_THRESHOLD

    longest = max(len(old), len(new))
    return abs(len(old) - len(new)) / longest >= LENGTH_CHANGE_THRESHOLD


def combine_publish_date(
    new_date: date, previous_local: datetime | None, tz: ZoneInfo
) -> tuple[datetime, datetime]:
    """Apply a calendar date, keeping the previous time of day (00:00 if none).

    Returns:
        ``(local_naive, utc_aware)``.
    """
    clock_time = previous_local.time() if previous_local is not None else time(0, 0)
    local = datetime.combine(new_date, clock_time)
    utc = local.replace(tzinfo=tz).astimezone(timezone.utc)
    return local, utc


class DateGuardDecision(BaseModel):
    allowed: bool
    reason: str | None = None
    date_changed: bool = False
    metadata_only: bool = False


class DateGuard:
    """Decide whether a publish-date change is acceptable."""

    def evaluate(
        self,
        old_content: str,
        new_content: str,
        old_date: date | None,
        new_date: date | None,
    ) -> DateGuardDecision:
        """Gate a chapter date change against the content edit that comes with it.

        ``metadata_only`` flags an accepted date change whose content edit is
        not significant; such an edit must never advance content freshness.
        """
        date_changed = new_date is not None and new_date != old_date
        if not date_changed:
            return DateGuardDecision(allowed=True)

        significant = is_content_significantly_changed(old_content, new_content)
        forward = old_date is not None and new_date > old_date
        if forward and not significant:
            logger.info("Rejected forward chapter date %s -> %s", old_date, new_date)
            return DateGuardDecision(
                allowed=False, reason=CHAPTER_FORWARD_DATE, date_changed=True
            )
        return DateGuardDecision(
            allowed=True, date_changed=True, metadata_only=not significant
        )

    def evaluate_story(self, old_date: date | None, new_date: date | None) -> DateGuardDecision:
        """Story dates may only move backward (or be set for the first time)."""
        date_changed = new_date is not None and new_date != old_date
        if not date_changed:
            return DateGuardDecision(allowed=True)
        if old_date is not None and new_date > old_date:
            logger.info("Rejected forward story date %s -> %s", old_date, new_date)
            return DateGuardDecision(
                allowed=False, reason=STORY_FORWARD_DATE, date_changed=True
            )
        return DateGuardDecision(allowed=True, date_changed=True, metadata_only=True)
