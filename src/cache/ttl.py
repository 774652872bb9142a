# src/cache/ttl.py — v1
"""TTL classes by data volatility, in seconds.

Hard-coded per data kind; there is no runtime override.
"""

from __future__ import annotations

MINUTE = 60
HOUR = 60 * MINUTE


class CacheTTL:
    """Time-to-live per cached data kind."""

    # 1 minute: unread counts and negative lookups
    UNREAD_COUNT = 1 * MINUTE
    NEGATIVE_LOOKUP = 1 * MINUTE

    # 2 minutes
    NOTIFICATION_PAGE = 2 * MINUTE

    # 5 minutes
    RATING = 5 * MINUTE
    VIEWS = 5 * MINUTE
    USER_PROFILE = 5 * MINUTE
    FOLLOW_STATUS = 5 * MINUTE
    FOLLOWED_AUTHORS_PAGE = 5 * MINUTE
    BOOKMARK_PAGE = 5 * MINUTE
    BOOKMARK_STATUS = 5 * MINUTE

    # 10 minutes
    FOLLOW_COUNT = 10 * MINUTE
    FOLLOWERS_PAGE = 10 * MINUTE
    BOOKMARK_COUNT = 10 * MINUTE
    WIDGET_RECENT_STORIES = 10 * MINUTE

    # 30 minutes
    STORY_COUNT = 30 * MINUTE
    RECENT_STORIES = 30 * MINUTE
    TOP_AUTHORS = 30 * MINUTE
    MOST_BOOKMARKED = 30 * MINUTE

    # 1 hour
    CHAPTER_LIST = 1 * HOUR
    TAXONOMY_LISTING = 1 * HOUR

    # 6 hours
    CHAPTER_COUNT = 6 * HOUR
    WORD_COUNT = 6 * HOUR
    STORY_VALIDITY = 6 * HOUR
