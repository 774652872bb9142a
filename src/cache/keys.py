# src/cache/keys.py — v1
"""Deterministic cache key builders.

Every key is ``<namespace><kind>_<subject>[_<page>_<size>]``. Paginated keys
only ever use a page size from PAGE_SIZES so the invalidation router can
enumerate them.
"""

from __future__ import annotations

DEFAULT_NAMESPACE = "fanfic_"

PAGE_SIZES: tuple[int, ...] = (10, 15, 20)
DEFAULT_PAGE_SIZE = 10

# Paginated follow/bookmark/notification keys are invalidated for pages
# 1..MAX_INVALIDATED_PAGES only. Deeper pages expire by TTL.
MAX_INVALIDATED_PAGES = 10


def clamp_page(page: int) -> int:
    return page if page >= 1 else 1


def clamp_page_size(page_size: int) -> int:
    """Fall back to DEFAULT_PAGE_SIZE for sizes outside PAGE_SIZES."""
    return page_size if page_size in PAGE_SIZES else DEFAULT_PAGE_SIZE


class CacheKeys:
    """Key builders bound to one namespace."""

    def __init__(self, namespace: str = DEFAULT_NAMESPACE) -> None:
        self.namespace = namespace

    def _key(self, *parts: object) -> str:
        return self.namespace + "_".join(str(p) for p in parts)

    # --- Story ---

    def chapter_count(self, story_id: int) -> str:
        return self._key("chapter_count", story_id)

    def word_count(self, story_id: int) -> str:
        return self._key("word_count", story_id)

    def story_valid(self, story_id: int) -> str:
        return self._key("story_valid", story_id)

    def story_rating(self, story_id: int) -> str:
        return self._key("story_rating", story_id)

    def story_views(self, story_id: int) -> str:
        return self._key("story_views", story_id)

    def chapter_list(self, story_id: int) -> str:
        return self._key("chapter_list", story_id)

    # --- Chapter ---

    def chapter_rating(self, chapter_id: int) -> str:
        return self._key("chapter_rating", chapter_id)

    def chapter_views(self, chapter_id: int) -> str:
        return self._key("chapter_views", chapter_id)

    # --- Listings ---

    def recent_stories(self, page: int, page_size: int) -> str:
        return self._key("recent_stories", page, page_size)

    def genre_stories(self, genre_id: int, page: int, page_size: int) -> str:
        return self._key("genre_stories", genre_id, page, page_size)

    def status_stories(self, status_id: int, page: int, page_size: int) -> str:
        return self._key("status_stories", status_id, page, page_size)

    def widget_recent_stories(self, count: int) -> str:
        return self._key("widget_recent_stories", count)

    @property
    def recent_stories_prefix(self) -> str:
        return self._key("recent_stories_")

    @property
    def genre_stories_prefix(self) -> str:
        return self._key("genre_stories_")

    @property
    def status_stories_prefix(self) -> str:
        return self._key("status_stories_")

    @property
    def widget_recent_stories_prefix(self) -> str:
        return self._key("widget_recent_stories_")

    # --- Users ---

    def user_profile(self, user_id: int) -> str:
        return self._key("user_profile", user_id)

    def user_story_count(self, user_id: int) -> str:
        return self._key("user_story_count", user_id)

    def user_notifications(self, user_id: int, page: int, page_size: int) -> str:
        return self._key("user_notifications", user_id, page, page_size)

    def unread_count(self, user_id: int) -> str:
        return self._key("unread_count", user_id)

    # --- Follows ---

    def follower_count(self, author_id: int) -> str:
        return self._key("follower_count", author_id)

    def user_follow_count(self, user_id: int) -> str:
        return self._key("user_follow_count", user_id)

    def followed_authors(self, user_id: int, page_size: int, page: int) -> str:
        return self._key("followed_authors", user_id, page_size, page)

    def author_followers(self, author_id: int, page_size: int, page: int) -> str:
        return self._key("author_followers", author_id, page_size, page)

    def is_following(self, user_id: int, author_id: int) -> str:
        return self._key("is_following", user_id, author_id)

    def top_authors(self, limit: int, min_followers: int) -> str:
        return self._key("top_authors", limit, min_followers)

    @property
    def top_authors_prefix(self) -> str:
        return self._key("top_authors_")

    # --- Bookmarks ---

    def user_bookmark_count(self, user_id: int) -> str:
        return self._key("user_bookmark_count", user_id)

    def user_bookmarks(self, user_id: int, page: int, page_size: int) -> str:
        return self._key("user_bookmarks", user_id, page, page_size)

    def is_bookmarked(self, user_id: int, story_id: int) -> str:
        return self._key("is_bookmarked", user_id, story_id)

    def most_bookmarked_stories(self, limit: int, page: int) -> str:
        return self._key("most_bookmarked_stories", limit, page)

    @property
    def most_bookmarked_prefix(self) -> str:
        return self._key("most_bookmarked_stories_")
