# src/readers/listings.py — v1
"""Paginated story listings (recent, by genre, by status) and the widget snapshot.

Listings hold story ids only, newest publish date first. They are invalidated
coarsely by prefix on any story mutation.
"""

from __future__ import annotations

from typing import Any, Literal

from storykeeper.cache.keys import clamp_page, clamp_page_size
from storykeeper.cache.ttl import CacheTTL
from storykeeper.readers.base import CachedReader

ListingKind = Literal["recent", "genre", "status"]

WIDGET_MAX_COUNT = 20


class ListingReader(CachedReader):
    def _published_ids(self, page: int, page_size: int, **filters: Any) -> list[int]:
        stories = self._store.find_where(
            "story",
            order_by="publish_date_utc",
            descending=True,
            limit=page_size,
            offset=(page - 1) * page_size,
            status="published",
            **filters,
        )
        return [s.id for s in stories]

    def recent_stories(self, page: int = 1, page_size: int = 10) -> list[int]:
        page, page_size = clamp_page(page), clamp_page_size(page_size)
        return self._remember(
            self._keys.recent_stories(page, page_size),
            CacheTTL.RECENT_STORIES,
            lambda: self._published_ids(page, page_size),
        )

    def stories_by_genre(self, genre_id: int, page: int = 1, page_size: int = 10) -> list[int]:
        page, page_size = clamp_page(page), clamp_page_size(page_size)
        return self._remember(
            self._keys.genre_stories(genre_id, page, page_size),
            CacheTTL.TAXONOMY_LISTING,
            lambda: self._published_ids(page, page_size, genre_ids__contains=genre_id),
        )

    def stories_by_status(self, status_id: int, page: int = 1, page_size: int = 10) -> list[int]:
        page, page_size = clamp_page(page), clamp_page_size(page_size)
        return self._remember(
            self._keys.status_stories(status_id, page, page_size),
            CacheTTL.TAXONOMY_LISTING,
            lambda: self._published_ids(page, page_size, status_tag_ids__contains=status_id),
        )

    def widget_recent_stories(self, count: int = 5) -> list[int]:
        """Most recently published stories for the sidebar widget."""
        count = max(1, min(count, WIDGET_MAX_COUNT))
        return self._remember(
            self._keys.widget_recent_stories(count),
            CacheTTL.WIDGET_RECENT_STORIES,
            lambda: self._published_ids(1, count),
        )

    def get_paginated_listing(
        self,
        kind: ListingKind,
        filter_id: int | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> list[int]:
        """Dispatch by listing kind. ``filter_id`` is the genre/status term id.

        Raises:
            ValueError: Unknown kind, or missing filter_id for genre/status.
        """
        if kind == "recent":
            return self.recent_stories(page, page_size)
        if kind not in ("genre", "status"):
            raise ValueError(f"Unsupported listing kind: {kind!r}")
        if filter_id is None:
            raise ValueError(f"Listing kind {kind!r} requires a filter_id")
        if kind == "genre":
            return self.stories_by_genre(filter_id, page, page_size)
        return self.stories_by_status(filter_id, page, page_size)
