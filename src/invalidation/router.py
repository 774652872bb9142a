# src/invalidation/router.py — v1
"""Maps a mutation event to the cache keys and prefixes it poisons.

The fan-out table is fixed per entity kind. Listings are invalidated
coarsely by prefix; paginated per-user lists by enumerating pages
1..MAX_INVALIDATED_PAGES for every size in PAGE_SIZES. Pages beyond that
bound are left to expire by TTL.

Invalidation is idempotent: deleting an absent key is a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from storykeeper.cache.base_cache_store import BaseCacheStore
from storykeeper.cache.keys import MAX_INVALIDATED_PAGES, PAGE_SIZES, CacheKeys
from storykeeper.invalidation.models import InvalidationEvent
from storykeeper.store.base_record_store import BaseRecordStore

logger = logging.getLogger(__name__)


class InvalidationRouter:
    """Purge derived cache entries after a committed write.

    Args:
        cache: Cache layer to purge.
        keys: Key builders for the configured namespace.
        store: Used to resolve missing linkage (a chapter's parent story, a
            story's authors) when the event does not carry it.
    """

    def __init__(
        self,
        cache: BaseCacheStore,
        keys: CacheKeys | None = None,
        store: BaseRecordStore | None = None,
    ) -> None:
        self._cache = cache
        self._keys = keys or CacheKeys()
        self._store = store
        self._fanout: dict[str, Callable[[InvalidationEvent], int]] = {
            "story": self._invalidate_story,
            "chapter": self._invalidate_chapter,
            "follow": self._invalidate_follow,
            "bookmark": self._invalidate_bookmark,
            "notification": self._invalidate_notifications,
            "taxonomy": self._invalidate_taxonomy,
        }

    def invalidate(self, event: InvalidationEvent) -> int:
        """Apply the fan-out for one event.

        Returns:
            Number of exact keys deleted plus entries removed by prefix.
        """
        removed = self._fanout[event.entity_kind](event)
        logger.debug(
            "Invalidated %s %s (%s): %d keys",
            event.entity_kind, event.entity_id, event.mutation, removed,
        )
        return removed

    # --- Primitives ---

    def _delete(self, keys: Iterable[str]) -> int:
        count = 0
        for key in keys:
            self._cache.delete(key)
            count += 1
        return count

    def _delete_prefixes(self, prefixes: Iterable[str]) -> int:
        return sum(self._cache.delete_by_prefix(p) for p in prefixes)

    @staticmethod
    def _pages(build: Callable[[int, int], str]) -> list[str]:
        """Every (page, size) key for pages 1..MAX_INVALIDATED_PAGES."""
        return [
            build(page, size)
            for page in range(1, MAX_INVALIDATED_PAGES + 1)
            for size in PAGE_SIZES
        ]

    # --- Fan-out rules ---

    def _invalidate_chapter(self, event: InvalidationEvent) -> int:
        k = self._keys
        removed = self._delete([
            k.chapter_views(event.entity_id),
            k.chapter_rating(event.entity_id),
        ])
        story_id = event.story_id
        if story_id is None and self._store is not None:
            chapter = self._store.get_chapter(event.entity_id)
            story_id = None if chapter is None else chapter.story_id
        if story_id is None:
            logger.warning("Chapter %d has no resolvable parent story", event.entity_id)
            return removed
        return removed + self.invalidate(
            InvalidationEvent(entity_kind="story", entity_id=story_id, story_id=story_id)
        )

    def _invalidate_story(self, event: InvalidationEvent) -> int:
        k = self._keys
        story_id = event.entity_id
        removed = self._delete([
            k.chapter_count(story_id),
            k.word_count(story_id),
            k.story_valid(story_id),
            k.story_rating(story_id),
            k.story_views(story_id),
            k.chapter_list(story_id),
        ])
        removed += self._delete_prefixes([
            k.recent_stories_prefix,
            k.genre_stories_prefix,
            k.status_stories_prefix,
            k.widget_recent_stories_prefix,
        ])

        author_ids: Iterable[int] = event.author_ids
        if not author_ids and self._store is not None:
            story = self._store.get_story(story_id)
            author_ids = [] if story is None else story.author_ids
        for author_id in author_ids:
            removed += self._delete([
                k.user_story_count(author_id),
                k.user_profile(author_id),
            ])
        return removed

    def _invalidate_follow(self, event: InvalidationEvent) -> int:
        k = self._keys
        follower_id, author_id = event.user_id, event.target_user_id
        keys: list[str] = []
        for user_id in (follower_id, author_id):
            if user_id is None:
                continue
            keys += [
                k.follower_count(user_id),
                k.user_follow_count(user_id),
                k.user_profile(user_id),
            ]
        if follower_id is not None:
            keys += self._pages(lambda page, size: k.followed_authors(follower_id, size, page))
        if author_id is not None:
            keys += self._pages(lambda page, size: k.author_followers(author_id, size, page))
        if follower_id is not None and author_id is not None:
            keys.append(k.is_following(follower_id, author_id))
        return self._delete(keys) + self._delete_prefixes([k.top_authors_prefix])

    def _invalidate_bookmark(self, event: InvalidationEvent) -> int:
        k = self._keys
        keys: list[str] = []
        user_id = event.user_id
        if user_id is not None:
            keys.append(k.user_bookmark_count(user_id))
            keys += self._pages(lambda page, size: k.user_bookmarks(user_id, page, size))
            if event.story_id is not None:
                keys.append(k.is_bookmarked(user_id, event.story_id))
        return self._delete(keys) + self._delete_prefixes([k.most_bookmarked_prefix])

    def _invalidate_notifications(self, event: InvalidationEvent) -> int:
        k = self._keys
        user_id = event.user_id
        if user_id is None:
            return 0
        keys = [k.unread_count(user_id)]
        keys += self._pages(lambda page, size: k.user_notifications(user_id, page, size))
        return self._delete(keys)

    def _invalidate_taxonomy(self, event: InvalidationEvent) -> int:
        logger.info("Taxonomy change: flushing cache namespace %r", self._keys.namespace)
        return self._delete_prefixes([self._keys.namespace])
