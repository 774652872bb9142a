# src/readers/social.py — v1
"""Follow graph and bookmark reads, including the two leaderboards."""

from __future__ import annotations

from collections import Counter

from storykeeper.cache.keys import clamp_page, clamp_page_size
from storykeeper.cache.ttl import CacheTTL
from storykeeper.core.models import AuthorFollowerCount, StoryBookmarkCount
from storykeeper.readers.base import CachedReader


class FollowReader(CachedReader):
    def follower_count(self, author_id: int) -> int:
        return int(self._remember(
            self._keys.follower_count(author_id), CacheTTL.FOLLOW_COUNT,
            lambda: self._store.count_where("follow", author_id=author_id),
        ))

    def following_count(self, user_id: int) -> int:
        return int(self._remember(
            self._keys.user_follow_count(user_id), CacheTTL.FOLLOW_COUNT,
            lambda: self._store.count_where("follow", follower_id=user_id),
        ))

    def followed_authors(self, user_id: int, page: int = 1, page_size: int = 20) -> list[int]:
        """Author ids the user follows, most recent follow first."""
        page, page_size = clamp_page(page), clamp_page_size(page_size)

        def compute() -> list[int]:
            rows = self._store.find_where(
                "follow", order_by="created_at", descending=True,
                limit=page_size, offset=(page - 1) * page_size, follower_id=user_id,
            )
            return [f.author_id for f in rows]

        return self._remember(
            self._keys.followed_authors(user_id, page_size, page),
            CacheTTL.FOLLOWED_AUTHORS_PAGE,
            compute,
        )

    def author_followers(self, author_id: int, page: int = 1, page_size: int = 20) -> list[int]:
        """Follower ids of an author, most recent first."""
        page, page_size = clamp_page(page), clamp_page_size(page_size)

        def compute() -> list[int]:
            rows = self._store.find_where(
                "follow", order_by="created_at", descending=True,
                limit=page_size, offset=(page - 1) * page_size, author_id=author_id,
            )
            return [f.follower_id for f in rows]

        return self._remember(
            self._keys.author_followers(author_id, page_size, page),
            CacheTTL.FOLLOWERS_PAGE,
            compute,
        )

    def is_following(self, user_id: int, author_id: int) -> bool:
        return bool(self._remember(
            self._keys.is_following(user_id, author_id), CacheTTL.FOLLOW_STATUS,
            lambda: self._store.count_where(
                "follow", follower_id=user_id, author_id=author_id
            ) > 0,
        ))

    def top_authors(self, limit: int = 10, min_followers: int = 1) -> list[AuthorFollowerCount]:
        """Authors by follower count, ties broken by lower id."""
        def compute() -> list[dict]:
            counts = Counter(f.author_id for f in self._store.find_where("follow"))
            ranked = sorted(
                ((author, n) for author, n in counts.items() if n >= min_followers),
                key=lambda item: (-item[1], item[0]),
            )
            return [
                {"author_id": author, "follower_count": n} for author, n in ranked[:limit]
            ]

        rows = self._remember(
            self._keys.top_authors(limit, min_followers), CacheTTL.TOP_AUTHORS, compute
        )
        return [AuthorFollowerCount.model_validate(row) for row in rows]


class BookmarkReader(CachedReader):
    def bookmark_count(self, user_id: int) -> int:
        return int(self._remember(
            self._keys.user_bookmark_count(user_id), CacheTTL.BOOKMARK_COUNT,
            lambda: self._store.count_where("bookmark", user_id=user_id),
        ))

    def user_bookmarks(self, user_id: int, page: int = 1, page_size: int = 10) -> list[int]:
        """Bookmarked story ids, newest bookmark first."""
        page, page_size = clamp_page(page), clamp_page_size(page_size)

        def compute() -> list[int]:
            rows = self._store.find_where(
                "bookmark", order_by="created_at", descending=True,
                limit=page_size, offset=(page - 1) * page_size, user_id=user_id,
            )
            return [b.story_id for b in rows]

        return self._remember(
            self._keys.user_bookmarks(user_id, page, page_size),
            CacheTTL.BOOKMARK_PAGE,
            compute,
        )

    def is_bookmarked(self, user_id: int, story_id: int) -> bool:
        return bool(self._remember(
            self._keys.is_bookmarked(user_id, story_id), CacheTTL.BOOKMARK_STATUS,
            lambda: self._store.count_where("bookmark", user_id=user_id, story_id=story_id) > 0,
        ))

    def most_bookmarked_stories(self, limit: int = 10, page: int = 1) -> list[StoryBookmarkCount]:
        """Stories by bookmark count, ties broken by lower id."""
        page = clamp_page(page)

        def compute() -> list[dict]:
            counts = Counter(b.story_id for b in self._store.find_where("bookmark"))
            ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
            start = (page - 1) * limit
            return [
                {"story_id": story, "bookmark_count": n}
                for story, n in ranked[start:start + limit]
            ]

        rows = self._remember(
            self._keys.most_bookmarked_stories(limit, page), CacheTTL.MOST_BOOKMARKED, compute
        )
        return [StoryBookmarkCount.model_validate(row) for row in rows]
