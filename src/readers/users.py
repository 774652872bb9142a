# src/readers/users.py — v1
"""User profile, story count and notification reads."""

from __future__ import annotations

from storykeeper.cache.keys import clamp_page, clamp_page_size
from storykeeper.cache.ttl import CacheTTL
from storykeeper.core.models import Notification, User, UserProfile
from storykeeper.readers.base import CachedReader


class UserReader(CachedReader):
    def user_profile(self, user_id: int) -> UserProfile | None:
        """Profile with embedded story and follow counts.

        A missing user is cached as ``False`` for a minute so repeated lookups
        of a bad id do not hit the store, without hiding a later signup long.
        """
        key = self._keys.user_profile(user_id)
        cached, found = self._cache.get(key)
        if found:
            return UserProfile.model_validate(cached) if cached else None

        user: User | None = self._store.get_record("user", user_id)  # type: ignore[assignment]
        if user is None:
            self._cache.set(key, False, CacheTTL.NEGATIVE_LOOKUP)
            return None

        profile = UserProfile(
            id=user.id,
            login=user.login,
            display_name=user.display_name or user.login,
            email=user.email,
            bio=user.bio,
            url=user.url,
            registered_at=user.registered_at,
            story_count=self._count_stories(user_id),
            follower_count=self._store.count_where("follow", author_id=user_id),
            following_count=self._store.count_where("follow", follower_id=user_id),
        )
        self._cache.set(key, profile.model_dump(mode="json"), CacheTTL.USER_PROFILE)
        return profile

    def _count_stories(self, user_id: int) -> int:
        """Published stories authored or co-authored."""
        own = self._store.count_where("story", status="published", author_id=user_id)
        shared = self._store.count_where(
            "story", status="published", author_id__ne=user_id, coauthor_ids__contains=user_id
        )
        return own + shared

    def user_story_count(self, user_id: int) -> int:
        return int(self._remember(
            self._keys.user_story_count(user_id), CacheTTL.STORY_COUNT,
            lambda: self._count_stories(user_id),
        ))

    def user_notifications(
        self, user_id: int, page: int = 1, page_size: int = 10
    ) -> list[Notification]:
        """Newest first."""
        page, page_size = clamp_page(page), clamp_page_size(page_size)

        def compute() -> list[dict]:
            rows = self._store.find_where(
                "notification",
                order_by="created_at",
                descending=True,
                limit=page_size,
                offset=(page - 1) * page_size,
                user_id=user_id,
            )
            return [n.model_dump(mode="json") for n in rows]

        rows = self._remember(
            self._keys.user_notifications(user_id, page, page_size),
            CacheTTL.NOTIFICATION_PAGE,
            compute,
        )
        return [Notification.model_validate(row) for row in rows]

    def unread_count(self, user_id: int) -> int:
        return int(self._remember(
            self._keys.unread_count(user_id), CacheTTL.UNREAD_COUNT,
            lambda: self._store.count_where("notification", user_id=user_id, is_read=False),
        ))
