# tests/unit/readers/test_unit_users.py — v1
"""Tests for readers/users.py."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from storykeeper.readers.users import UserReader

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def users(store, cache, keys) -> UserReader:
    return UserReader(store, cache, keys)


class TestUserProfile:
    def test_profile_with_counts(self, users, store):
        user_id = store.create_record("user", {"login": "maren"})
        store.create_story({"author_id": user_id, "status": "published"})
        store.create_story({"author_id": 9, "coauthor_ids": [user_id], "status": "published"})
        store.create_story({"author_id": user_id})
        store.create_record("follow", {"follower_id": 3, "author_id": user_id})
        profile = users.user_profile(user_id)
        assert profile.display_name == "maren"
        assert profile.story_count == 2
        assert profile.follower_count == 1
        assert profile.following_count == 0

    def test_missing_user_cached_briefly(self, users, store, clock):
        assert users.user_profile(5) is None
        store.create_record("user", {"id": 5, "login": "late"})
        assert users.user_profile(5) is None
        clock.advance(seconds=60)
        assert users.user_profile(5).login == "late"

    def test_profile_served_from_cache(self, users, store):
        user_id = store.create_record("user", {"login": "maren", "display_name": "Maren"})
        users.user_profile(user_id)
        store.update_record("user", user_id, {"display_name": "M."})
        assert users.user_profile(user_id).display_name == "Maren"

    def test_user_story_count_ignores_own_coauthorship(self, users, store):
        store.create_story({"author_id": 4, "coauthor_ids": [4], "status": "published"})
        assert users.user_story_count(4) == 1


class TestNotifications:
    def test_newest_first_and_unread(self, users, store):
        for n in range(12):
            store.create_record("notification", {
                "user_id": 1, "message": f"m{n}", "is_read": n < 4,
                "created_at": T0 + timedelta(minutes=n),
            })
        page = users.user_notifications(1)
        assert [n.message for n in page[:2]] == ["m11", "m10"]
        assert len(users.user_notifications(1, page=2)) == 2
        assert users.unread_count(1) == 8
