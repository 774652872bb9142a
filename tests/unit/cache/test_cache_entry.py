# tests/unit/cache/test_cache_entry.py — v1
"""Tests for cache/models.py and cache/ttl.py."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from storykeeper.cache.models import CacheEntry
from storykeeper.cache.ttl import CacheTTL


class TestCacheEntry:
    def test_build_and_expiry(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        entry = CacheEntry.build("k", 1, 60, now)
        assert entry.expires_at == now + timedelta(seconds=60)
        assert not entry.is_expired(now + timedelta(seconds=59))
        assert entry.is_expired(now + timedelta(seconds=60))


class TestCacheTTL:
    def test_classes(self):
        assert CacheTTL.UNREAD_COUNT == CacheTTL.NEGATIVE_LOOKUP == 60
        assert CacheTTL.NOTIFICATION_PAGE == 120
        assert CacheTTL.RATING == CacheTTL.USER_PROFILE == CacheTTL.FOLLOW_STATUS == 300
        assert CacheTTL.FOLLOW_COUNT == CacheTTL.WIDGET_RECENT_STORIES == 600
        assert CacheTTL.RECENT_STORIES == CacheTTL.TOP_AUTHORS == 1800
        assert CacheTTL.CHAPTER_LIST == CacheTTL.TAXONOMY_LISTING == 3600
        assert CacheTTL.CHAPTER_COUNT == CacheTTL.WORD_COUNT == CacheTTL.STORY_VALIDITY == 21600
