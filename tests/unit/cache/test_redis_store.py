# tests/unit/cache/test_redis_store.py — v2
"""Tests for cache/redis_store.py — mocked Redis client."""

from __future__ import annotations

import fnmatch
from unittest.mock import MagicMock, patch

import pytest
import redis

from storykeeper.cache.redis_store import RedisCacheStore
from storykeeper.core.errors import CacheUnavailableError


def _make_store() -> tuple[RedisCacheStore, dict[str, str], MagicMock]:
    """RedisCacheStore over a dict-backed fake client."""
    storage: dict[str, str] = {}

    mock_redis = MagicMock()
    mock_redis.get = lambda k: storage.get(k)
    mock_redis.set = MagicMock(side_effect=lambda k, v, ex=None: storage.__setitem__(k, v))
    mock_redis.delete = lambda *ks: sum(1 for k in ks if storage.pop(k, None) is not None)
    mock_redis.scan_iter = lambda match, count=None: [
        k for k in list(storage) if fnmatch.fnmatchcase(k, match)
    ]

    with patch("storykeeper.cache.redis_store.RedisCacheStore.__init__", return_value=None):
        store = RedisCacheStore.__new__(RedisCacheStore)
        store._client = mock_redis
        store._errors = (redis.RedisError,)
    return store, storage, mock_redis


class TestRedisCacheStore:
    def test_import_error_without_redis(self):
        """Clear ImportError when redis is not available."""
        import sys
        redis_mod = sys.modules.get("redis")
        sys.modules["redis"] = None  # type: ignore[assignment]
        try:
            with pytest.raises(ImportError, match="redis"):
                RedisCacheStore(redis_url="redis://localhost")
        finally:
            if redis_mod is not None:
                sys.modules["redis"] = redis_mod
            else:
                sys.modules.pop("redis", None)

    def test_from_url(self):
        with patch("redis.Redis.from_url") as from_url:
            RedisCacheStore(redis_url="redis://cache:6379/2")
        from_url.assert_called_once_with("redis://cache:6379/2", decode_responses=True)

    def test_set_uses_expiry(self):
        store, storage, mock_redis = _make_store()
        store.set("fanfic_unread_count_3", 2, 60)
        mock_redis.set.assert_called_once_with("fanfic_unread_count_3", "2", ex=60)
        assert store.get("fanfic_unread_count_3") == (2, True)

    def test_miss(self):
        store, _, _ = _make_store()
        assert store.get("absent") == (None, False)

    def test_false_is_a_hit(self):
        store, _, _ = _make_store()
        store.set("fanfic_user_profile_4", False, 60)
        assert store.get("fanfic_user_profile_4") == (False, True)

    def test_corrupt_entry_is_a_miss(self):
        store, storage, _ = _make_store()
        storage["k"] = "{not json"
        assert store.get("k") == (None, False)

    def test_delete(self):
        store, storage, _ = _make_store()
        store.set("k", 1, 60)
        store.delete("k")
        store.delete("k")
        assert "k" not in storage

    def test_delete_by_prefix(self):
        store, storage, _ = _make_store()
        for key in ("fanfic_recent_stories_1_10", "fanfic_recent_stories_2_20", "fanfic_word_count_1"):
            store.set(key, 1, 60)
        assert store.delete_by_prefix("fanfic_recent_stories_") == 2
        assert list(storage) == ["fanfic_word_count_1"]

    def test_prefix_glob_characters_are_escaped(self):
        store, _, mock_redis = _make_store()
        mock_redis.scan_iter = MagicMock(return_value=[])
        store.delete_by_prefix("odd*[prefix]?")
        pattern = mock_redis.scan_iter.call_args.kwargs["match"]
        assert pattern == "odd\\*\\[prefix\\]\\?*"

    def test_connection_errors_are_wrapped(self):
        store, _, mock_redis = _make_store()
        mock_redis.get = MagicMock(side_effect=redis.ConnectionError("down"))
        with pytest.raises(CacheUnavailableError, match="down"):
            store.get("k")
