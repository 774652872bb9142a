# tests/unit/interactions/test_unit_interactions.py — v1
"""Tests for interactions/ — writes that feed the invalidation router."""

from __future__ import annotations

import pytest

from storykeeper.core.errors import RecordNotFoundError, ValidationError
from storykeeper.interactions.bookmarks import BookmarkService
from storykeeper.interactions.follows import FollowService
from storykeeper.interactions.notifications import NotificationService
from storykeeper.interactions.taxonomy import TaxonomyService
from storykeeper.readers.social import BookmarkReader, FollowReader
from storykeeper.readers.users import UserReader


class TestFollowService:
    @pytest.fixture
    def service(self, store, router, clock) -> FollowService:
        return FollowService(store, router, clock)

    def test_follow_refreshes_cached_reads(self, service, store, cache, keys):
        reader = FollowReader(store, cache, keys)
        assert reader.follower_count(2) == 0
        assert reader.is_following(1, 2) is False
        assert service.follow(1, 2) is True
        assert reader.follower_count(2) == 1
        assert reader.is_following(1, 2) is True
        assert reader.followed_authors(1) == [2]

    def test_duplicate_follow(self, service, store):
        service.follow(1, 2)
        assert service.follow(1, 2) is False
        assert store.count_where("follow") == 1

    def test_self_follow_rejected(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service.follow(3, 3)
        assert exc_info.value.missing_fields == {"author": "You cannot follow yourself."}

    def test_unfollow(self, service, store, cache, keys):
        reader = FollowReader(store, cache, keys)
        service.follow(1, 2)
        assert reader.top_authors() != []
        assert service.unfollow(1, 2) is True
        assert service.unfollow(1, 2) is False
        assert reader.top_authors() == []
        assert reader.following_count(1) == 0


class TestBookmarkService:
    @pytest.fixture
    def service(self, store, router, clock) -> BookmarkService:
        return BookmarkService(store, router, clock)

    def test_add_and_remove(self, service, store, cache, keys):
        story_id = store.create_story({"author_id": 9})
        reader = BookmarkReader(store, cache, keys)
        assert reader.is_bookmarked(1, story_id) is False
        assert service.add(1, story_id) is True
        assert service.add(1, story_id) is False
        assert reader.is_bookmarked(1, story_id) is True
        assert reader.bookmark_count(1) == 1
        assert service.remove(1, story_id) is True
        assert reader.user_bookmarks(1) == []
        assert service.remove(1, story_id) is False

    def test_missing_story(self, service):
        with pytest.raises(RecordNotFoundError):
            service.add(1, 404)


class TestNotificationService:
    @pytest.fixture
    def service(self, store, router, clock) -> NotificationService:
        return NotificationService(store, router, clock)

    def test_notify_and_mark_read(self, service, store, cache, keys):
        reader = UserReader(store, cache, keys)
        assert reader.unread_count(4) == 0
        first = service.notify(4, "New chapter", type="chapter", link="/s/1/2")
        service.notify(4, "New follower")
        assert reader.unread_count(4) == 2
        assert service.mark_read(4, [first]) == 1
        assert reader.unread_count(4) == 1
        assert service.mark_read(4) == 1
        assert reader.unread_count(4) == 0

    def test_mark_read_ignores_other_users(self, service):
        other = service.notify(5, "Not yours")
        assert service.mark_read(4, [other]) == 0

    def test_nothing_changed_does_not_invalidate(self, service, cache, keys):
        cache.set(keys.unread_count(4), 3, 60)
        assert service.mark_read(4) == 0
        assert cache.get(keys.unread_count(4)) == (3, True)


class TestTaxonomyService:
    @pytest.fixture
    def service(self, store, router) -> TaxonomyService:
        return TaxonomyService(store, router)

    def test_create_flushes_namespace(self, service, cache, keys):
        cache.set(keys.word_count(1), 10, 60)
        term_id = service.create_term("genre", "horror")
        assert cache.keys() == []
        assert term_id > 0

    def test_rename(self, service, store):
        term_id = service.create_term("genre", "scifi", "Sci-Fi")
        term = service.rename_term(term_id, "Science Fiction", slug="science-fiction")
        assert term.name == "Science Fiction"
        assert store.get_record("term", term_id).slug == "science-fiction"

    def test_delete_detaches_from_stories(self, service, store, terms):
        story_id = store.create_story(
            {"author_id": 1, "genre_ids": [terms["fantasy"], terms["mystery"]]}
        )
        assert service.delete_term(terms["fantasy"]) == 0
        assert store.get_story(story_id).genre_ids == [terms["mystery"]]
        assert store.get_record("term", terms["fantasy"]) is None

    def test_delete_only_genre_drafts_published_story(self, coordinator, store, terms, published_story):
        assert coordinator.taxonomy.delete_term(terms["fantasy"]) == 1
        story = store.get_story(published_story)
        assert story.status == "draft"
        assert story.genre_ids == []
        assert coordinator.get_story_aggregate(published_story).is_valid is False

    def test_delete_status_tag_drafts_published_story(self, coordinator, store, terms, published_story):
        assert coordinator.taxonomy.delete_term(terms["ongoing"]) == 1
        assert store.get_story(published_story).status == "draft"

    def test_delete_spare_genre_keeps_published(self, coordinator, store, terms, published_story):
        store.update_story(published_story, {"genre_ids": [terms["fantasy"], terms["mystery"]]})
        assert coordinator.taxonomy.delete_term(terms["mystery"]) == 0
        assert store.get_story(published_story).status == "published"

    def test_delete_missing(self, service):
        with pytest.raises(RecordNotFoundError):
            service.delete_term(404)

    def test_flush(self, service, cache, keys):
        cache.set(keys.top_authors(10, 1), [], 60)
        cache.set(keys.unread_count(1), 0, 60)
        assert service.flush() == 2
