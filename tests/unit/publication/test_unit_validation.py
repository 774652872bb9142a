# tests/unit/publication/test_unit_validation.py — v1
"""Tests for publication/validation.py — publish gates and validity."""

from __future__ import annotations

import pytest

from storykeeper.publication.validation import (
    CHAPTER_MESSAGES,
    STORY_MESSAGES,
    PublicationValidator,
)


@pytest.fixture
def validator(store) -> PublicationValidator:
    return PublicationValidator(store)


@pytest.fixture
def complete_story(store, terms) -> int:
    story_id = store.create_story({
        "author_id": 1,
        "title": "Salt Roads",
        "introduction": "<p>Caravans and rumours.</p>",
        "genre_ids": [terms["fantasy"]],
        "status_tag_ids": [terms["ongoing"]],
    })
    store.create_chapter({
        "story_id": story_id, "chapter_type": "chapter", "number": 1,
        "content": "Text", "status": "published",
    })
    return story_id


class TestCanPublishStory:
    def test_complete_story_passes(self, validator, complete_story):
        check = validator.can_publish_story(complete_story)
        assert check.allowed is True
        assert check.missing_fields == {}

    def test_missing_story(self, validator):
        check = validator.can_publish_story(404)
        assert check.allowed is False
        assert check.missing_fields == {"invalid_story": STORY_MESSAGES["invalid_story"]}

    def test_reports_every_missing_field(self, validator, store):
        story_id = store.create_story({"author_id": 1, "introduction": "<br/> "})
        check = validator.can_publish_story(story_id)
        assert check.allowed is False
        assert set(check.missing_fields) == {
            "title", "introduction", "published_chapters", "genre", "status"
        }
        assert STORY_MESSAGES["status"] in check.messages

    def test_two_status_tags_fail(self, validator, store, complete_story, terms):
        store.update_story(complete_story, {
            "status_tag_ids": [terms["ongoing"], terms["completed"]]
        })
        assert set(validator.can_publish_story(complete_story).missing_fields) == {"status"}

    def test_epilogue_alone_is_not_enough(self, validator, store, complete_story):
        store.update_chapter(1, {"chapter_type": "epilogue", "number": 1000})
        check = validator.can_publish_story(complete_story)
        assert set(check.missing_fields) == {"published_chapters"}

    def test_draft_chapter_does_not_count(self, validator, store, complete_story):
        store.update_chapter(1, {"status": "draft"})
        assert not validator.can_publish_story(complete_story).allowed

    def test_published_prologue_counts(self, validator, store, complete_story):
        store.update_chapter(1, {"chapter_type": "prologue", "number": 0})
        assert validator.can_publish_story(complete_story).allowed


class TestIsStoryValid:
    def test_title_not_required(self, validator, store, complete_story):
        story = store.update_story(complete_story, {"title": ""})
        assert validator.is_story_valid(story) is True

    def test_needs_genre(self, validator, store, complete_story):
        story = store.update_story(complete_story, {"genre_ids": []})
        assert validator.is_story_valid(story) is False


class TestCanPublishChapter:
    def test_missing_chapter(self, validator):
        check = validator.can_publish_chapter(5)
        assert check.missing_fields == {"invalid_chapter": CHAPTER_MESSAGES["invalid_chapter"]}

    def test_empty_content_and_orphan(self, validator, store):
        chapter_id = store.create_chapter({"story_id": 77, "number": 2, "content": "<p></p>"})
        check = validator.can_publish_chapter(chapter_id)
        assert set(check.missing_fields) == {"content", "parent_story"}

    def test_unnumbered_chapter(self, validator, store, complete_story):
        chapter_id = store.create_chapter({"story_id": complete_story, "content": "x"})
        assert set(validator.can_publish_chapter(chapter_id).missing_fields) == {"chapter_number"}

    def test_duplicate_number_among_substantive(self, validator, store, complete_story):
        chapter_id = store.create_chapter({"story_id": complete_story, "number": 1, "content": "x"})
        check = validator.can_publish_chapter(chapter_id)
        assert check.missing_fields == {
            "duplicate_chapter_number": CHAPTER_MESSAGES["duplicate_chapter_number"]
        }

    def test_epilogue_numbers_not_compared(self, validator, store, complete_story):
        store.create_chapter({
            "story_id": complete_story, "chapter_type": "epilogue", "number": 1000, "content": "x"
        })
        chapter_id = store.create_chapter({
            "story_id": complete_story, "chapter_type": "epilogue", "number": 1000, "content": "x"
        })
        assert validator.can_publish_chapter(chapter_id).allowed is True
