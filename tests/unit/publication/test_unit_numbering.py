# tests/unit/publication/test_unit_numbering.py — v1
"""Tests for publication/numbering.py."""

from __future__ import annotations

import pytest

from storykeeper.core.errors import ConflictError, ValidationError
from storykeeper.publication.numbering import ChapterNumbering


@pytest.fixture
def numbering(store) -> ChapterNumbering:
    return ChapterNumbering(store)


@pytest.fixture
def story_id(store) -> int:
    return store.create_story({"author_id": 1})


class TestPrologue:
    def test_is_zero(self, numbering, story_id):
        assert numbering.assign(story_id, "prologue") == 0

    def test_second_prologue_conflicts(self, numbering, store, story_id):
        store.create_chapter({"story_id": story_id, "chapter_type": "prologue", "number": 0})
        with pytest.raises(ConflictError, match="already has a prologue"):
            numbering.assign(story_id, "prologue")

    def test_editing_the_prologue_is_fine(self, numbering, store, story_id):
        chapter_id = store.create_chapter(
            {"story_id": story_id, "chapter_type": "prologue", "number": 0}
        )
        current = store.get_chapter(chapter_id)
        assert numbering.assign(story_id, "prologue", current=current) == 0


class TestEpilogue:
    def test_first_free_from_base(self, numbering, story_id):
        assert numbering.assign(story_id, "epilogue") == 1000

    def test_skips_taken_numbers(self, numbering, store, story_id):
        store.create_chapter({"story_id": story_id, "chapter_type": "chapter", "number": 1000})
        assert numbering.assign(story_id, "epilogue") == 1001

    def test_second_epilogue_conflicts(self, numbering, store, story_id):
        store.create_chapter({"story_id": story_id, "chapter_type": "epilogue", "number": 1000})
        with pytest.raises(ConflictError, match="already has an epilogue"):
            numbering.assign(story_id, "epilogue")

    def test_editing_keeps_number(self, numbering, store, story_id):
        chapter_id = store.create_chapter(
            {"story_id": story_id, "chapter_type": "epilogue", "number": 1004}
        )
        current = store.get_chapter(chapter_id)
        assert numbering.assign(story_id, "epilogue", current=current) == 1004


class TestRegularChapter:
    def test_requested_number(self, numbering, story_id):
        assert numbering.assign(story_id, "chapter", 7) == 7

    def test_unnumbered_draft(self, numbering, story_id):
        assert numbering.assign(story_id, "chapter") is None

    @pytest.mark.parametrize("number", [0, 101, -1])
    def test_out_of_range(self, numbering, story_id, number):
        with pytest.raises(ValidationError) as exc_info:
            numbering.assign(story_id, "chapter", number)
        assert "chapter_number" in exc_info.value.missing_fields

    def test_collision(self, numbering, store, story_id):
        store.create_chapter({"story_id": story_id, "number": 3})
        with pytest.raises(ConflictError):
            numbering.assign(story_id, "chapter", 3)

    def test_own_number_on_edit(self, numbering, store, story_id):
        chapter_id = store.create_chapter({"story_id": story_id, "number": 3})
        assert numbering.assign(story_id, "chapter", 3, current=store.get_chapter(chapter_id)) == 3

    def test_epilogue_number_does_not_collide(self, numbering, store, story_id):
        store.create_chapter({"story_id": story_id, "chapter_type": "epilogue", "number": 100})
        assert numbering.assign(story_id, "chapter", 100) == 100

    def test_other_stories_ignored(self, numbering, store, story_id):
        other = store.create_story({"author_id": 2})
        store.create_chapter({"story_id": other, "number": 3})
        assert numbering.assign(story_id, "chapter", 3) == 3


class TestAvailableNumbers:
    def test_excludes_taken(self, numbering, store, story_id):
        store.create_chapter({"story_id": story_id, "number": 1})
        store.create_chapter({"story_id": story_id, "number": 2})
        available = numbering.available_chapter_numbers(story_id)
        assert available[:2] == [3, 4]
        assert len(available) == 98

    def test_exclude_current(self, numbering, store, story_id):
        chapter_id = store.create_chapter({"story_id": story_id, "number": 1})
        assert numbering.available_chapter_numbers(story_id, chapter_id)[0] == 1
