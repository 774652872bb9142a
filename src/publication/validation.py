# src/publication/validation.py — v1
"""Publish gates for stories and chapters.

Gates report every failing field at once as a field -> message map so the
author sees the full list, not just the first problem.
"""

from __future__ import annotations

import logging

from storykeeper.core.models import SUBSTANTIVE_TYPES, Chapter, Story
from storykeeper.core.text import has_text
from storykeeper.publication.models import PublishCheck
from storykeeper.store.base_record_store import BaseRecordStore

logger = logging.getLogger(__name__)

STORY_MESSAGES: dict[str, str] = {
    "invalid_story": "Invalid story.",
    "title": "Your story must have a title.",
    "introduction": "Your story must have an introduction.",
    "published_chapters": "Your story must have at least one published chapter or prologue.",
    "genre": "Your story must be classified in at least one genre.",
    "status": "Your story must have exactly one status set (Ongoing, Completed, etc.).",
}

CHAPTER_MESSAGES: dict[str, str] = {
    "invalid_chapter": "Invalid chapter.",
    "content": "Your chapter must have content.",
    "parent_story": "This chapter must be attached to a story.",
    "chapter_type": "Your chapter must be classified as a Chapter, Prologue, or Epilogue.",
    "chapter_number": "Your chapter must have a number assigned.",
    "duplicate_chapter_number": "Another chapter in this story already has this number.",
}


class PublicationValidator:
    """Read-only checks against durably saved state."""

    def __init__(self, store: BaseRecordStore) -> None:
        self._store = store

    def published_substantive_count(self, story_id: int, exclude_id: int | None = None) -> int:
        """Published prologues/chapters of a story. Epilogues never count."""
        return len(
            self._store.query_chapters(
                story_id, status="published", types=SUBSTANTIVE_TYPES, exclude_id=exclude_id
            )
        )

    def story_missing_fields(self, story: Story) -> dict[str, str]:
        missing: dict[str, str] = {}
        if not story.title.strip():
            missing["title"] = STORY_MESSAGES["title"]
        if not has_text(story.introduction):
            missing["introduction"] = STORY_MESSAGES["introduction"]
        if self.published_substantive_count(story.id) < 1:
            missing["published_chapters"] = STORY_MESSAGES["published_chapters"]
        if not story.genre_ids:
            missing["genre"] = STORY_MESSAGES["genre"]
        if len(story.status_tag_ids) != 1:
            missing["status"] = STORY_MESSAGES["status"]
        return missing

    def can_publish_story(self, story_id: int) -> PublishCheck:
        story = self._store.get_story(story_id)
        if story is None:
            return PublishCheck(
                allowed=False,
                missing_fields={"invalid_story": STORY_MESSAGES["invalid_story"]},
            )
        missing = self.story_missing_fields(story)
        return PublishCheck(allowed=not missing, missing_fields=missing)

    def is_story_valid(self, story: Story) -> bool:
        """Introduction, >=1 published prologue/chapter, >=1 genre, exactly one status tag.

        Title is not part of validity: it is only enforced by the publish gate.
        """
        return (
            has_text(story.introduction)
            and bool(story.genre_ids)
            and len(story.status_tag_ids) == 1
            and self.published_substantive_count(story.id) >= 1
        )

    def chapter_missing_fields(self, chapter: Chapter) -> dict[str, str]:
        missing: dict[str, str] = {}
        if not has_text(chapter.content):
            missing["content"] = CHAPTER_MESSAGES["content"]
        if self._store.get_story(chapter.story_id) is None:
            missing["parent_story"] = CHAPTER_MESSAGES["parent_story"]
        if chapter.chapter_type not in ("prologue", "chapter", "epilogue"):
            missing["chapter_type"] = CHAPTER_MESSAGES["chapter_type"]
        if chapter.number is None:
            missing["chapter_number"] = CHAPTER_MESSAGES["chapter_number"]
        elif chapter.chapter_type == "chapter":
            clash = self._store.count_where(
                "chapter",
                story_id=chapter.story_id,
                chapter_type__in=list(SUBSTANTIVE_TYPES),
                number=chapter.number,
                id__ne=chapter.id,
            )
            if clash:
                missing["duplicate_chapter_number"] = CHAPTER_MESSAGES["duplicate_chapter_number"]
        return missing

    def can_publish_chapter(self, chapter_id: int) -> PublishCheck:
        chapter = self._store.get_chapter(chapter_id)
        if chapter is None:
            return PublishCheck(
                allowed=False,
                missing_fields={"invalid_chapter": CHAPTER_MESSAGES["invalid_chapter"]},
            )
        missing = self.chapter_missing_fields(chapter)
        return PublishCheck(allowed=not missing, missing_fields=missing)
