# src/publication/numbering.py — v1
"""Chapter-number assignment.

Prologue is always 0. Epilogue takes the first free integer at or above
1000 among all sibling numbers. Regular chapters carry a caller-supplied
number in [1, 100], unique among sibling prologues/chapters; epilogue
numbers are not compared.
"""

from __future__ import annotations

import logging

from storykeeper.core.errors import ConflictError, ValidationError
from storykeeper.core.models import SUBSTANTIVE_TYPES, Chapter, ChapterType
from storykeeper.store.base_record_store import BaseRecordStore

logger = logging.getLogger(__name__)

PROLOGUE_NUMBER = 0
EPILOGUE_BASE = 1000
MIN_CHAPTER_NUMBER = 1
MAX_CHAPTER_NUMBER = 100


class ChapterNumbering:
    def __init__(self, store: BaseRecordStore) -> None:
        self._store = store

    def _siblings(self, story_id: int, exclude_id: int | None) -> list[Chapter]:
        return self._store.query_chapters(story_id, exclude_id=exclude_id)

    def assign(
        self,
        story_id: int,
        chapter_type: ChapterType,
        requested: int | None = None,
        current: Chapter | None = None,
    ) -> int | None:
        """Resolve the number a chapter of ``chapter_type`` gets.

        Args:
            story_id: Parent story.
            chapter_type: Type being saved.
            requested: Caller-supplied number (regular chapters only).
            current: Saved version when editing, None when creating.

        Returns:
            The number, or None for a regular chapter saved without one.

        Raises:
            ConflictError: Second prologue/epilogue, or number collision.
            ValidationError: Regular chapter number outside [1, 100].
        """
        exclude_id = None if current is None else current.id
        siblings = self._siblings(story_id, exclude_id)

        if chapter_type == "prologue":
            if any(c.chapter_type == "prologue" for c in siblings):
                raise ConflictError(
                    "This story already has a prologue. Only one prologue is allowed per story."
                )
            return PROLOGUE_NUMBER

        if chapter_type == "epilogue":
            if any(c.chapter_type == "epilogue" for c in siblings):
                raise ConflictError(
                    "This story already has an epilogue. Only one epilogue is allowed per story."
                )
            if current is not None and current.chapter_type == "epilogue" and current.number is not None:
                return current.number
            return self.next_epilogue_number(story_id, exclude_id)

        if requested is None:
            return None
        if not MIN_CHAPTER_NUMBER <= requested <= MAX_CHAPTER_NUMBER:
            raise ValidationError(
                "Invalid chapter number",
                {
                    "chapter_number": (
                        f"Chapter number must be between {MIN_CHAPTER_NUMBER} "
                        f"and {MAX_CHAPTER_NUMBER}."
                    )
                },
            )
        taken = {c.number for c in siblings if c.chapter_type in SUBSTANTIVE_TYPES}
        if requested in taken:
            raise ConflictError(f"Chapter number {requested} is already used in this story.")
        return requested

    def next_epilogue_number(self, story_id: int, exclude_id: int | None = None) -> int:
        """First integer >= 1000 not used by any sibling, whatever its type."""
        used = {c.number for c in self._siblings(story_id, exclude_id) if c.number is not None}
        number = EPILOGUE_BASE
        while number in used:
            number += 1
        return number

    def available_chapter_numbers(
        self, story_id: int, exclude_chapter_id: int | None = None
    ) -> list[int]:
        """Regular chapter numbers still free in [1, 100]."""
        taken = {
            c.number
            for c in self._siblings(story_id, exclude_chapter_id)
            if c.chapter_type in SUBSTANTIVE_TYPES
        }
        return [
            n for n in range(MIN_CHAPTER_NUMBER, MAX_CHAPTER_NUMBER + 1) if n not in taken
        ]
