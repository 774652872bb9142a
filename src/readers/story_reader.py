# src/readers/story_reader.py — v1
"""Story and chapter statistics: views, counts, ratings, validity, chapter lists."""

from __future__ import annotations

from storykeeper.cache.base_cache_store import BaseCacheStore
from storykeeper.cache.keys import CacheKeys
from storykeeper.cache.ttl import CacheTTL
from storykeeper.core.models import ChapterSummary, StoryAggregate
from storykeeper.publication.validation import PublicationValidator
from storykeeper.readers.base import CachedReader
from storykeeper.store.base_record_store import BaseRecordStore
from storykeeper.store.statistics import StatisticsProvider


class StoryReader(CachedReader):
    """Cache-backed story aggregates.

    Views and ratings need a StatisticsProvider; without one they read as
    0 and 0.0.
    """

    def __init__(
        self,
        store: BaseRecordStore,
        cache: BaseCacheStore,
        keys: CacheKeys | None = None,
        statistics: StatisticsProvider | None = None,
        validator: PublicationValidator | None = None,
    ) -> None:
        super().__init__(store, cache, keys)
        self._statistics = statistics
        self._validator = validator or PublicationValidator(store)

    # --- Story ---

    def story_views(self, story_id: int) -> int:
        if self._statistics is None:
            return 0
        stats = self._statistics
        return int(self._remember(
            self._keys.story_views(story_id), CacheTTL.VIEWS,
            lambda: stats.story_views(story_id),
        ))

    def story_rating(self, story_id: int) -> float:
        if self._statistics is None:
            return 0.0
        stats = self._statistics
        return float(self._remember(
            self._keys.story_rating(story_id), CacheTTL.RATING,
            lambda: stats.story_rating(story_id),
        ))

    def chapter_count(self, story_id: int) -> int:
        """Published chapters of any type."""
        return int(self._remember(
            self._keys.chapter_count(story_id), CacheTTL.CHAPTER_COUNT,
            lambda: self._store.count_where("chapter", story_id=story_id, status="published"),
        ))

    def word_count(self, story_id: int) -> int:
        """Sum of published chapter word counts."""
        def compute() -> int:
            chapters = self._store.query_chapters(story_id, status="published")
            return sum(c.word_count for c in chapters)

        return int(self._remember(
            self._keys.word_count(story_id), CacheTTL.WORD_COUNT, compute
        ))

    def is_story_valid(self, story_id: int) -> bool:
        def compute() -> bool:
            story = self._store.get_story(story_id)
            return story is not None and self._validator.is_story_valid(story)

        return bool(self._remember(
            self._keys.story_valid(story_id), CacheTTL.STORY_VALIDITY, compute
        ))

    def chapter_list(self, story_id: int) -> list[ChapterSummary]:
        """Published chapters in reading order."""
        def compute() -> list[dict]:
            return [
                ChapterSummary(
                    id=c.id,
                    chapter_type=c.chapter_type,
                    number=c.number,
                    title=c.title,
                    word_count=c.word_count,
                ).model_dump(mode="json")
                for c in self._store.query_chapters(story_id, status="published")
            ]

        rows = self._remember(self._keys.chapter_list(story_id), CacheTTL.CHAPTER_LIST, compute)
        return [ChapterSummary.model_validate(row) for row in rows]

    def get_story_aggregate(self, story_id: int) -> StoryAggregate:
        return StoryAggregate(
            story_id=story_id,
            view_count=self.story_views(story_id),
            chapter_count=self.chapter_count(story_id),
            word_count=self.word_count(story_id),
            rating=self.story_rating(story_id),
            is_valid=self.is_story_valid(story_id),
        )

    # --- Chapter ---

    def chapter_views(self, chapter_id: int) -> int:
        if self._statistics is None:
            return 0
        stats = self._statistics
        return int(self._remember(
            self._keys.chapter_views(chapter_id), CacheTTL.VIEWS,
            lambda: stats.chapter_views(chapter_id),
        ))

    def chapter_rating(self, chapter_id: int) -> float:
        if self._statistics is None:
            return 0.0
        stats = self._statistics
        return float(self._remember(
            self._keys.chapter_rating(chapter_id), CacheTTL.RATING,
            lambda: stats.chapter_rating(chapter_id),
        ))
