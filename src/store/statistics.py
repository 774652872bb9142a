# src/store/statistics.py — v1
"""Optional view/rating statistics capability.

Readers take ``StatisticsProvider | None``; when no provider is bound, views
read as 0 and ratings as 0.0.
"""

from __future__ import annotations

from typing import Protocol

from storykeeper.store.base_record_store import BaseRecordStore


class StatisticsProvider(Protocol):
    def story_views(self, story_id: int) -> int: ...

    def chapter_views(self, chapter_id: int) -> int: ...

    def story_rating(self, story_id: int) -> float: ...

    def chapter_rating(self, chapter_id: int) -> float: ...


def _mean(values: list[int]) -> float:
    if not values:
        return 0.0
    return round(sum(values) / len(values), 2)


class StoreStatisticsProvider:
    """Statistics computed from the record store.

    Views come from the ``view_count`` fields; ratings average Rating records.
    A story's views are its own counter plus its chapters'.
    """

    def __init__(self, store: BaseRecordStore) -> None:
        self._store = store

    def story_views(self, story_id: int) -> int:
        story = self._store.get_story(story_id)
        if story is None:
            return 0
        chapters = self._store.query_chapters(story_id)
        return story.view_count + sum(c.view_count for c in chapters)

    def chapter_views(self, chapter_id: int) -> int:
        chapter = self._store.get_chapter(chapter_id)
        return 0 if chapter is None else chapter.view_count

    def story_rating(self, story_id: int) -> float:
        ratings = self._store.find_where("rating", story_id=story_id)
        return _mean([r.value for r in ratings])  # type: ignore[union-attr]

    def chapter_rating(self, chapter_id: int) -> float:
        ratings = self._store.find_where("rating", chapter_id=chapter_id)
        return _mean([r.value for r in ratings])  # type: ignore[union-attr]
