# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides a pinned clock, in-memory store and cache, a wired coordinator and
seeded taxonomy terms. No external services: Redis is always mocked.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from storykeeper.api.facade import Coordinator, build_coordinator
from storykeeper.cache.keys import CacheKeys
from storykeeper.cache.memory_store import MemoryCacheStore
from storykeeper.config.settings import Settings
from storykeeper.core.clock import FixedClock
from storykeeper.core.models import RequestContext
from storykeeper.invalidation.router import InvalidationRouter
from storykeeper.logging.context import clear_context
from storykeeper.publication.models import ChapterInput, StoryInput
from storykeeper.store.memory_store import MemoryRecordStore
from storykeeper.store.statistics import StoreStatisticsProvider

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

CONTENT = (
    "The lighthouse keeper counted the ships every night, and every night "
    "one more of them failed to come home."
)


# === FIXTURES: Infrastructure ===


@pytest.fixture(autouse=True)
def _reset_log_context():
    yield
    clear_context()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def store() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture
def cache(clock: FixedClock) -> MemoryCacheStore:
    return MemoryCacheStore(clock=clock)


@pytest.fixture
def keys() -> CacheKeys:
    return CacheKeys()


@pytest.fixture
def router(cache: MemoryCacheStore, keys: CacheKeys, store: MemoryRecordStore) -> InvalidationRouter:
    return InvalidationRouter(cache, keys, store)


@pytest.fixture
def coordinator(
    settings: Settings,
    store: MemoryRecordStore,
    cache: MemoryCacheStore,
    clock: FixedClock,
) -> Coordinator:
    return build_coordinator(
        settings,
        store=store,
        cache=cache,
        clock=clock,
        statistics=StoreStatisticsProvider(store),
    )


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext(actor_id=7, request_id="req-test")


# === FIXTURES: Sample data ===


@pytest.fixture
def terms(store: MemoryRecordStore) -> dict[str, int]:
    """Genre and status terms, keyed by slug."""
    ids = {
        "fantasy": store.create_record("term", {"taxonomy": "genre", "slug": "fantasy"}),
        "mystery": store.create_record("term", {"taxonomy": "genre", "slug": "mystery"}),
    }
    for slug in ("ongoing", "on-hiatus", "abandoned", "completed"):
        ids[slug] = store.create_record("term", {"taxonomy": "status", "slug": slug})
    return ids


def _story_input(terms: dict[str, int] | None = None, **overrides) -> StoryInput:
    """Complete story form; pass ``terms`` to fill genre and status."""
    fields: dict = {
        "title": "The Lighthouse",
        "introduction": "A keeper, a storm, and a ledger of missing ships.",
    }
    if terms is not None:
        fields["genre_ids"] = [terms["fantasy"]]
        fields["status_tag_ids"] = [terms["ongoing"]]
    fields.update(overrides)
    return StoryInput(**fields)


def _chapter_input(story_id: int, **overrides) -> ChapterInput:
    fields: dict = {
        "story_id": story_id,
        "chapter_type": "chapter",
        "number": 1,
        "title": "Night One",
        "content": CONTENT,
        "action": "publish",
    }
    fields.update(overrides)
    return ChapterInput(**fields)


@pytest.fixture
def published_story(coordinator: Coordinator, ctx: RequestContext, terms: dict[str, int]) -> int:
    """Published story with one published chapter numbered 1."""
    sm = coordinator.publication
    story_id = sm.create_story(ctx, _story_input(terms)).story_id
    sm.create_chapter(ctx, _chapter_input(story_id))
    result = sm.publish_story(ctx, story_id)
    assert result.published
    return story_id


@pytest.fixture
def story_form():
    """Factory: ``story_form(terms=None, **overrides) -> StoryInput``."""
    return _story_input


@pytest.fixture
def chapter_form():
    """Factory: ``chapter_form(story_id, **overrides) -> ChapterInput`` (publish intent)."""
    return _chapter_input
