# src/api/facade.py — v3
"""Public API facade: one-time wiring and the handler-facing contract.

Usage:
    from storykeeper.api.facade import build_coordinator
    coordinator = build_coordinator(settings)
    check = coordinator.can_publish_story(story_id)

The process bootstrap calls build_coordinator() once and hands the result to
its request handlers. There are no register-once flags: wiring is a plain
constructor call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from storykeeper.cache.base_cache_store import BaseCacheStore
from storykeeper.cache.keys import CacheKeys
from storykeeper.config.settings import Settings
from storykeeper.core.clock import Clock, SystemClock
from storykeeper.core.models import StoryAggregate
from storykeeper.interactions.bookmarks import BookmarkService
from storykeeper.interactions.follows import FollowService
from storykeeper.interactions.notifications import NotificationService
from storykeeper.interactions.taxonomy import TaxonomyService
from storykeeper.invalidation.router import InvalidationRouter
from storykeeper.publication.freshness import ContentFreshness
from storykeeper.publication.models import PublishCheck
from storykeeper.publication.state_machine import PublicationStateMachine
from storykeeper.publication.status_automation import StatusAutomation
from storykeeper.publication.validation import PublicationValidator
from storykeeper.readers.listings import ListingKind, ListingReader
from storykeeper.readers.social import BookmarkReader, FollowReader
from storykeeper.readers.story_reader import StoryReader
from storykeeper.readers.users import UserReader
from storykeeper.store.base_record_store import BaseRecordStore
from storykeeper.store.statistics import StatisticsProvider

logger = logging.getLogger(__name__)


@dataclass
class Coordinator:
    """Wired components plus the handler-facing operations."""

    settings: Settings
    store: BaseRecordStore
    cache: BaseCacheStore
    clock: Clock
    router: InvalidationRouter
    publication: PublicationStateMachine
    automation: StatusAutomation
    stories: StoryReader
    listings: ListingReader
    users: UserReader
    follow_reader: FollowReader
    bookmark_reader: BookmarkReader
    follows: FollowService
    bookmarks: BookmarkService
    notifications: NotificationService
    taxonomy: TaxonomyService
    statistics: StatisticsProvider | None = None

    def can_publish_story(self, story_id: int) -> PublishCheck:
        return self.publication.validator.can_publish_story(story_id)

    def can_publish_chapter(self, chapter_id: int) -> PublishCheck:
        return self.publication.validator.can_publish_chapter(chapter_id)

    def will_auto_draft_if_removed(self, chapter_id: int) -> bool:
        return self.publication.will_auto_draft_if_removed(chapter_id)

    def available_chapter_numbers(
        self, story_id: int, exclude_chapter_id: int | None = None
    ) -> list[int]:
        return self.publication.numbering.available_chapter_numbers(story_id, exclude_chapter_id)

    def get_story_aggregate(self, story_id: int) -> StoryAggregate:
        return self.stories.get_story_aggregate(story_id)

    def get_paginated_listing(
        self,
        kind: ListingKind,
        filter_id: int | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> list[int]:
        return self.listings.get_paginated_listing(kind, filter_id, page, page_size)

    def close(self) -> None:
        self.cache.close()
        self.store.close()


def build_coordinator(
    settings: Settings | None = None,
    *,
    store: BaseRecordStore | None = None,
    cache: BaseCacheStore | None = None,
    statistics: StatisticsProvider | None = None,
    clock: Clock | None = None,
) -> Coordinator:
    """Wire store, cache, router, state machine, readers and services.

    Args:
        settings: Global settings. Loaded from .env if None.
        store: Record store. Built from settings if None.
        cache: Cache store. Built from settings if None.
        statistics: Optional view/rating provider. None = views and ratings
            read as zero.
        clock: Time source. Wall clock if None.

    Returns:
        Ready-to-use Coordinator.
    """
    settings = settings or Settings()
    clock = clock or SystemClock()

    if store is None:
        from storykeeper.store.store_factory import create_record_store
        store = create_record_store(settings)
    if cache is None:
        from storykeeper.cache.cache_factory import create_cache_store
        cache = create_cache_store(settings, clock=clock)

    keys = CacheKeys(settings.cache_namespace)
    router = InvalidationRouter(cache, keys, store)
    validator = PublicationValidator(store)
    freshness = ContentFreshness(
        store,
        clock,
        hiatus_months=settings.hiatus_threshold_months,
        abandoned_months=settings.abandoned_threshold_months,
    )
    publication = PublicationStateMachine(
        store, router, clock, settings.tzinfo, validator=validator, freshness=freshness
    )

    logger.debug(
        "Coordinator wired: cache=%s store=%s statistics=%s",
        type(cache).__name__, type(store).__name__,
        "bound" if statistics is not None else "none",
    )
    return Coordinator(
        settings=settings,
        store=store,
        cache=cache,
        clock=clock,
        router=router,
        publication=publication,
        automation=StatusAutomation(
            store, router, freshness, clock, batch_size=settings.automation_batch_size
        ),
        stories=StoryReader(store, cache, keys, statistics=statistics, validator=validator),
        listings=ListingReader(store, cache, keys),
        users=UserReader(store, cache, keys),
        follow_reader=FollowReader(store, cache, keys),
        bookmark_reader=BookmarkReader(store, cache, keys),
        follows=FollowService(store, router, clock),
        bookmarks=BookmarkService(store, router, clock),
        notifications=NotificationService(store, router, clock),
        taxonomy=TaxonomyService(store, router, publication),
        statistics=statistics,
    )
