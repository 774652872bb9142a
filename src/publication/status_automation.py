# src/publication/status_automation.py — v1
"""Inactivity-driven status tag automation.

Walks published stories in id order, in batches, and moves the status tag
ongoing -> on-hiatus -> abandoned once the content freshness marker is older
than the configured thresholds. Meant to run once a day.
"""

from __future__ import annotations

import logging
from datetime import datetime

from storykeeper.core.clock import Clock
from storykeeper.core.errors import StoreError
from storykeeper.core.models import Story, Term
from storykeeper.invalidation.models import InvalidationEvent
from storykeeper.invalidation.router import InvalidationRouter
from storykeeper.publication.freshness import ContentFreshness
from storykeeper.publication.models import AutomationResult
from storykeeper.store.base_record_store import BaseRecordStore

logger = logging.getLogger(__name__)

TRANSITION_SLUGS = ("ongoing", "on-hiatus", "abandoned")


class StatusAutomation:
    def __init__(
        self,
        store: BaseRecordStore,
        router: InvalidationRouter,
        freshness: ContentFreshness,
        clock: Clock,
        batch_size: int = 200,
    ) -> None:
        self._store = store
        self._router = router
        self._freshness = freshness
        self._clock = clock
        self._batch_size = batch_size

    def _status_terms(self) -> dict[str, Term]:
        terms = self._store.find_where(
            "term", taxonomy="status", slug__in=list(TRANSITION_SLUGS)
        )
        return {t.slug: t for t in terms}  # type: ignore[union-attr]

    def run(self, now: datetime | None = None) -> AutomationResult:
        """Apply every due transition once.

        Returns:
            Counters: scanned candidates, transitions by target, errors.
        """
        now = now or self._clock.now()
        result = AutomationResult()

        terms = self._status_terms()
        missing = [slug for slug in TRANSITION_SLUGS if slug not in terms]
        if missing:
            logger.warning("Status automation skipped, missing status terms: %s", missing)
            return result
        slug_by_term_id = {t.id: slug for slug, t in terms.items()}
        watched = {terms["ongoing"].id, terms["on-hiatus"].id}

        last_id = 0
        while True:
            batch: list[Story] = self._store.find_where(  # type: ignore[assignment]
                "story",
                order_by="id",
                limit=self._batch_size,
                status="published",
                id__gt=last_id,
            )
            if not batch:
                break
            for story in batch:
                last_id = story.id
                current = [t for t in story.status_tag_ids if t in watched]
                if len(story.status_tag_ids) != 1 or not current:
                    continue
                result.scanned += 1
                target = self._freshness.status_transition_target(
                    story, slug_by_term_id[current[0]], now
                )
                if target is None:
                    continue
                try:
                    updated = self._store.update_story(
                        story.id, {"status_tag_ids": [terms[target].id]}
                    )
                except StoreError as e:
                    result.errors += 1
                    logger.warning("Status transition failed for story %d: %s", story.id, e)
                    continue
                self._router.invalidate(InvalidationEvent.for_story(updated, "status_change"))
                result.transitioned += 1
                if target == "on-hiatus":
                    result.to_hiatus += 1
                else:
                    result.to_abandoned += 1
                logger.info("Story %d moved to %s", story.id, target)
            if len(batch) < self._batch_size:
                break

        logger.info(
            "Status automation: scanned=%d transitioned=%d errors=%d",
            result.scanned, result.transitioned, result.errors,
        )
        return result
