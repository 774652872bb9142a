# src/interactions/taxonomy.py — v2
"""Administrative genre/status term changes.

Term changes are rare and can touch every listing and validity flag, so each
one flushes the whole cache namespace.
"""

from __future__ import annotations

import logging
from typing import Literal

from storykeeper.core.clock import SystemClock
from storykeeper.core.models import Term
from storykeeper.invalidation.models import InvalidationEvent
from storykeeper.invalidation.router import InvalidationRouter
from storykeeper.publication.state_machine import PublicationStateMachine
from storykeeper.store.base_record_store import BaseRecordStore

logger = logging.getLogger(__name__)


class TaxonomyService:
    def __init__(
        self,
        store: BaseRecordStore,
        router: InvalidationRouter,
        publication: PublicationStateMachine | None = None,
    ) -> None:
        self._store = store
        self._router = router
        self._publication = publication or PublicationStateMachine(store, router, SystemClock())

    def create_term(self, taxonomy: Literal["genre", "status"], slug: str, name: str = "") -> int:
        term_id = self._store.create_record(
            "term", {"taxonomy": taxonomy, "slug": slug, "name": name or slug}
        )
        self._router.invalidate(InvalidationEvent.for_taxonomy(term_id, "create"))
        return term_id

    def rename_term(self, term_id: int, name: str, slug: str | None = None) -> Term:
        fields = {"name": name}
        if slug is not None:
            fields["slug"] = slug
        term = self._store.update_record("term", term_id, fields)
        self._router.invalidate(InvalidationEvent.for_taxonomy(term_id, "update"))
        return term  # type: ignore[return-value]

    def delete_term(self, term_id: int) -> int:
        """Delete a term and detach it from every story.

        Published stories left without a genre or status tag are moved to
        draft. Returns how many were.
        """
        term: Term = self._store.require("term", term_id)  # type: ignore[assignment]
        field = "genre_ids" if term.taxonomy == "genre" else "status_tag_ids"
        published: list[int] = []
        for story in self._store.find_where("story", **{f"{field}__contains": term_id}):
            remaining = [t for t in getattr(story, field) if t != term_id]
            self._store.update_story(story.id, {field: remaining})
            if story.status == "published":
                published.append(story.id)
        self._store.delete_record("term", term_id)
        self._router.invalidate(InvalidationEvent.for_taxonomy(term_id, "delete"))
        drafted = sum(
            self._publication.draft_if_invalid(story_id, f"{term.taxonomy} term {term_id} deletion")
            for story_id in published
        )
        logger.info("Deleted %s term %d, %d stories moved to draft", term.taxonomy, term_id, drafted)
        return drafted

    def flush(self) -> int:
        """Flush the whole cache namespace without a term change."""
        return self._router.invalidate(InvalidationEvent.for_taxonomy())
