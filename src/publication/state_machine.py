# src/publication/state_machine.py — v2
"""Story and chapter publication state machine.

Every publish is two durable writes: the candidate is committed as a draft,
validated against what was saved, then flipped to published. A crash between
the two leaves a draft, never unvalidated published content.

Each committed write hands an InvalidationEvent to the router before the
operation returns. A write that raises StoreError aborts the operation before
any invalidation for it is attempted.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo

from storykeeper.core.clock import Clock
from storykeeper.core.errors import DateGuardRejection, RecordNotFoundError, ValidationError
from storykeeper.core.models import Chapter, PublicationStatus, RequestContext, Story
from storykeeper.core.text import count_words
from storykeeper.invalidation.models import InvalidationEvent, MutationKind
from storykeeper.invalidation.router import InvalidationRouter
from storykeeper.logging.context import set_request_context, set_subject_context
from storykeeper.publication.date_guard import (
    DateGuard,
    DateGuardDecision,
    combine_publish_date,
    is_content_significantly_changed,
    parse_publish_date,
)
from storykeeper.publication.freshness import ContentFreshness
from storykeeper.publication.models import (
    ChapterDeleteResult,
    ChapterInput,
    ChapterWriteResult,
    StoryInput,
    StoryWriteResult,
)
from storykeeper.publication.numbering import ChapterNumbering
from storykeeper.publication.validation import STORY_MESSAGES, PublicationValidator
from storykeeper.store.base_record_store import BaseRecordStore

logger = logging.getLogger(__name__)


class PublicationStateMachine:
    """Governs draft/published transitions of stories and chapters.

    Args:
        store: Durable record store.
        router: Invalidation router fed after every committed write.
        clock: Time source.
        tz: Site timezone; publish dates are entered as local calendar dates.
    """

    def __init__(
        self,
        store: BaseRecordStore,
        router: InvalidationRouter,
        clock: Clock,
        tz: ZoneInfo | None = None,
        *,
        validator: PublicationValidator | None = None,
        numbering: ChapterNumbering | None = None,
        freshness: ContentFreshness | None = None,
        date_guard: DateGuard | None = None,
    ) -> None:
        self._store = store
        self._router = router
        self._clock = clock
        self._tz = tz or ZoneInfo("UTC")
        self.validator = validator or PublicationValidator(store)
        self.numbering = numbering or ChapterNumbering(store)
        self.freshness = freshness or ContentFreshness(store, clock)
        self.date_guard = date_guard or DateGuard()

    # --- Helpers ---

    def _today(self) -> date:
        return self._clock.now().astimezone(self._tz).date()

    def _now_local(self) -> datetime:
        return self._clock.now().astimezone(self._tz).replace(tzinfo=None)

    @staticmethod
    def _enter(ctx: RequestContext, story_id: int | None = None, chapter_id: int | None = None) -> None:
        set_request_context(ctx.request_id, ctx.actor_id)
        set_subject_context(story_id=story_id, chapter_id=chapter_id)

    def _emit(self, event: InvalidationEvent) -> None:
        self._router.invalidate(event)

    def _require_story(self, story_id: int) -> Story:
        story = self._store.get_story(story_id)
        if story is None:
            raise RecordNotFoundError("story", story_id)
        return story

    def _require_chapter(self, chapter_id: int) -> Chapter:
        chapter = self._store.get_chapter(chapter_id)
        if chapter is None:
            raise RecordNotFoundError("chapter", chapter_id)
        return chapter

    def _publish_dates(self, raw: str, previous_local: datetime | None) -> dict[str, Any]:
        local, utc = combine_publish_date(
            parse_publish_date(raw, self._today()), previous_local, self._tz
        )
        return {"publish_date_local": local, "publish_date_utc": utc}

    @staticmethod
    def _story_fields(data: StoryInput) -> dict[str, Any]:
        title = data.title.strip()
        if not title:
            raise ValidationError("Story title is required", {"title": STORY_MESSAGES["title"]})
        return {
            "title": title,
            "introduction": data.introduction.strip(),
            "genre_ids": list(dict.fromkeys(data.genre_ids)),
            "status_tag_ids": list(dict.fromkeys(data.status_tag_ids)),
            "coauthor_ids": list(dict.fromkeys(data.coauthor_ids)),
        }

    def _set_story_status(
        self, story: Story, status: PublicationStatus, mutation: MutationKind = "status_change"
    ) -> Story:
        now = self._clock.now()
        fields: dict[str, Any] = {"status": status, "updated_at": now}
        if status == "published" and story.publish_date_utc is None:
            fields["publish_date_local"] = self._now_local()
            fields["publish_date_utc"] = now
        updated = self._store.update_story(story.id, fields)
        self._emit(InvalidationEvent.for_story(updated, mutation))
        return updated

    # --- Stories ---

    def create_story(self, ctx: RequestContext, data: StoryInput) -> StoryWriteResult:
        """Create a story. Always committed as draft first, whatever the action."""
        self._enter(ctx)
        fields = self._story_fields(data)
        if data.publish_date is not None:
            fields.update(self._publish_dates(data.publish_date, None))
        now = self._clock.now()
        fields.update(author_id=ctx.actor_id, status="draft", created_at=now, updated_at=now)

        story_id = self._store.create_story(fields)
        set_subject_context(story_id=story_id)
        self.freshness.mark_story_created(story_id)
        self._emit(InvalidationEvent.for_story(self._require_story(story_id), "create"))
        logger.info("Created story %d as draft", story_id)

        if data.action == "publish":
            return self._publish_story(self._require_story(story_id))
        return StoryWriteResult(story_id=story_id, status="draft")

    def update_story(self, ctx: RequestContext, story_id: int, data: StoryInput) -> StoryWriteResult:
        """Edit story metadata.

        ``save_draft`` unpublishes, ``publish`` saves as draft then runs the
        publish gate, ``update`` keeps the current status. A published story
        edited with ``update`` must still pass the publish gate, otherwise
        ValidationError is raised. Date and gate checks run before anything
        is written.
        """
        self._enter(ctx, story_id=story_id)
        story = self._require_story(story_id)
        fields = self._story_fields(data)

        if data.publish_date is not None:
            new_date = parse_publish_date(data.publish_date, self._today())
            old_date = story.publish_date_local.date() if story.publish_date_local else None
            decision = self.date_guard.evaluate_story(old_date, new_date)
            if not decision.allowed:
                raise DateGuardRejection(decision.reason or "")
            if decision.date_changed:
                local, utc = combine_publish_date(new_date, story.publish_date_local, self._tz)
                fields.update(publish_date_local=local, publish_date_utc=utc)

        if data.action in ("save_draft", "publish"):
            fields["status"] = "draft"
        elif story.status == "published":
            missing = self.validator.story_missing_fields(story.model_copy(update=fields))
            if missing:
                raise ValidationError("Published story is missing required fields", missing)
        fields["updated_at"] = self._clock.now()

        updated = self._store.update_story(story_id, fields)
        mutation: MutationKind = "status_change" if updated.status != story.status else "update"
        event = InvalidationEvent.for_story(updated, mutation)
        # Co-authors removed by this edit also hold per-user entries.
        authors = tuple(dict.fromkeys((*updated.author_ids, *story.author_ids)))
        self._emit(event.model_copy(update={"author_ids": authors}))

        if data.action == "publish":
            return self._publish_story(updated)
        return StoryWriteResult(
            story_id=story_id, status=updated.status, published=updated.status == "published"
        )

    def publish_story(self, ctx: RequestContext, story_id: int) -> StoryWriteResult:
        """Run the publish gate on the saved story and flip it if it passes."""
        self._enter(ctx, story_id=story_id)
        story = self._require_story(story_id)
        if story.status == "published":
            return StoryWriteResult(story_id=story_id, status="published", published=True)
        return self._publish_story(story)

    def _publish_story(self, story: Story) -> StoryWriteResult:
        check = self.validator.can_publish_story(story.id)
        if not check.allowed:
            logger.info(
                "Story %d kept as draft, missing: %s", story.id, ", ".join(check.missing_fields)
            )
            return StoryWriteResult(
                story_id=story.id, status="draft", missing_fields=check.missing_fields
            )
        self._set_story_status(story, "published")
        logger.info("Published story %d", story.id)
        return StoryWriteResult(story_id=story.id, status="published", published=True)

    def delete_story(self, ctx: RequestContext, story_id: int) -> int:
        """Delete a story and all its chapters. Returns the number of chapters removed."""
        self._enter(ctx, story_id=story_id)
        story = self._require_story(story_id)
        chapters = self._store.query_chapters(story_id)
        for chapter in chapters:
            self._store.delete_record("chapter", chapter.id)
            self._emit(InvalidationEvent.for_chapter(chapter, "delete"))
        self._store.delete_record("story", story_id)
        self._emit(InvalidationEvent.for_story(story, "delete"))
        logger.info("Deleted story %d with %d chapters", story_id, len(chapters))
        return len(chapters)

    # --- Chapters ---

    @staticmethod
    def _chapter_fields(story_id: int, data: ChapterInput, number: int | None) -> dict[str, Any]:
        return {
            "story_id": story_id,
            "chapter_type": data.chapter_type,
            "number": number,
            "title": data.title.strip(),
            "content": data.content,
            "word_count": count_words(data.content),
        }

    def create_chapter(self, ctx: RequestContext, data: ChapterInput) -> ChapterWriteResult:
        self._enter(ctx, story_id=data.story_id)
        story = self._require_story(data.story_id)

        dates: dict[str, Any] = {}
        if data.publish_date is not None:
            dates = self._publish_dates(data.publish_date, None)
        number = self.numbering.assign(story.id, data.chapter_type, data.number)

        now = self._clock.now()
        fields = self._chapter_fields(story.id, data, number)
        fields.update(dates, status="draft", created_at=now, updated_at=now)
        chapter_id = self._store.create_chapter(fields)
        set_subject_context(story_id=story.id, chapter_id=chapter_id)
        self.freshness.mark_chapter_created(story.id)
        chapter = self._require_chapter(chapter_id)
        self._emit(InvalidationEvent.for_chapter(chapter, "create"))
        logger.info("Created %s %d (number %s) as draft", chapter.chapter_type, chapter_id, number)

        result = ChapterWriteResult(
            chapter_id=chapter_id, story_id=story.id, number=number, status="draft"
        )
        if data.action == "publish":
            self._publish_chapter(chapter, story, was_published=False, result=result)
        return result

    def update_chapter(
        self, ctx: RequestContext, chapter_id: int, data: ChapterInput
    ) -> ChapterWriteResult:
        """Edit a chapter, gating date changes and cascading auto-draft."""
        current = self._require_chapter(chapter_id)
        self._enter(ctx, story_id=current.story_id, chapter_id=chapter_id)
        if data.story_id != current.story_id:
            raise ValidationError(
                "Chapters cannot move between stories",
                {"parent_story": "This chapter must stay attached to its story."},
            )
        story = self._require_story(current.story_id)

        decision = DateGuardDecision(allowed=True)
        dates: dict[str, Any] = {}
        if data.publish_date is not None:
            new_date = parse_publish_date(data.publish_date, self._today())
            old_date = current.publish_date_local.date() if current.publish_date_local else None
            decision = self.date_guard.evaluate(current.content, data.content, old_date, new_date)
            if not decision.allowed:
                raise DateGuardRejection(decision.reason or "")
            if decision.date_changed:
                local, utc = combine_publish_date(new_date, current.publish_date_local, self._tz)
                dates = {"publish_date_local": local, "publish_date_utc": utc}

        number = self.numbering.assign(story.id, data.chapter_type, data.number, current=current)
        significant = is_content_significantly_changed(current.content, data.content)

        fields = self._chapter_fields(story.id, data, number)
        fields.update(dates, status="draft", updated_at=self._clock.now())
        chapter = self._store.update_chapter(chapter_id, fields)
        self.freshness.mark_chapter_edited(story.id, significant, decision.metadata_only)
        self._emit(InvalidationEvent.for_chapter(chapter, "update"))

        result = ChapterWriteResult(
            chapter_id=chapter_id, story_id=story.id, number=number, status="draft"
        )
        was_published = current.status == "published"
        if data.action == "publish":
            chapter = self._publish_chapter(
                chapter, story, was_published=was_published, result=result
            )

        was_live = was_published and current.is_substantive
        is_live = chapter.status == "published" and chapter.is_substantive
        if was_live and not is_live:
            result.story_auto_drafted = self._auto_draft_story(story.id, exclude_id=chapter_id)
        return result

    def _publish_chapter(
        self, chapter: Chapter, story: Story, was_published: bool, result: ChapterWriteResult
    ) -> Chapter:
        """Second write of a chapter publish. Fills ``result`` in place."""
        check = self.validator.can_publish_chapter(chapter.id)
        if not check.allowed:
            logger.info(
                "Chapter %d kept as draft, missing: %s",
                chapter.id, ", ".join(check.missing_fields),
            )
            result.missing_fields = check.missing_fields
            return chapter

        result.first_published_chapter = (
            not was_published
            and chapter.is_substantive
            and story.status == "draft"
            and self.validator.published_substantive_count(story.id, exclude_id=chapter.id) == 0
        )

        now = self._clock.now()
        fields: dict[str, Any] = {"status": "published", "updated_at": now}
        if chapter.publish_date_utc is None:
            fields["publish_date_local"] = self._now_local()
            fields["publish_date_utc"] = now
        published = self._store.update_chapter(chapter.id, fields)
        self._emit(InvalidationEvent.for_chapter(published, "status_change"))

        result.status = "published"
        result.published = True
        return published

    def delete_chapter(self, ctx: RequestContext, chapter_id: int) -> ChapterDeleteResult:
        chapter = self._require_chapter(chapter_id)
        self._enter(ctx, story_id=chapter.story_id, chapter_id=chapter_id)
        was_live = chapter.status == "published" and chapter.is_substantive

        self._store.delete_record("chapter", chapter_id)
        self._emit(InvalidationEvent.for_chapter(chapter, "delete"))
        logger.info("Deleted chapter %d", chapter_id)

        auto_drafted = (
            self._auto_draft_story(chapter.story_id, exclude_id=chapter_id) if was_live else False
        )
        return ChapterDeleteResult(
            chapter_id=chapter_id, story_id=chapter.story_id, story_auto_drafted=auto_drafted
        )

    # --- Auto-draft cascade ---

    def _auto_draft_story(self, story_id: int, exclude_id: int) -> bool:
        if self.validator.published_substantive_count(story_id, exclude_id=exclude_id) > 0:
            return False
        story = self._store.get_story(story_id)
        if story is None or story.status != "published":
            return False
        self._set_story_status(story, "draft")
        logger.info("Auto-drafted story %d: no published prologue or chapter left", story_id)
        return True

    def will_auto_draft_if_removed(self, chapter_id: int) -> bool:
        """Would drafting or deleting this chapter demote its story?"""
        chapter = self._store.get_chapter(chapter_id)
        if chapter is None or chapter.status != "published" or not chapter.is_substantive:
            return False
        story = self._store.get_story(chapter.story_id)
        if story is None or story.status != "published":
            return False
        return (
            self.validator.published_substantive_count(story.id, exclude_id=chapter_id) == 0
        )

    def draft_if_invalid(self, story_id: int, reason: str) -> bool:
        """Move a published story to draft when it no longer passes the publish gate."""
        story = self._store.get_story(story_id)
        if story is None or story.status != "published":
            return False
        missing = self.validator.story_missing_fields(story)
        if not missing:
            return False
        self._set_story_status(story, "draft")
        logger.info(
            "Story %d moved to draft after %s, missing: %s", story_id, reason, ", ".join(missing)
        )
        return True
