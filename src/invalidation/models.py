# src/invalidation/models.py — v1
"""Invalidation event: the mutation descriptor handed to the router."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from storykeeper.core.models import Chapter, Story

EntityKind = Literal["story", "chapter", "follow", "bookmark", "notification", "taxonomy"]
MutationKind = Literal["create", "update", "delete", "status_change"]


class InvalidationEvent(BaseModel):
    """Entity kind + id + mutation kind, plus the linkage the fan-out needs.

    Produced right after a durable write commits and consumed before the
    triggering request returns.
    """

    model_config = ConfigDict(frozen=True)

    entity_kind: EntityKind
    entity_id: int = 0
    mutation: MutationKind = "update"

    # --- Linkage ---
    story_id: int | None = None
    author_ids: tuple[int, ...] = ()
    user_id: int | None = None
    target_user_id: int | None = None
    genre_ids: tuple[int, ...] = Field(default=())
    status_tag_ids: tuple[int, ...] = Field(default=())

    @classmethod
    def for_story(cls, story: Story, mutation: MutationKind = "update") -> InvalidationEvent:
        return cls(
            entity_kind="story",
            entity_id=story.id,
            mutation=mutation,
            story_id=story.id,
            author_ids=tuple(story.author_ids),
            genre_ids=tuple(story.genre_ids),
            status_tag_ids=tuple(story.status_tag_ids),
        )

    @classmethod
    def for_chapter(cls, chapter: Chapter, mutation: MutationKind = "update") -> InvalidationEvent:
        return cls(
            entity_kind="chapter",
            entity_id=chapter.id,
            mutation=mutation,
            story_id=chapter.story_id,
        )

    @classmethod
    def for_follow(
        cls, follower_id: int, author_id: int, mutation: MutationKind = "create"
    ) -> InvalidationEvent:
        return cls(
            entity_kind="follow",
            mutation=mutation,
            user_id=follower_id,
            target_user_id=author_id,
        )

    @classmethod
    def for_bookmark(
        cls, user_id: int, story_id: int | None = None, mutation: MutationKind = "create"
    ) -> InvalidationEvent:
        return cls(
            entity_kind="bookmark",
            mutation=mutation,
            user_id=user_id,
            story_id=story_id,
        )

    @classmethod
    def for_notifications(cls, user_id: int) -> InvalidationEvent:
        return cls(entity_kind="notification", mutation="update", user_id=user_id)

    @classmethod
    def for_taxonomy(cls, term_id: int = 0, mutation: MutationKind = "update") -> InvalidationEvent:
        return cls(entity_kind="taxonomy", entity_id=term_id, mutation=mutation)
