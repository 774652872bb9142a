# src/publication/models.py — v1
"""Publication inputs and results: StoryInput, ChapterInput, PublishCheck, write results."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from storykeeper.core.models import ChapterType, PublicationStatus

StoryAction = Literal["save_draft", "update", "publish"]
ChapterAction = Literal["draft", "publish"]


class StoryInput(BaseModel):
    """Typed story form fields, already sanitised by the handler layer.

    ``publish_date`` is the raw ``YYYY-MM-DD`` the author typed, or None to
    leave the date alone.
    """

    title: str = ""
    introduction: str = ""
    genre_ids: list[int] = Field(default_factory=list)
    status_tag_ids: list[int] = Field(default_factory=list)
    coauthor_ids: list[int] = Field(default_factory=list)
    publish_date: str | None = None
    action: StoryAction = "save_draft"


class ChapterInput(BaseModel):
    story_id: int
    chapter_type: ChapterType = "chapter"
    number: int | None = None
    title: str = ""
    content: str = ""
    publish_date: str | None = None
    action: ChapterAction = "draft"


class PublishCheck(BaseModel):
    """Outcome of a publish gate: allowed flag plus field -> message map."""

    allowed: bool
    missing_fields: dict[str, str] = Field(default_factory=dict)

    @property
    def messages(self) -> list[str]:
        return list(self.missing_fields.values())


class StoryWriteResult(BaseModel):
    story_id: int
    status: PublicationStatus
    published: bool = False
    missing_fields: dict[str, str] = Field(default_factory=dict)


class ChapterWriteResult(BaseModel):
    """Result of a chapter create/update.

    ``story_auto_drafted`` reports that the parent story lost its last
    published prologue/chapter and was demoted. ``first_published_chapter``
    is advisory only: the story is still a draft and could now be published.
    """

    chapter_id: int
    story_id: int
    number: int | None
    status: PublicationStatus
    published: bool = False
    missing_fields: dict[str, str] = Field(default_factory=dict)
    story_auto_drafted: bool = False
    first_published_chapter: bool = False


class ChapterDeleteResult(BaseModel):
    chapter_id: int
    story_id: int
    story_auto_drafted: bool = False


class AutomationResult(BaseModel):
    """Counters of one status automation run."""

    scanned: int = 0
    transitioned: int = 0
    to_hiatus: int = 0
    to_abandoned: int = 0
    errors: int = 0
