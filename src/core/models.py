# src/core/models.py — v2
"""Shared Pydantic domain models used across modules.

No module redefines these types; all record imports come from core.models.
Records mirror what the durable record store holds. Nothing here is cached
authoritatively: cached values are projections rebuilt from these records.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Union

from pydantic import BaseModel, Field

PublicationStatus = Literal["draft", "published"]
ChapterType = Literal["prologue", "chapter", "epilogue"]
RecordKind = Literal[
    "story", "chapter", "user", "follow", "bookmark", "notification", "rating", "term"
]

# Chapter types that count as substantive content for publication rules.
SUBSTANTIVE_TYPES: tuple[ChapterType, ...] = ("prologue", "chapter")


# === CONTENT RECORDS ===


class Story(BaseModel):
    """Top-level work composed of ordered chapters."""

    id: int
    author_id: int
    coauthor_ids: list[int] = Field(default_factory=list)
    title: str = ""
    introduction: str = ""
    status: PublicationStatus = "draft"

    # --- Dates ---
    publish_date_local: datetime | None = None
    publish_date_utc: datetime | None = None
    content_updated_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # --- Taxonomy ---
    genre_ids: list[int] = Field(default_factory=list)
    status_tag_ids: list[int] = Field(default_factory=list)

    view_count: int = 0

    @property
    def author_ids(self) -> list[int]:
        """Author followed by co-authors, without duplicates."""
        ids = [self.author_id]
        ids.extend(cid for cid in self.coauthor_ids if cid != self.author_id)
        return ids


class Chapter(BaseModel):
    """Titled content unit belonging to exactly one story."""

    id: int
    story_id: int
    chapter_type: ChapterType = "chapter"
    number: int | None = None
    title: str = ""
    content: str = ""
    status: PublicationStatus = "draft"
    word_count: int = 0
    view_count: int = 0

    publish_date_local: datetime | None = None
    publish_date_utc: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_substantive(self) -> bool:
        return self.chapter_type in SUBSTANTIVE_TYPES


# === PEOPLE & SOCIAL GRAPH ===


class User(BaseModel):
    id: int
    login: str
    display_name: str = ""
    email: str = ""
    bio: str = ""
    url: str = ""
    registered_at: datetime | None = None


class Follow(BaseModel):
    """follower_id follows the author author_id."""

    id: int
    follower_id: int
    author_id: int
    created_at: datetime | None = None


class Bookmark(BaseModel):
    id: int
    user_id: int
    story_id: int
    created_at: datetime | None = None


class Notification(BaseModel):
    id: int
    user_id: int
    type: str = "info"
    message: str = ""
    link: str = ""
    is_read: bool = False
    created_at: datetime | None = None


class Rating(BaseModel):
    id: int
    chapter_id: int
    story_id: int
    user_id: int | None = None
    value: int = Field(ge=1, le=5)


class Term(BaseModel):
    """Genre or status taxonomy term."""

    id: int
    taxonomy: Literal["genre", "status"]
    slug: str
    name: str = ""


Record = Union[Story, Chapter, User, Follow, Bookmark, Notification, Rating, Term]

RECORD_TYPES: dict[str, type[BaseModel]] = {
    "story": Story,
    "chapter": Chapter,
    "user": User,
    "follow": Follow,
    "bookmark": Bookmark,
    "notification": Notification,
    "rating": Rating,
    "term": Term,
}


# === REQUEST CONTEXT ===


class RequestContext(BaseModel):
    """Explicit per-request context handed to every write operation.

    Fields are already authenticated and typed by the handler layer.
    """

    actor_id: int
    request_id: str | None = None


# === READ PROJECTIONS ===


class StoryAggregate(BaseModel):
    """Cache-backed statistics for one story."""

    story_id: int
    view_count: int = 0
    chapter_count: int = 0
    word_count: int = 0
    rating: float = 0.0
    is_valid: bool = False


class UserProfile(BaseModel):
    id: int
    login: str
    display_name: str
    email: str
    bio: str
    url: str
    registered_at: datetime | None = None
    story_count: int = 0
    follower_count: int = 0
    following_count: int = 0


class ChapterSummary(BaseModel):
    """Cached entry of a story's chapter list."""

    id: int
    chapter_type: ChapterType
    number: int | None
    title: str
    word_count: int = 0


class AuthorFollowerCount(BaseModel):
    author_id: int
    follower_count: int


class StoryBookmarkCount(BaseModel):
    story_id: int
    bookmark_count: int
