# src/store/base_record_store.py — v1
"""Abstract durable record store.

The record store exclusively owns Story/Chapter state. Each single-record
write is atomic; multi-step publication flows are sequences of such writes.
Backends wrap driver failures in StoreError.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from storykeeper.core.errors import RecordNotFoundError
from storykeeper.core.models import Chapter, Record, Story


class BaseRecordStore(ABC):
    """Read/write/query primitives over typed records."""

    # --- Primitives ---

    @abstractmethod
    def create_record(self, kind: str, fields: dict[str, Any]) -> int:
        """Insert a record and return its id.

        An ``id`` in fields is honoured; otherwise the next id for the kind
        is assigned.
        """

    @abstractmethod
    def update_record(self, kind: str, record_id: int, fields: dict[str, Any]) -> Record:
        """Merge fields into an existing record and return the new version.

        Raises:
            RecordNotFoundError: If the record does not exist.
        """

    @abstractmethod
    def get_record(self, kind: str, record_id: int) -> Record | None:
        """Return the record or None."""

    @abstractmethod
    def delete_record(self, kind: str, record_id: int) -> None:
        """Remove a record.

        Raises:
            RecordNotFoundError: If the record does not exist.
        """

    @abstractmethod
    def find_where(
        self,
        kind: str,
        order_by: str = "id",
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
        **filters: Any,
    ) -> list[Record]:
        """Return matching records, ordered then sliced. See store.filters."""

    @abstractmethod
    def count_where(self, kind: str, **filters: Any) -> int:
        """Count matching records."""

    def close(self) -> None:
        """Release backend resources."""

    # --- Story / chapter helpers ---

    def create_story(self, fields: dict[str, Any]) -> int:
        return self.create_record("story", fields)

    def update_story(self, story_id: int, fields: dict[str, Any]) -> Story:
        return self.update_record("story", story_id, fields)  # type: ignore[return-value]

    def create_chapter(self, fields: dict[str, Any]) -> int:
        return self.create_record("chapter", fields)

    def update_chapter(self, chapter_id: int, fields: dict[str, Any]) -> Chapter:
        return self.update_record("chapter", chapter_id, fields)  # type: ignore[return-value]

    def require(self, kind: str, record_id: int) -> Record:
        """get_record that raises RecordNotFoundError instead of returning None."""
        record = self.get_record(kind, record_id)
        if record is None:
            raise RecordNotFoundError(kind, record_id)
        return record

    def get_story(self, story_id: int) -> Story | None:
        return self.get_record("story", story_id)  # type: ignore[return-value]

    def get_chapter(self, chapter_id: int) -> Chapter | None:
        return self.get_record("chapter", chapter_id)  # type: ignore[return-value]

    def query_chapters(
        self,
        story_id: int,
        status: str | None = None,
        types: Iterable[str] | None = None,
        exclude_id: int | None = None,
    ) -> list[Chapter]:
        """Chapters of a story, ordered by number (unnumbered first), then id."""
        filters: dict[str, Any] = {"story_id": story_id}
        if status is not None:
            filters["status"] = status
        if types is not None:
            filters["chapter_type__in"] = list(types)
        if exclude_id is not None:
            filters["id__ne"] = exclude_id
        return self.find_where("chapter", order_by="number", **filters)  # type: ignore[return-value]
