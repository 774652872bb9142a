# src/store/memory_store.py — v1
"""In-process record store (STORE_BACKEND=memory), for tests and demos."""

from __future__ import annotations

import logging
from typing import Any

import pydantic

from storykeeper.core.errors import RecordNotFoundError, StoreError
from storykeeper.core.models import RECORD_TYPES, Record
from storykeeper.store.base_record_store import BaseRecordStore
from storykeeper.store.filters import matches, parse_filters

logger = logging.getLogger(__name__)


def _model_for(kind: str) -> type[pydantic.BaseModel]:
    try:
        return RECORD_TYPES[kind]
    except KeyError:
        raise StoreError(f"Unknown record kind: {kind!r}") from None


def _sort_key(field: str):
    def key(record: Any) -> tuple:
        value = getattr(record, field, None)
        # None sorts first, as SQLite orders NULL.
        return (value is not None, value if value is not None else 0, record.id)

    return key


class MemoryRecordStore(BaseRecordStore):
    """Dict-of-dicts store keyed by (kind, id). Records are immutable models."""

    def __init__(self) -> None:
        self._records: dict[str, dict[int, Record]] = {kind: {} for kind in RECORD_TYPES}
        self._next_id: dict[str, int] = {kind: 1 for kind in RECORD_TYPES}

    def create_record(self, kind: str, fields: dict[str, Any]) -> int:
        model = _model_for(kind)
        record_id = int(fields.get("id") or self._next_id[kind])
        if record_id in self._records[kind]:
            raise StoreError(f"{kind} {record_id} already exists")
        try:
            record = model.model_validate({**fields, "id": record_id})
        except pydantic.ValidationError as e:
            raise StoreError(f"Invalid {kind} record: {e}") from e
        self._records[kind][record_id] = record  # type: ignore[assignment]
        self._next_id[kind] = max(self._next_id[kind], record_id + 1)
        logger.debug("Created %s %d", kind, record_id)
        return record_id

    def update_record(self, kind: str, record_id: int, fields: dict[str, Any]) -> Record:
        model = _model_for(kind)
        current = self._records[kind].get(record_id)
        if current is None:
            raise RecordNotFoundError(kind, record_id)
        merged = {**current.model_dump(), **fields, "id": record_id}
        try:
            record = model.model_validate(merged)
        except pydantic.ValidationError as e:
            raise StoreError(f"Invalid {kind} record: {e}") from e
        self._records[kind][record_id] = record  # type: ignore[assignment]
        return record  # type: ignore[return-value]

    def get_record(self, kind: str, record_id: int) -> Record | None:
        _model_for(kind)
        return self._records[kind].get(record_id)

    def delete_record(self, kind: str, record_id: int) -> None:
        _model_for(kind)
        if self._records[kind].pop(record_id, None) is None:
            raise RecordNotFoundError(kind, record_id)
        logger.debug("Deleted %s %d", kind, record_id)

    def find_where(
        self,
        kind: str,
        order_by: str = "id",
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
        **filters: Any,
    ) -> list[Record]:
        _model_for(kind)
        conditions = parse_filters(filters)
        found = [r for r in self._records[kind].values() if matches(r, conditions)]
        found.sort(key=_sort_key(order_by), reverse=descending)
        end = None if limit is None else offset + limit
        return found[offset:end]

    def count_where(self, kind: str, **filters: Any) -> int:
        _model_for(kind)
        conditions = parse_filters(filters)
        return sum(1 for r in self._records[kind].values() if matches(r, conditions))
