# src/store/sqlite_store.py — v1
"""SQLite-backed record store (STORE_BACKEND=sqlite).

Uses stdlib sqlite3 with the JSON1 functions: every record is one JSON
document in ``records(kind, id, data)`` and filters compile to
``json_extract`` / ``json_each`` expressions.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

import pydantic
from pydantic import TypeAdapter

from storykeeper.core.errors import RecordNotFoundError, StoreError
from storykeeper.core.models import RECORD_TYPES, Record
from storykeeper.store.base_record_store import BaseRecordStore
from storykeeper.store.filters import Condition, parse_filters

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS records (
    kind TEXT NOT NULL,
    id INTEGER NOT NULL,
    data TEXT NOT NULL,
    PRIMARY KEY (kind, id)
);
CREATE TABLE IF NOT EXISTS sequences (
    kind TEXT PRIMARY KEY,
    last_id INTEGER NOT NULL
);
"""

_COMPARISONS = {"lt": "<", "lte": "<=", "gt": ">", "gte": ">="}

_jsonable = TypeAdapter(Any)


def _scalar(value: Any) -> Any:
    """Bind value in the same representation model_dump_json() stores."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return _jsonable.dump_python(value, mode="json")


class SqliteRecordStore(BaseRecordStore):
    """Durable record store on a single SQLite file."""

    def __init__(self, db_path: Path | str) -> None:
        path = str(db_path)
        if path != ":memory:":
            resolved = Path(path).expanduser()
            resolved.parent.mkdir(parents=True, exist_ok=True)
            path = str(resolved)
        try:
            self._conn = sqlite3.connect(path)
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error as e:
            raise StoreError(f"Cannot open record store {path}: {e}") from e

    # --- Helpers ---

    @staticmethod
    def _model_for(kind: str) -> type[pydantic.BaseModel]:
        try:
            return RECORD_TYPES[kind]
        except KeyError:
            raise StoreError(f"Unknown record kind: {kind!r}") from None

    @staticmethod
    def _check_field(model: type[pydantic.BaseModel], field: str) -> str:
        if field not in model.model_fields:
            raise StoreError(f"Unknown field {field!r} on {model.__name__}")
        return f"$.{field}"

    def _compile(
        self, model: type[pydantic.BaseModel], conditions: list[Condition]
    ) -> tuple[str, list[Any]]:
        clauses: list[str] = ["kind = ?"]
        params: list[Any] = []
        for cond in conditions:
            path = self._check_field(model, cond.field)
            value = cond.value
            if cond.op == "eq":
                if value is None:
                    clauses.append("json_extract(data, ?) IS NULL")
                    params.append(path)
                else:
                    clauses.append("json_extract(data, ?) = ?")
                    params.extend([path, _scalar(value)])
            elif cond.op == "ne":
                if value is None:
                    clauses.append("json_extract(data, ?) IS NOT NULL")
                    params.append(path)
                else:
                    clauses.append(
                        "(json_extract(data, ?) IS NULL OR json_extract(data, ?) != ?)"
                    )
                    params.extend([path, path, _scalar(value)])
            elif cond.op == "in":
                if not value:
                    clauses.append("0")
                    continue
                marks = ", ".join("?" for _ in value)
                clauses.append(f"json_extract(data, ?) IN ({marks})")
                params.append(path)
                params.extend(_scalar(v) for v in value)
            elif cond.op == "contains":
                clauses.append(
                    "EXISTS (SELECT 1 FROM json_each(records.data, ?) AS j "
                    "WHERE j.value = ?)"
                )
                params.extend([path, _scalar(value)])
            else:
                if value is None:
                    clauses.append("0")
                    continue
                clauses.append(f"json_extract(data, ?) {_COMPARISONS[cond.op]} ?")
                params.extend([path, _scalar(value)])
        return " AND ".join(clauses), params

    def _next_id(self, kind: str, requested: int | None) -> int:
        row = self._conn.execute(
            "SELECT last_id FROM sequences WHERE kind = ?", (kind,)
        ).fetchone()
        last = row[0] if row else 0
        record_id = requested if requested else last + 1
        self._conn.execute(
            "INSERT OR REPLACE INTO sequences (kind, last_id) VALUES (?, ?)",
            (kind, max(last, record_id)),
        )
        return record_id

    # --- Primitives ---

    def create_record(self, kind: str, fields: dict[str, Any]) -> int:
        model = self._model_for(kind)
        try:
            with self._conn:
                record_id = self._next_id(kind, fields.get("id"))
                record = model.model_validate({**fields, "id": record_id})
                self._conn.execute(
                    "INSERT INTO records (kind, id, data) VALUES (?, ?, ?)",
                    (kind, record_id, record.model_dump_json()),
                )
        except pydantic.ValidationError as e:
            raise StoreError(f"Invalid {kind} record: {e}") from e
        except sqlite3.IntegrityError as e:
            raise StoreError(f"{kind} {fields.get('id')} already exists") from e
        except sqlite3.Error as e:
            raise StoreError(f"Failed to create {kind}: {e}") from e
        logger.debug("Created %s %d", kind, record_id)
        return record_id

    def update_record(self, kind: str, record_id: int, fields: dict[str, Any]) -> Record:
        model = self._model_for(kind)
        current = self.get_record(kind, record_id)
        if current is None:
            raise RecordNotFoundError(kind, record_id)
        try:
            record = model.model_validate({**current.model_dump(), **fields, "id": record_id})
            with self._conn:
                self._conn.execute(
                    "UPDATE records SET data = ? WHERE kind = ? AND id = ?",
                    (record.model_dump_json(), kind, record_id),
                )
        except pydantic.ValidationError as e:
            raise StoreError(f"Invalid {kind} record: {e}") from e
        except sqlite3.Error as e:
            raise StoreError(f"Failed to update {kind} {record_id}: {e}") from e
        return record  # type: ignore[return-value]

    def get_record(self, kind: str, record_id: int) -> Record | None:
        model = self._model_for(kind)
        try:
            row = self._conn.execute(
                "SELECT data FROM records WHERE kind = ? AND id = ?", (kind, record_id)
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to read {kind} {record_id}: {e}") from e
        if row is None:
            return None
        return model.model_validate_json(row[0])  # type: ignore[return-value]

    def delete_record(self, kind: str, record_id: int) -> None:
        self._model_for(kind)
        try:
            with self._conn:
                cursor = self._conn.execute(
                    "DELETE FROM records WHERE kind = ? AND id = ?", (kind, record_id)
                )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to delete {kind} {record_id}: {e}") from e
        if cursor.rowcount == 0:
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
        model = self._model_for(kind)
        where, params = self._compile(model, parse_filters(filters))
        direction = "DESC" if descending else "ASC"
        sql = (
            f"SELECT data FROM records WHERE {where} "
            f"ORDER BY json_extract(data, ?) {direction}, id {direction}"
        )
        params = [kind, *params, self._check_field(model, order_by)]
        if limit is not None or offset:
            sql += " LIMIT ? OFFSET ?"
            params.extend([-1 if limit is None else limit, offset])
        try:
            rows = self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to query {kind}: {e}") from e
        return [model.model_validate_json(row[0]) for row in rows]  # type: ignore[misc]

    def count_where(self, kind: str, **filters: Any) -> int:
        model = self._model_for(kind)
        where, params = self._compile(model, parse_filters(filters))
        try:
            row = self._conn.execute(
                f"SELECT COUNT(*) FROM records WHERE {where}", [kind, *params]
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Failed to count {kind}: {e}") from e
        return int(row[0])

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()
