# src/store/filters.py — v1
"""Keyword filter syntax shared by record store backends.

``field=value`` is equality. A ``__<op>`` suffix selects another operator:

    __ne        not equal
    __in        value in the given collection (empty collection matches nothing)
    __contains  list field contains the value
    __lt, __lte, __gt, __gte   ordering comparisons (None never matches)
"""

from __future__ import annotations

from typing import Any, NamedTuple

OPERATORS = ("eq", "ne", "in", "contains", "lt", "lte", "gt", "gte")


class Condition(NamedTuple):
    field: str
    op: str
    value: Any


def parse_filters(filters: dict[str, Any]) -> list[Condition]:
    """Split ``field__op=value`` keywords into conditions.

    Raises:
        ValueError: On an unknown operator suffix.
    """
    conditions: list[Condition] = []
    for raw, value in filters.items():
        field, _, op = raw.partition("__")
        op = op or "eq"
        if op not in OPERATORS:
            raise ValueError(f"Unsupported filter operator: {raw!r}")
        if op == "in":
            value = list(value)
        conditions.append(Condition(field, op, value))
    return conditions


def matches(record: Any, conditions: list[Condition]) -> bool:
    """Evaluate conditions against a record's attributes."""
    for cond in conditions:
        actual = getattr(record, cond.field, None)
        if cond.op == "eq":
            ok = actual == cond.value
        elif cond.op == "ne":
            ok = actual != cond.value
        elif cond.op == "in":
            ok = actual in cond.value
        elif cond.op == "contains":
            ok = actual is not None and cond.value in actual
        elif actual is None or cond.value is None:
            ok = False
        elif cond.op == "lt":
            ok = actual < cond.value
        elif cond.op == "lte":
            ok = actual <= cond.value
        elif cond.op == "gt":
            ok = actual > cond.value
        else:
            ok = actual >= cond.value
        if not ok:
            return False
    return True
