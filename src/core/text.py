# src/core/text.py — v1
"""Plain-text helpers for chapter content (tag stripping, whitespace, word counts)."""

from __future__ import annotations

import re

_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


def strip_tags(text: str) -> str:
    """Remove HTML-like tags, keeping their inner text."""
    return _TAG_RE.sub(" ", text or "")


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to a single space and trim."""
    return _WS_RE.sub(" ", text or "").strip()


def count_words(text: str) -> int:
    """Count whitespace-separated words in tag-stripped text."""
    normalized = normalize_whitespace(strip_tags(text))
    if not normalized:
        return 0
    return len(normalized.split(" "))


def has_text(text: str) -> bool:
    """True when text has visible content once tags and whitespace are removed."""
    return bool(normalize_whitespace(strip_tags(text)))
