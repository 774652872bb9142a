# tests/unit/core/test_unit_clock.py — v1
"""Tests for core/clock.py."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from storykeeper.core.clock import FixedClock, SystemClock


class TestSystemClock:
    def test_now_is_utc_aware(self):
        now = SystemClock().now()
        assert now.tzinfo is not None
        assert now.utcoffset() == timedelta(0)


class TestFixedClock:
    def test_naive_is_assumed_utc(self):
        clock = FixedClock(datetime(2026, 1, 1, 9, 30))
        assert clock.now() == datetime(2026, 1, 1, 9, 30, tzinfo=timezone.utc)

    def test_advance(self):
        clock = FixedClock(datetime(2026, 1, 1, tzinfo=timezone.utc))
        moved = clock.advance(minutes=5, seconds=1)
        assert moved == datetime(2026, 1, 1, 0, 5, 1, tzinfo=timezone.utc)
        assert clock.now() == moved

    def test_set(self):
        clock = FixedClock(datetime(2026, 1, 1, tzinfo=timezone.utc))
        clock.set(datetime(2025, 6, 1))
        assert clock.now() == datetime(2025, 6, 1, tzinfo=timezone.utc)
