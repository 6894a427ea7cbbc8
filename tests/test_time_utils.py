"""Tests for timestamp coercion helpers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

from launchpad.core.time_utils import ensure_datetime, to_db_timestamp, to_iso


def test_ensure_datetime_handles_supported_inputs():
    naive = datetime(2025, 6, 15, 12, 30)
    assert ensure_datetime(None) is None
    assert ensure_datetime("") is None
    assert ensure_datetime(naive) == naive.replace(tzinfo=UTC)
    assert ensure_datetime("2025-06-15T12:30:00Z") == naive.replace(tzinfo=UTC)
    assert ensure_datetime("2025-06-15 12:30:00.000000") == naive.replace(tzinfo=UTC)


def test_ensure_datetime_rejects_garbage():
    assert ensure_datetime("yesterday") is None
    assert ensure_datetime(12345) is None


def test_to_db_timestamp_is_naive_utc():
    aware = datetime(2025, 6, 15, 15, 30, tzinfo=timezone(timedelta(hours=3)))
    assert to_db_timestamp(aware) == "2025-06-15 12:30:00.000000"
    assert to_db_timestamp(None) is None


def test_to_iso_always_carries_offset():
    assert to_iso(datetime(2025, 6, 15, 12, 30)) == "2025-06-15T12:30:00+00:00"
