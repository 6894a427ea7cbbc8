"""Tests for conflict detection between local and remote copies."""

from __future__ import annotations

from datetime import timedelta

from launchpad.adapters.team_sync.conflict import detect_conflict, hashes_match, remote_is_newer
from tests.conftest import T0, T1, make_item


def test_newer_remote_with_different_hash_conflicts():
    local = make_item(record_id="a", updated_at=T0, sync_hash="h0")
    remote = make_item(record_id="a", updated_at=T1, sync_hash="h1")
    assert detect_conflict(local, remote) is True


def test_equal_hashes_never_conflict():
    local = make_item(record_id="a", updated_at=T0, sync_hash="same")
    remote = make_item(record_id="a", updated_at=T1, sync_hash="same")
    assert detect_conflict(local, remote) is False


def test_equal_timestamps_are_not_newer():
    local = make_item(record_id="a", updated_at=T1, sync_hash="h0")
    remote = make_item(record_id="a", updated_at=T1, sync_hash="h1")
    assert detect_conflict(local, remote) is False


def test_older_remote_does_not_conflict():
    local = make_item(record_id="a", updated_at=T1, sync_hash="h0")
    remote = make_item(record_id="a", updated_at=T0, sync_hash="h1")
    assert detect_conflict(local, remote) is False


def test_missing_hashes_never_match():
    assert hashes_match(None, None) is False
    assert hashes_match("", "") is False
    assert hashes_match("h", None) is False
    assert hashes_match("h", "h") is True


def test_missing_hash_on_newer_remote_conflicts():
    local = make_item(record_id="a", updated_at=T0, sync_hash=None)
    remote = make_item(record_id="a", updated_at=T1, sync_hash=None)
    assert detect_conflict(local, remote) is True


def test_unparseable_timestamp_is_never_newer():
    local = make_item(record_id="a", updated_at=T0)
    remote = make_item(record_id="a", sync_hash="h1")
    remote["updated_at"] = "not-a-date"
    assert remote_is_newer(local, remote) is False
    assert detect_conflict(local, remote) is False


def test_missing_timestamp_is_never_newer():
    local = make_item(record_id="a")
    local["updated_at"] = None
    remote = make_item(record_id="a", updated_at=T1, sync_hash="h1")
    assert detect_conflict(local, remote) is False


def test_string_and_naive_timestamps_compare_as_utc():
    local = make_item(record_id="a", sync_hash="h0")
    local["updated_at"] = T0.replace(tzinfo=None)
    remote = make_item(record_id="a", sync_hash="h1")
    remote["updated_at"] = (T0 + timedelta(seconds=1)).strftime("%Y-%m-%d %H:%M:%S.%f")
    assert detect_conflict(local, remote) is True
