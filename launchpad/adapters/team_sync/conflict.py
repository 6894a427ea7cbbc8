"""Conflict detection between the local and remote copies of one record."""

from __future__ import annotations

from typing import Any

from launchpad.core.time_utils import ensure_datetime


def hashes_match(local_hash: Any, remote_hash: Any) -> bool:
    """Content fingerprints agree.

    A missing or empty hash never matches, not even another missing hash, so an
    unhashed record is re-synced on every pass until its writer assigns one.
    """
    if not local_hash or not remote_hash:
        return False
    return str(local_hash) == str(remote_hash)


def remote_is_newer(local: dict[str, Any], remote: dict[str, Any]) -> bool:
    remote_updated = ensure_datetime(remote.get("updated_at"))
    local_updated = ensure_datetime(local.get("updated_at"))
    if remote_updated is None or local_updated is None:
        return False
    return remote_updated > local_updated


def detect_conflict(local: dict[str, Any], remote: dict[str, Any]) -> bool:
    """True when the remote copy is strictly newer and its content differs."""
    return remote_is_newer(local, remote) and not hashes_match(
        local.get("sync_hash"), remote.get("sync_hash")
    )
