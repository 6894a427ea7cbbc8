"""Exceptions raised by the team sync stores and helpers for error strings."""

from __future__ import annotations


class TeamSyncError(Exception):
    """Base class for team sync errors."""


class RecordNotFoundError(TeamSyncError):
    """Raised by the local store when an update targets an id that does not exist."""

    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class UnknownEntityKindError(TeamSyncError, ValueError):
    pass


class RemoteStoreError(TeamSyncError):
    """Base class for shared-store failures."""


class RemoteNotConnectedError(RemoteStoreError, ConnectionError):
    def __init__(self, message: str = "remote store not connected") -> None:
        super().__init__(message)


class RemoteQueryError(RemoteStoreError):
    """The shared store rejected a statement."""

    def __init__(self, message: str, *, sql: str | None = None) -> None:
        super().__init__(message)
        self.sql = sql


def format_error(exc: BaseException) -> str:
    """Message used in per-record error strings; never empty."""
    message = str(exc).strip()
    return message or type(exc).__name__
