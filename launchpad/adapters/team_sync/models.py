"""Pydantic models for team sync results and status."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - Pydantic needs this at runtime

from pydantic import BaseModel, Field


class KindSyncResult(BaseModel):
    """Outcome of reconciling one entity kind."""

    kind: str
    synced: int = 0
    conflicts: int = 0
    errors: list[str] = Field(default_factory=list)
    duration_seconds: float = 0.0


class SyncResult(BaseModel):
    """Outcome of one orchestrator run; replaced wholesale on every run."""

    success: bool
    items_synced: int = 0
    conflicts: int = 0
    errors: list[str] = Field(default_factory=list)

    @classmethod
    def failure(cls, message: str) -> SyncResult:
        return cls(success=False, items_synced=0, conflicts=0, errors=[message])


class SyncStatus(BaseModel):
    """Snapshot of the orchestrator state handed to callers."""

    is_syncing: bool = False
    last_sync_time: datetime | None = None
    last_sync_result: SyncResult | None = None
    polling: bool = False


class KindSyncPreview(BaseModel):
    """Ids a reconcile of one kind would touch, computed without writing."""

    kind: str
    would_pull: list[str] = Field(default_factory=list)
    would_update: list[str] = Field(default_factory=list)
    would_overwrite: list[str] = Field(default_factory=list)
    would_push: list[str] = Field(default_factory=list)
    unchanged: int = 0
    errors: list[str] = Field(default_factory=list)


class SyncPreview(BaseModel):
    kinds: list[KindSyncPreview] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
