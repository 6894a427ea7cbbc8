"""Bidirectional sync of team-level launch pad items with a shared database."""

from launchpad.adapters.team_sync.conflict import detect_conflict
from launchpad.adapters.team_sync.entity_kinds import SYNC_ORDER, EntityKind, get_descriptor
from launchpad.adapters.team_sync.errors import (
    RecordNotFoundError,
    RemoteNotConnectedError,
    RemoteQueryError,
    RemoteStoreError,
    TeamSyncError,
)
from launchpad.adapters.team_sync.models import SyncPreview, SyncResult, SyncStatus
from launchpad.adapters.team_sync.orchestrator import SyncOrchestrator
from launchpad.adapters.team_sync.reconciler import EntityReconciler
from launchpad.adapters.team_sync.service import TeamSyncService

__all__ = [
    "SYNC_ORDER",
    "EntityKind",
    "EntityReconciler",
    "RecordNotFoundError",
    "RemoteNotConnectedError",
    "RemoteQueryError",
    "RemoteStoreError",
    "SyncOrchestrator",
    "SyncPreview",
    "SyncResult",
    "SyncStatus",
    "TeamSyncError",
    "TeamSyncService",
    "detect_conflict",
    "get_descriptor",
]
