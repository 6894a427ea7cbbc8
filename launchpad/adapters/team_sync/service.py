"""Public team sync service composed of the orchestrator and previewer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from launchpad.adapters.team_sync.constants import LAST_SYNC_SETTING_KEY, NOT_CONNECTED_MESSAGE
from launchpad.adapters.team_sync.errors import format_error
from launchpad.adapters.team_sync.models import SyncPreview, SyncResult, SyncStatus
from launchpad.adapters.team_sync.orchestrator import SyncOrchestrator
from launchpad.adapters.team_sync.preview import SyncPreviewer
from launchpad.adapters.team_sync.reconciler import EntityReconciler
from launchpad.core.logging_utils import generate_correlation_id
from launchpad.core.time_utils import ensure_datetime

if TYPE_CHECKING:
    from datetime import datetime

    from launchpad.adapters.team_sync.protocols import LocalStoreProtocol, RemoteStoreProtocol
    from launchpad.config import AppConfig

logger = logging.getLogger(__name__)


class TeamSyncService:
    """Control surface for team catalogue sync.

    Nothing here raises to the caller: failures come back inside the returned
    result objects.
    """

    def __init__(
        self,
        *,
        local: LocalStoreProtocol,
        remote: RemoteStoreProtocol,
        interval_seconds: float = 300,
        enabled: bool = True,
    ) -> None:
        self._local = local
        self._remote = remote
        self.interval_seconds = interval_seconds
        self.enabled = enabled

        reconciler = EntityReconciler(local=local, remote=remote)
        self._orchestrator = SyncOrchestrator(local=local, remote=remote, reconciler=reconciler)
        self._previewer = SyncPreviewer(reconciler=reconciler)

    @classmethod
    def from_config(
        cls, cfg: AppConfig, *, local: LocalStoreProtocol, remote: RemoteStoreProtocol
    ) -> TeamSyncService:
        return cls(
            local=local,
            remote=remote,
            interval_seconds=cfg.team_sync.interval_seconds,
            enabled=cfg.team_sync.enabled and cfg.remote.configured,
        )

    async def manual_sync(self) -> SyncResult:
        try:
            return await self._orchestrator.run_once()
        except Exception as exc:
            logger.exception("team_sync_manual_failed")
            return SyncResult.failure(format_error(exc))

    def get_sync_status(self) -> SyncStatus:
        return self._orchestrator.status()

    async def start_sync_polling(self) -> bool:
        """Start interval polling; returns False when sync is disabled by config."""
        if not self.enabled:
            logger.info("team_sync_polling_disabled")
            return False
        await self._orchestrator.start(self.interval_seconds)
        return True

    async def stop_sync_polling(self) -> None:
        await self._orchestrator.stop()

    async def preview_sync(self) -> SyncPreview:
        if not self._remote.is_connected():
            return SyncPreview(errors=[NOT_CONNECTED_MESSAGE])
        correlation_id = generate_correlation_id()
        try:
            return await self._previewer.preview(correlation_id=correlation_id)
        except Exception as exc:
            logger.exception("team_sync_preview_failed", extra={"correlation_id": correlation_id})
            return SyncPreview(errors=[format_error(exc)])

    async def get_last_sync_timestamp(self) -> datetime | None:
        """Completion time of the last finished run, as persisted in settings."""
        try:
            value = await self._local.get_setting(LAST_SYNC_SETTING_KEY)
        except Exception:
            logger.exception("team_sync_last_timestamp_read_failed")
            return None
        return ensure_datetime(value)
