"""Sync orchestrator: run guard, aggregation and polling for team sync."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from launchpad.adapters.team_sync.constants import (
    ALREADY_RUNNING_MESSAGE,
    DEFAULT_POLL_INTERVAL_SECONDS,
    LAST_SYNC_SETTING_KEY,
    NOT_CONNECTED_MESSAGE,
)
from launchpad.adapters.team_sync.entity_kinds import SYNC_ORDER
from launchpad.adapters.team_sync.errors import format_error
from launchpad.adapters.team_sync.models import SyncResult, SyncStatus
from launchpad.adapters.team_sync.polling import SyncPoller
from launchpad.adapters.team_sync.reconciler import EntityReconciler
from launchpad.core.logging_utils import generate_correlation_id
from launchpad.core.time_utils import to_iso, utc_now

if TYPE_CHECKING:
    from datetime import datetime

    from launchpad.adapters.team_sync.entity_kinds import EntityKindDescriptor
    from launchpad.adapters.team_sync.protocols import LocalStoreProtocol, RemoteStoreProtocol

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """Owns the sync status and the poll handle for one process.

    At most one run executes at a time; a caller arriving mid-run gets the
    previous result back instead of waiting. There is no per-run timeout, so a
    remote query that never returns keeps ``is_syncing`` set.
    """

    def __init__(
        self,
        *,
        local: LocalStoreProtocol,
        remote: RemoteStoreProtocol,
        reconciler: EntityReconciler | None = None,
        kinds: tuple[EntityKindDescriptor, ...] = SYNC_ORDER,
    ) -> None:
        self._local = local
        self._remote = remote
        self._reconciler = reconciler or EntityReconciler(local=local, remote=remote)
        self._kinds = kinds

        self._is_syncing = False
        self._last_sync_time: datetime | None = None
        self._last_sync_result: SyncResult | None = None
        self._poller: SyncPoller | None = None

    async def run_once(self) -> SyncResult:
        if self._is_syncing:
            logger.info("team_sync_already_running")
            if self._last_sync_result is None:
                return SyncResult.failure(ALREADY_RUNNING_MESSAGE)
            return self._last_sync_result.model_copy(deep=True)

        # Set before the first await so a concurrent caller sees the flag.
        self._is_syncing = True
        correlation_id = generate_correlation_id()
        start_time = time.time()
        try:
            if not self._remote.is_connected():
                logger.warning(
                    "team_sync_remote_not_connected", extra={"correlation_id": correlation_id}
                )
                result = SyncResult.failure(NOT_CONNECTED_MESSAGE)
                self._last_sync_time = utc_now()
                self._last_sync_result = result
                return result.model_copy(deep=True)

            logger.info("team_sync_start", extra={"correlation_id": correlation_id})
            try:
                result = await self._run_reconcilers(correlation_id)
                finished_at = utc_now()
                await self._local.set_setting(LAST_SYNC_SETTING_KEY, to_iso(finished_at))
            except Exception as exc:
                logger.exception("team_sync_failed", extra={"correlation_id": correlation_id})
                result = SyncResult.failure(format_error(exc))
                finished_at = utc_now()

            self._last_sync_time = finished_at
            self._last_sync_result = result
            logger.info(
                "team_sync_complete",
                extra={
                    "correlation_id": correlation_id,
                    "success": result.success,
                    "items_synced": result.items_synced,
                    "conflicts": result.conflicts,
                    "errors": len(result.errors),
                    "duration": time.time() - start_time,
                },
            )
            return result.model_copy(deep=True)
        finally:
            self._is_syncing = False

    async def _run_reconcilers(self, correlation_id: str) -> SyncResult:
        items_synced = 0
        conflicts = 0
        errors: list[str] = []
        for descriptor in self._kinds:
            kind_result = await self._reconciler.reconcile(
                descriptor.kind, correlation_id=correlation_id
            )
            items_synced += kind_result.synced
            conflicts += kind_result.conflicts
            errors.extend(kind_result.errors)

        return SyncResult(
            success=not errors,
            items_synced=items_synced,
            conflicts=conflicts,
            errors=errors,
        )

    async def start(self, interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS) -> None:
        """Run once now and then every ``interval_seconds``; no-op if already polling."""
        if self._poller is not None:
            logger.info("team_sync_polling_already_running")
            return
        poller = SyncPoller(self.run_once, interval_seconds=interval_seconds)
        poller.start()
        self._poller = poller

    async def stop(self) -> None:
        """Cancel future scheduled runs; an in-flight run is left to finish."""
        if self._poller is None:
            return
        self._poller.stop()
        self._poller = None

    def status(self) -> SyncStatus:
        return SyncStatus(
            is_syncing=self._is_syncing,
            last_sync_time=self._last_sync_time,
            last_sync_result=(
                self._last_sync_result.model_copy(deep=True) if self._last_sync_result else None
            ),
            polling=self._poller is not None,
        )

    @property
    def next_poll_time(self) -> datetime | None:
        return self._poller.next_run_time if self._poller else None
