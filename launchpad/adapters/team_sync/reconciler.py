"""Generic pull-then-push reconciler for one entity kind."""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Any

from launchpad.adapters.team_sync.conflict import detect_conflict, hashes_match
from launchpad.adapters.team_sync.entity_kinds import get_descriptor
from launchpad.adapters.team_sync.errors import format_error
from launchpad.adapters.team_sync.models import KindSyncResult
from launchpad.core.time_utils import utc_now

if TYPE_CHECKING:
    from launchpad.adapters.team_sync.entity_kinds import EntityKind, EntityKindDescriptor
    from launchpad.adapters.team_sync.protocols import (
        LocalStoreProtocol,
        LocalTransaction,
        RemoteStoreProtocol,
    )

logger = logging.getLogger(__name__)


class EntityReconciler:
    """Brings the team-level rows of one kind into agreement across both stores.

    Remote wins every update (including conflicts); local is authoritative only
    for rows the remote has never seen. ``reconcile`` never raises: failures are
    collected per row and the batch continues.
    """

    def __init__(self, *, local: LocalStoreProtocol, remote: RemoteStoreProtocol) -> None:
        self._local = local
        self._remote = remote

    async def fetch_both(
        self, descriptor: EntityKindDescriptor
    ) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        sql, params = descriptor.remote_select()
        remote_rows = await self._remote.query(sql, params)
        local_rows = await self._local.get_all_team_level(descriptor.kind)
        return remote_rows, local_rows

    async def held_as_personal(self, descriptor: EntityKindDescriptor, record_id: str) -> bool:
        """True when the id exists locally on a row that is not team level.

        Such rows belong to one store only and are never synced.
        """
        return await self._local.get(descriptor.kind, record_id) is not None

    async def reconcile(
        self, kind: EntityKind | str, *, correlation_id: str | None = None
    ) -> KindSyncResult:
        descriptor = get_descriptor(kind)
        start_time = time.time()
        result = KindSyncResult(kind=descriptor.kind.value)
        logger.info(
            "team_sync_kind_start",
            extra={"correlation_id": correlation_id, "kind": descriptor.kind.value},
        )

        try:
            remote_rows, local_rows = await self.fetch_both(descriptor)
            local_by_id = descriptor.index(local_rows)
            remote_by_id = descriptor.index(remote_rows)

            for remote_row in remote_rows:
                try:
                    await self._pull_row(descriptor, remote_row, local_by_id, result)
                except Exception as exc:
                    self._record_row_error(descriptor, remote_row, exc, result, correlation_id)

            for local_row in local_rows:
                try:
                    if descriptor.record_id(local_row) in remote_by_id:
                        continue
                    sql, params = descriptor.remote_insert(local_row)
                    await self._remote.query(sql, params)
                    result.synced += 1
                    logger.debug(
                        "team_sync_row_pushed",
                        extra={
                            "correlation_id": correlation_id,
                            "kind": descriptor.kind.value,
                            "record_id": local_row.get("id"),
                        },
                    )
                except Exception as exc:
                    self._record_row_error(descriptor, local_row, exc, result, correlation_id)

        except Exception as exc:
            result.errors.append(f"{descriptor.plural_label} sync: {format_error(exc)}")
            logger.exception(
                "team_sync_kind_failed",
                extra={"correlation_id": correlation_id, "kind": descriptor.kind.value},
            )

        result.duration_seconds = time.time() - start_time
        logger.info(
            "team_sync_kind_complete",
            extra={
                "correlation_id": correlation_id,
                "kind": descriptor.kind.value,
                "synced": result.synced,
                "conflicts": result.conflicts,
                "errors": len(result.errors),
                "duration": result.duration_seconds,
            },
        )
        return result

    async def _pull_row(
        self,
        descriptor: EntityKindDescriptor,
        remote_row: dict[str, Any],
        local_by_id: dict[str, dict[str, Any]],
        result: KindSyncResult,
    ) -> None:
        record_id = descriptor.record_id(remote_row)
        local_row = local_by_id.get(record_id)

        if local_row is None:
            if await self.held_as_personal(descriptor, record_id):
                logger.info(
                    "team_sync_row_skipped_not_team_level",
                    extra={"kind": descriptor.kind.value, "record_id": record_id},
                )
                return
            await self._insert_from_remote(descriptor, remote_row)
            result.synced += 1
            return

        if detect_conflict(local_row, remote_row):
            await self._overwrite_from_remote(descriptor, remote_row)
            result.conflicts += 1
        elif not hashes_match(local_row.get("sync_hash"), remote_row.get("sync_hash")):
            await self._overwrite_from_remote(descriptor, remote_row)
            result.synced += 1

    async def _insert_from_remote(
        self, descriptor: EntityKindDescriptor, remote_row: dict[str, Any]
    ) -> str:
        now = utc_now()

        def _insert(tx: LocalTransaction) -> str:
            record_id = tx.insert(descriptor.kind, descriptor.local_insert_fields(remote_row))
            tx.update(descriptor.kind, record_id, descriptor.local_sync_stamp(remote_row, now))
            return record_id

        return await self._local.run_in_transaction(_insert)

    async def _overwrite_from_remote(
        self, descriptor: EntityKindDescriptor, remote_row: dict[str, Any]
    ) -> None:
        await self._local.update(
            descriptor.kind,
            descriptor.record_id(remote_row),
            descriptor.local_overwrite_fields(remote_row, utc_now()),
        )

    def _record_row_error(
        self,
        descriptor: EntityKindDescriptor,
        row: dict[str, Any],
        exc: Exception,
        result: KindSyncResult,
        correlation_id: str | None,
    ) -> None:
        result.errors.append(f"{descriptor.label} {row.get('id')}: {format_error(exc)}")
        logger.warning(
            "team_sync_row_failed",
            extra={
                "correlation_id": correlation_id,
                "kind": descriptor.kind.value,
                "record_id": row.get("id"),
                "error": format_error(exc),
            },
        )
