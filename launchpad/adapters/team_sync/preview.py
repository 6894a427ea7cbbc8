"""Dry-run view of what a sync would do, without writing to either store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from launchpad.adapters.team_sync.conflict import detect_conflict, hashes_match
from launchpad.adapters.team_sync.entity_kinds import SYNC_ORDER
from launchpad.adapters.team_sync.errors import format_error
from launchpad.adapters.team_sync.models import KindSyncPreview, SyncPreview

if TYPE_CHECKING:
    from launchpad.adapters.team_sync.reconciler import EntityReconciler

logger = logging.getLogger(__name__)


class SyncPreviewer:
    def __init__(self, *, reconciler: EntityReconciler) -> None:
        self._reconciler = reconciler

    async def preview(self, *, correlation_id: str | None = None) -> SyncPreview:
        preview = SyncPreview()
        for descriptor in SYNC_ORDER:
            kind_preview = KindSyncPreview(kind=descriptor.kind.value)
            try:
                remote_rows, local_rows = await self._reconciler.fetch_both(descriptor)
            except Exception as exc:
                kind_preview.errors.append(f"{descriptor.plural_label} sync: {format_error(exc)}")
                preview.kinds.append(kind_preview)
                continue

            local_by_id = descriptor.index(local_rows)
            remote_by_id = descriptor.index(remote_rows)

            for record_id, remote_row in remote_by_id.items():
                local_row = local_by_id.get(record_id)
                if local_row is None:
                    if not await self._reconciler.held_as_personal(descriptor, record_id):
                        kind_preview.would_pull.append(record_id)
                elif detect_conflict(local_row, remote_row):
                    kind_preview.would_overwrite.append(record_id)
                elif not hashes_match(local_row.get("sync_hash"), remote_row.get("sync_hash")):
                    kind_preview.would_update.append(record_id)
                else:
                    kind_preview.unchanged += 1

            kind_preview.would_push = [
                record_id for record_id in local_by_id if record_id not in remote_by_id
            ]
            preview.kinds.append(kind_preview)

        for kind_preview in preview.kinds:
            preview.errors.extend(kind_preview.errors)

        logger.info(
            "team_sync_preview_complete",
            extra={
                "correlation_id": correlation_id,
                "would_pull": sum(len(k.would_pull) for k in preview.kinds),
                "would_push": sum(len(k.would_push) for k in preview.kinds),
                "errors": len(preview.errors),
            },
        )
        return preview
