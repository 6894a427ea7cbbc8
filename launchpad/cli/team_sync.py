"""Command-line entry point for team catalogue sync.

Usage:
    launchpad-sync run          # one sync pass, exit 1 on any error
    launchpad-sync status       # last persisted sync time
    launchpad-sync preview      # what a sync would change, without writing
    launchpad-sync init-remote  # create the shared tables
    launchpad-sync watch        # poll until interrupted

Connection settings come from the environment (``REMOTE_DB_URL``,
``REMOTE_DB_ENV``, ``DB_PATH``...) or a ``.env`` file.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from launchpad.adapters.team_sync import RemoteStoreError, TeamSyncService
from launchpad.config import load_config
from launchpad.core.logging_utils import setup_json_logging
from launchpad.db.session import DatabaseSessionManager
from launchpad.infrastructure.persistence.remote.shared_store import SharedStoreClient
from launchpad.infrastructure.persistence.sqlite.repositories.launch_item_repository import (
    SqliteLaunchItemRepository,
)

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from launchpad.adapters.team_sync import SyncPreview, SyncResult
    from launchpad.config import AppConfig

logger = logging.getLogger("launchpad.team_sync")

_MAX_LISTED = 10


@asynccontextmanager
async def _open_stores(cfg: AppConfig) -> AsyncIterator[tuple[Any, SharedStoreClient]]:
    db = DatabaseSessionManager(
        cfg.runtime.db_path,
        operation_timeout=cfg.database.operation_timeout,
        max_retries=cfg.database.max_retries,
    )
    db.migrate()
    local = SqliteLaunchItemRepository(db)
    remote = SharedStoreClient(cfg.remote.url, env=cfg.remote.env)
    try:
        yield local, remote
    finally:
        await remote.close()
        db.close()


async def _connect(remote: SharedStoreClient, local: Any) -> bool:
    try:
        await remote.connect(local=local)
    except RemoteStoreError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return False
    return True


def _print_result(result: SyncResult) -> None:
    print("\n=== Team Sync Summary ===")
    print(f"Success: {'yes' if result.success else 'no'}")
    print(f"Items synced: {result.items_synced}")
    print(f"Conflicts resolved (remote won): {result.conflicts}")
    if result.errors:
        print(f"\nErrors ({len(result.errors)}):")
        for err in result.errors[:_MAX_LISTED]:
            print(f"  - {err}")
        if len(result.errors) > _MAX_LISTED:
            print(f"  ... and {len(result.errors) - _MAX_LISTED} more")


def _print_ids(label: str, ids: list[str]) -> None:
    print(f"  {label}: {len(ids)}")
    for record_id in ids[:_MAX_LISTED]:
        print(f"    - {record_id}")
    if len(ids) > _MAX_LISTED:
        print(f"    ... and {len(ids) - _MAX_LISTED} more")


def _print_preview(preview: SyncPreview) -> None:
    print("\n=== Team Sync Preview (DRY RUN) ===")
    for kind in preview.kinds:
        print(f"\n{kind.kind}:")
        _print_ids("Would pull (new locally)", kind.would_pull)
        _print_ids("Would update (remote changed)", kind.would_update)
        _print_ids("Would overwrite (conflict, remote wins)", kind.would_overwrite)
        _print_ids("Would push (new remotely)", kind.would_push)
        print(f"  Unchanged: {kind.unchanged}")
    if preview.errors:
        print(f"\nErrors ({len(preview.errors)}):")
        for err in preview.errors:
            print(f"  - {err}")
    print("\n=== End of Preview ===")


async def cmd_run(cfg: AppConfig) -> int:
    async with _open_stores(cfg) as (local, remote):
        if not await _connect(remote, local):
            return 1
        service = TeamSyncService.from_config(cfg, local=local, remote=remote)
        result = await service.manual_sync()
        _print_result(result)
        return 0 if result.success else 1


async def cmd_status(cfg: AppConfig) -> int:
    async with _open_stores(cfg) as (local, remote):
        service = TeamSyncService.from_config(cfg, local=local, remote=remote)
        last = await service.get_last_sync_timestamp()
        print(f"Remote configured: {'yes' if cfg.remote.configured else 'no'} ({cfg.remote.env})")
        print(f"Polling interval: {cfg.team_sync.interval_seconds}s")
        print(f"Last sync: {last.isoformat() if last else 'never'}")
        return 0


async def cmd_preview(cfg: AppConfig) -> int:
    async with _open_stores(cfg) as (local, remote):
        if not await _connect(remote, local):
            return 1
        service = TeamSyncService.from_config(cfg, local=local, remote=remote)
        preview = await service.preview_sync()
        _print_preview(preview)
        return 0 if not preview.errors else 1


async def cmd_init_remote(cfg: AppConfig) -> int:
    async with _open_stores(cfg) as (local, remote):
        if not await _connect(remote, local):
            return 1
        try:
            await remote.initialize_tables()
        except RemoteStoreError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1
        print("Shared tables initialized.")
        return 0


async def cmd_watch(cfg: AppConfig) -> int:
    if not cfg.team_sync.enabled:
        logger.warning("team_sync_disabled")
        print("Team sync is disabled. Set TEAM_SYNC_ENABLED=true to enable.", file=sys.stderr)
        return 1
    async with _open_stores(cfg) as (local, remote):
        if not await _connect(remote, local):
            return 1
        service = TeamSyncService.from_config(cfg, local=local, remote=remote)
        await service.start_sync_polling()
        try:
            await asyncio.Event().wait()
        finally:
            await service.stop_sync_polling()
    return 0


_COMMANDS = {
    "run": cmd_run,
    "status": cmd_status,
    "preview": cmd_preview,
    "init-remote": cmd_init_remote,
    "watch": cmd_watch,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="launchpad-sync",
        description="Synchronize team-level launch pad items with the shared database",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override LOG_LEVEL for this invocation",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("run", help="Run one sync pass")
    subparsers.add_parser("status", help="Show the last persisted sync time")
    subparsers.add_parser("preview", help="Show what a sync would change")
    subparsers.add_parser("init-remote", help="Create the shared team tables")
    subparsers.add_parser("watch", help="Poll the shared database until interrupted")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {"LOG_LEVEL": args.log_level} if args.log_level else {}
    try:
        cfg = load_config(**overrides)
    except RuntimeError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    setup_json_logging(cfg.runtime.log_level, log_file=cfg.runtime.log_file, stream=sys.stderr)

    if args.command != "status" and not cfg.remote.configured:
        print("Shared database not configured. Set REMOTE_DB_URL.", file=sys.stderr)
        return 1

    try:
        return asyncio.run(_COMMANDS[args.command](cfg))
    except KeyboardInterrupt:
        logger.info("team_sync_cli_interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
