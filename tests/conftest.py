"""Pytest configuration and shared helpers.

Local and shared stores in tests are real SQLite files under a temp directory;
the shared one is opened through ``playhouse.db_url`` like a MySQL install.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from launchpad.adapters.team_sync.entity_kinds import EntityKind, get_descriptor
from launchpad.config import AppConfig, load_config
from launchpad.db.session import DatabaseSessionManager
from launchpad.infrastructure.persistence.remote.shared_store import SharedStoreClient
from launchpad.infrastructure.persistence.sqlite.repositories.launch_item_repository import (
    SqliteLaunchItemRepository,
)

T0 = datetime(2025, 3, 1, 9, 0, 0, tzinfo=UTC)
T1 = datetime(2025, 3, 1, 10, 0, 0, tzinfo=UTC)
T2 = datetime(2025, 3, 1, 11, 0, 0, tzinfo=UTC)

_DEFAULT_CONTENT: dict[EntityKind, dict[str, Any]] = {
    EntityKind.BOOKMARK: {
        "title": "Wiki",
        "url": "https://wiki.example.com",
        "favicon": None,
        "category": "Docs",
    },
    EntityKind.EXECUTABLE: {
        "title": "Terminal",
        "executable_path": "C:\\Windows\\System32\\cmd.exe",
        "parameters": "/k",
        "icon": None,
        "category": "Tools",
    },
    EntityKind.SCRIPT: {
        "title": "Flush DNS",
        "script_content": "ipconfig /flushdns",
        "script_type": "cmd",
        "icon": None,
        "category": "Network",
    },
}


def make_test_app_config(**overrides: Any) -> AppConfig:
    """Build an ``AppConfig`` from flat env-style overrides."""
    values = {"DB_PATH": "/tmp/launchpad-test.db", "LOG_LEVEL": "DEBUG"}
    values.update(overrides)
    return load_config(**values)


def make_item(
    kind: EntityKind = EntityKind.BOOKMARK,
    *,
    record_id: str | None = None,
    updated_at: datetime = T0,
    sync_hash: str | None = "h0",
    **fields: Any,
) -> dict[str, Any]:
    """A team-level record dict with sensible content for ``kind``."""
    item = dict(_DEFAULT_CONTENT[EntityKind(kind)])
    item.update(
        id=record_id or str(uuid.uuid4()),
        is_team_level=True,
        is_personal=True,
        created_by="alice@example.com",
        updated_by="alice@example.com",
        created_at=T0,
        updated_at=updated_at,
        sync_hash=sync_hash,
    )
    item.update(fields)
    return item


def open_local_store(path: Path) -> tuple[DatabaseSessionManager, SqliteLaunchItemRepository]:
    session = DatabaseSessionManager(str(path))
    session.migrate()
    return session, SqliteLaunchItemRepository(session)


async def open_shared_store(path: Path) -> SharedStoreClient:
    client = SharedStoreClient(f"sqlite:///{path}")
    await client.connect()
    await client.initialize_tables()
    return client


async def seed_remote(client: SharedStoreClient, kind: EntityKind, item: dict[str, Any]) -> None:
    sql, params = get_descriptor(kind).remote_insert(item)
    await client.query(sql, params)


async def remote_rows(client: SharedStoreClient, kind: EntityKind) -> dict[str, dict[str, Any]]:
    descriptor = get_descriptor(kind)
    sql, params = descriptor.remote_select()
    return descriptor.index(await client.query(sql, params))


@pytest.fixture(autouse=True)
def _restore_database_proxy():
    """Tests open their own databases; put the global proxy back afterwards."""
    from launchpad.db.models import database_proxy

    old = database_proxy.obj
    yield
    database_proxy.initialize(old)
