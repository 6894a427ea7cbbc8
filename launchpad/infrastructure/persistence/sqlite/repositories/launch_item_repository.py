"""SQLite implementation of the team sync local store.

Rows cross the boundary as plain dicts keyed by column name. Writes go through
update/insert queries rather than ``Model.save`` so timestamps copied from the
shared store are kept as-is.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from launchpad.adapters.team_sync.entity_kinds import EntityKind
from launchpad.adapters.team_sync.errors import RecordNotFoundError, UnknownEntityKindError
from launchpad.core.time_utils import UTC, ensure_datetime, utc_now
from launchpad.db.models import AppSetting, Bookmark, Executable, LaunchItem, Script
from launchpad.infrastructure.persistence.sqlite.base import SqliteBaseRepository

if TYPE_CHECKING:
    from collections.abc import Callable

    from launchpad.adapters.team_sync.protocols import T

_MODELS: dict[EntityKind, type[LaunchItem]] = {
    EntityKind.BOOKMARK: Bookmark,
    EntityKind.EXECUTABLE: Executable,
    EntityKind.SCRIPT: Script,
}

_TIMESTAMP_COLUMNS = ("created_at", "updated_at", "last_sync_at")
# NOT NULL columns: a missing value leaves the stored one untouched.
_REQUIRED_TIMESTAMPS = frozenset({"created_at", "updated_at"})


def _model_for(kind: EntityKind | str) -> type[LaunchItem]:
    try:
        return _MODELS[EntityKind(kind)]
    except ValueError as exc:
        raise UnknownEntityKindError(f"Unknown entity kind: {kind!r}") from exc


def _to_storage(fields: dict[str, Any]) -> dict[str, Any]:
    data = dict(fields)
    for column in _TIMESTAMP_COLUMNS:
        if column not in data:
            continue
        dt = ensure_datetime(data[column])
        if dt is None:
            if column in _REQUIRED_TIMESTAMPS:
                del data[column]
            else:
                data[column] = None
            continue
        data[column] = dt.astimezone(UTC).replace(tzinfo=None)
    return data


def _from_storage(row: dict[str, Any]) -> dict[str, Any]:
    for column in _TIMESTAMP_COLUMNS:
        if column in row:
            row[column] = ensure_datetime(row[column])
    return row


class _SqliteTransaction:
    """Synchronous writes; callers provide the connection and transaction."""

    def insert(self, kind: EntityKind | str, fields: dict[str, Any]) -> str:
        model = _model_for(kind)
        data = _to_storage(fields)
        record_id = str(data.get("id") or uuid.uuid4())
        data["id"] = record_id
        model.insert(**data).execute()
        return record_id

    def update(self, kind: EntityKind | str, record_id: str, fields: dict[str, Any]) -> None:
        model = _model_for(kind)
        data = _to_storage(fields)
        data.pop("id", None)
        if not data:
            if not model.select().where(model.id == record_id).exists():
                raise RecordNotFoundError(EntityKind(kind).value, record_id)
            return
        updated = model.update(**data).where(model.id == record_id).execute()
        if updated == 0:
            raise RecordNotFoundError(EntityKind(kind).value, record_id)


class SqliteLaunchItemRepository(SqliteBaseRepository):
    """Local store for bookmarks, executables, scripts and app settings."""

    def __init__(self, session_manager: Any) -> None:
        super().__init__(session_manager)
        self._tx = _SqliteTransaction()

    async def get_all_team_level(self, kind: EntityKind | str) -> list[dict[str, Any]]:
        model = _model_for(kind)

        def _query() -> list[dict[str, Any]]:
            query = model.select().where(model.is_team_level == True).order_by(model.id)  # noqa: E712
            return [_from_storage(row) for row in query.dicts()]

        return await self._read(_query, operation_name="get_all_team_level")

    async def get(self, kind: EntityKind | str, record_id: str) -> dict[str, Any] | None:
        model = _model_for(kind)

        def _query() -> dict[str, Any] | None:
            row = model.select().where(model.id == record_id).dicts().first()
            return _from_storage(row) if row is not None else None

        return await self._read(_query, operation_name="get_launch_item")

    async def insert(self, kind: EntityKind | str, fields: dict[str, Any]) -> str:
        return await self._write(self._tx.insert, kind, fields, operation_name="insert_item")

    async def update(self, kind: EntityKind | str, record_id: str, fields: dict[str, Any]) -> None:
        await self._write(
            self._tx.update, kind, record_id, fields, operation_name="update_item"
        )

    async def run_in_transaction(self, fn: Callable[[_SqliteTransaction], T]) -> T:
        """Run ``fn`` with a synchronous store view in one transaction.

        Any exception raised by ``fn`` rolls the transaction back and propagates.
        """
        return await self._write(fn, self._tx, operation_name="transaction", atomic=True)

    async def get_setting(self, key: str) -> str | None:
        def _query() -> str | None:
            setting = AppSetting.get_or_none(AppSetting.key == key)
            return setting.value if setting is not None else None

        return await self._read(_query, operation_name="get_setting")

    async def set_setting(self, key: str, value: str) -> None:
        def _upsert() -> None:
            now = utc_now().replace(tzinfo=None)
            (
                AppSetting.insert(key=key, value=value, updated_at=now)
                .on_conflict(
                    conflict_target=[AppSetting.key],
                    preserve=[AppSetting.value, AppSetting.updated_at],
                )
                .execute()
            )

        await self._write(_upsert, operation_name="set_setting")
