"""Entity-kind descriptors driving the generic reconciler.

Each descriptor names the shared table, the kind-specific content columns and
how rows are mapped between the two stores. Records travel as plain dicts keyed
by column name.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from launchpad.adapters.team_sync.errors import UnknownEntityKindError
from launchpad.core.time_utils import to_db_timestamp

if TYPE_CHECKING:
    from datetime import datetime


class EntityKind(str, Enum):
    BOOKMARK = "bookmark"
    EXECUTABLE = "executable"
    SCRIPT = "script"


ATTRIBUTION_FIELDS = ("created_by", "updated_by")
TIMESTAMP_FIELDS = ("created_at", "updated_at")


@dataclass(frozen=True)
class EntityKindDescriptor:
    kind: EntityKind
    table: str
    label: str
    plural_label: str
    content_fields: tuple[str, ...]

    def record_id(self, record: dict[str, Any]) -> str:
        return str(record["id"])

    def index(self, records: list[dict[str, Any]]) -> dict[str, dict[str, Any]]:
        """Identity-indexed view of a batch of rows."""
        return {self.record_id(record): record for record in records}

    def content_of(self, record: dict[str, Any]) -> dict[str, Any]:
        return {name: record.get(name) for name in self.content_fields}

    def local_insert_fields(self, remote_row: dict[str, Any]) -> dict[str, Any]:
        """Fields for a brand-new local row created from a remote one."""
        fields = self.content_of(remote_row)
        fields.update(
            id=self.record_id(remote_row),
            is_team_level=True,
            is_personal=True,
            created_by=remote_row.get("created_by"),
            updated_by=remote_row.get("updated_by"),
        )
        return fields

    def local_sync_stamp(self, remote_row: dict[str, Any], now: datetime) -> dict[str, Any]:
        """Remote timestamps and hash applied after a pulled insert."""
        return {
            "created_at": remote_row.get("created_at"),
            "updated_at": remote_row.get("updated_at"),
            "sync_hash": remote_row.get("sync_hash"),
            "last_sync_at": now,
        }

    def local_overwrite_fields(self, remote_row: dict[str, Any], now: datetime) -> dict[str, Any]:
        """Fields copied onto an existing local row when the remote copy wins."""
        fields = self.content_of(remote_row)
        fields.update(
            updated_by=remote_row.get("updated_by"),
            sync_hash=remote_row.get("sync_hash"),
            last_sync_at=now,
        )
        return fields

    def remote_select(self) -> tuple[str, list[Any]]:
        return f"SELECT * FROM {self.table} WHERE is_team_level = ?", [True]  # noqa: S608

    def remote_insert(self, local_row: dict[str, Any]) -> tuple[str, list[Any]]:
        """INSERT statement pushing a local row verbatim, tagged team level."""
        columns = ["id", *self.content_fields, "is_team_level", *ATTRIBUTION_FIELDS]
        columns += [*TIMESTAMP_FIELDS, "sync_hash"]

        params: list[Any] = [self.record_id(local_row)]
        params += [local_row.get(name) for name in self.content_fields]
        params.append(True)
        params += [local_row.get(name) or None for name in ATTRIBUTION_FIELDS]
        params += [to_db_timestamp(local_row.get(name)) for name in TIMESTAMP_FIELDS]
        params.append(local_row.get("sync_hash") or None)

        placeholders = ", ".join("?" for _ in columns)
        sql = f"INSERT INTO {self.table} ({', '.join(columns)}) VALUES ({placeholders})"  # noqa: S608
        return sql, params


BOOKMARK = EntityKindDescriptor(
    kind=EntityKind.BOOKMARK,
    table="bookmarks",
    label="Bookmark",
    plural_label="Bookmarks",
    content_fields=("title", "url", "favicon", "category"),
)

EXECUTABLE = EntityKindDescriptor(
    kind=EntityKind.EXECUTABLE,
    table="executables",
    label="Executable",
    plural_label="Executables",
    content_fields=("title", "executable_path", "parameters", "icon", "category"),
)

SCRIPT = EntityKindDescriptor(
    kind=EntityKind.SCRIPT,
    table="scripts",
    label="Script",
    plural_label="Scripts",
    content_fields=("title", "script_content", "script_type", "icon", "category"),
)

# Reconciliation order within one run.
SYNC_ORDER: tuple[EntityKindDescriptor, ...] = (BOOKMARK, EXECUTABLE, SCRIPT)

_BY_KIND = {descriptor.kind: descriptor for descriptor in SYNC_ORDER}


def get_descriptor(kind: EntityKind | str) -> EntityKindDescriptor:
    try:
        return _BY_KIND[EntityKind(kind)]
    except ValueError as exc:
        raise UnknownEntityKindError(f"Unknown entity kind: {kind!r}") from exc
