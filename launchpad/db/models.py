"""Peewee ORM models for the local launch pad database."""

from __future__ import annotations

import datetime as _dt
import uuid
from typing import Any

import peewee

from launchpad.core.time_utils import UTC

# A proxy that will be initialised with the concrete database instance at runtime.
database_proxy: peewee.Database = peewee.DatabaseProxy()


def _utcnow() -> _dt.datetime:
    """Naive UTC; DateTimeField values are stored without an offset."""
    return _dt.datetime.now(UTC).replace(tzinfo=None)


def _new_id() -> str:
    return str(uuid.uuid4())


class BaseModel(peewee.Model):
    """Base Peewee model bound to the lazily initialised database proxy."""

    def save(self, *args: Any, **kwargs: Any) -> int:
        """Keep updated_at current on every ORM save.

        Sync code writes remote timestamps with update queries, which bypass this.
        """
        if hasattr(self, "updated_at"):
            self.updated_at = _utcnow()
        return super().save(*args, **kwargs)

    class Meta:
        database = database_proxy
        legacy_table_names = False


class LaunchItem(BaseModel):
    """Columns shared by every item that can be promoted to team level."""

    id = peewee.CharField(primary_key=True, max_length=36, default=_new_id)
    title = peewee.CharField(max_length=255)
    category = peewee.CharField(max_length=100, null=True)
    is_team_level = peewee.BooleanField(default=False, index=True)
    is_personal = peewee.BooleanField(default=True)
    created_by = peewee.CharField(max_length=255, null=True)
    updated_by = peewee.CharField(max_length=255, null=True)
    created_at = peewee.DateTimeField(default=_utcnow)
    updated_at = peewee.DateTimeField(default=_utcnow)
    sync_hash = peewee.CharField(max_length=64, null=True)
    last_sync_at = peewee.DateTimeField(null=True)


class Bookmark(LaunchItem):
    url = peewee.TextField()
    favicon = peewee.TextField(null=True)

    class Meta:
        table_name = "bookmarks"


class Executable(LaunchItem):
    executable_path = peewee.TextField()
    parameters = peewee.TextField(null=True)
    icon = peewee.TextField(null=True)

    class Meta:
        table_name = "executables"


class Script(LaunchItem):
    script_content = peewee.TextField()
    script_type = peewee.CharField(
        max_length=16, constraints=[peewee.Check("script_type IN ('powershell', 'cmd')")]
    )
    icon = peewee.TextField(null=True)

    class Meta:
        table_name = "scripts"


class AppSetting(BaseModel):
    key = peewee.CharField(primary_key=True)
    value = peewee.TextField()
    updated_at = peewee.DateTimeField(default=_utcnow)

    class Meta:
        table_name = "app_settings"


ALL_MODELS: tuple[type[BaseModel], ...] = (Bookmark, Executable, Script, AppSetting)

