"""Peewee models describing the shared team tables.

They are only used to create the schema; sync reads and writes go through
``SharedStoreClient.query`` with plain SQL.
"""

from __future__ import annotations

import peewee

_CURRENT_TIMESTAMP = peewee.SQL("DEFAULT CURRENT_TIMESTAMP")


class LongTextField(peewee.TextField):
    """LONGTEXT on MySQL; other backends map it back to TEXT."""

    field_type = "LONGTEXT"


class SharedItem(peewee.Model):
    id = peewee.CharField(primary_key=True, max_length=36)
    title = peewee.CharField(max_length=255)
    category = peewee.CharField(max_length=100, null=True, index=True)
    is_team_level = peewee.BooleanField(index=True, constraints=[peewee.SQL("DEFAULT FALSE")])
    created_by = peewee.CharField(max_length=255, null=True, index=True)
    updated_by = peewee.CharField(max_length=255, null=True)
    created_at = peewee.DateTimeField(constraints=[_CURRENT_TIMESTAMP])
    updated_at = peewee.DateTimeField(constraints=[_CURRENT_TIMESTAMP])
    sync_hash = peewee.CharField(max_length=64, null=True)

    class Meta:
        legacy_table_names = False


class SharedBookmark(SharedItem):
    url = peewee.TextField()
    favicon = LongTextField(null=True)

    class Meta:
        table_name = "bookmarks"


class SharedExecutable(SharedItem):
    executable_path = peewee.TextField()
    parameters = peewee.TextField(null=True)
    icon = LongTextField(null=True)

    class Meta:
        table_name = "executables"


class SharedScript(SharedItem):
    script_content = LongTextField()
    script_type = peewee.CharField(
        max_length=16,
        index=True,
        constraints=[peewee.Check("script_type IN ('powershell', 'cmd')")],
    )
    icon = LongTextField(null=True)

    class Meta:
        table_name = "scripts"


SHARED_MODELS: tuple[type[SharedItem], ...] = (SharedBookmark, SharedExecutable, SharedScript)
