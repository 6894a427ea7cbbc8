"""Client for the shared team database.

Any backend ``playhouse.db_url`` understands works; production installs point
``REMOTE_DB_URL`` at MySQL. Blocking driver calls run in worker threads and
each call borrows a connection for its own duration.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

import peewee
from playhouse import db_url

from launchpad.adapters.team_sync.constants import REMOTE_ENV_SETTING_KEY
from launchpad.adapters.team_sync.errors import (
    RemoteNotConnectedError,
    RemoteQueryError,
    RemoteStoreError,
)
from launchpad.infrastructure.persistence.remote.models import SHARED_MODELS

if TYPE_CHECKING:
    from launchpad.adapters.team_sync.protocols import LocalStoreProtocol

logger = logging.getLogger(__name__)

_READ_PREFIXES = ("select", "show", "with", "pragma", "explain")


def _redact(url: str) -> str:
    """Scheme, host and database only; never credentials."""
    parts = urlsplit(url)
    host = parts.hostname or ""
    if parts.port:
        host = f"{host}:{parts.port}"
    return f"{parts.scheme}://{host}{parts.path}"


def _is_read(sql: str) -> bool:
    return sql.lstrip().lower().startswith(_READ_PREFIXES)


class SharedStoreClient:
    """Remote store over a peewee database opened from a URL.

    The client counts as connected from a successful ``connect`` until
    ``close``; a failing query does not reset it.
    """

    def __init__(self, url: str, *, env: str = "dev") -> None:
        self.url = url
        self.env = env
        self._database: peewee.Database | None = None

    def _open_database(self) -> peewee.Database:
        kwargs: dict[str, Any] = {}
        if urlsplit(self.url).scheme.startswith("postgres"):
            kwargs["field_types"] = {"LONGTEXT": "TEXT"}
        return db_url.connect(self.url, **kwargs)

    @staticmethod
    def _ping(database: peewee.Database) -> None:
        with database.connection_context():
            database.execute_sql("SELECT 1").fetchone()

    async def connect(self, *, local: LocalStoreProtocol | None = None) -> None:
        """Open the shared database and verify it answers ``SELECT 1``.

        Raises:
            RemoteStoreError: If the database cannot be opened or does not answer.
        """
        if self._database is not None:
            await self.close()

        try:
            database = self._open_database()
            await asyncio.to_thread(self._ping, database)
        except (peewee.PeeweeException, OSError, RuntimeError, ValueError) as exc:
            logger.error(
                "remote_store_connect_failed",
                extra={"url": _redact(self.url), "env": self.env, "error": str(exc)},
            )
            msg = f"Failed to connect to shared store: {exc}"
            raise RemoteStoreError(msg) from exc

        self._database = database
        logger.info("remote_store_connected", extra={"url": _redact(self.url), "env": self.env})

        if local is not None:
            await local.set_setting(REMOTE_ENV_SETTING_KEY, self.env)

    async def test_connection(self) -> bool:
        if self._database is None:
            return False
        try:
            await asyncio.to_thread(self._ping, self._database)
        except peewee.PeeweeException as exc:
            logger.warning("remote_store_test_failed", extra={"error": str(exc)})
            return False
        return True

    async def close(self) -> None:
        database, self._database = self._database, None
        if database is None:
            return
        try:
            if not database.is_closed():
                database.close()
            if hasattr(database, "close_all"):
                database.close_all()
        except peewee.PeeweeException as exc:
            logger.warning("remote_store_close_failed", extra={"error": str(exc)})
        logger.info("remote_store_closed", extra={"url": _redact(self.url)})

    def is_connected(self) -> bool:
        return self._database is not None

    async def query(self, sql: str, params: list[Any] | None = None) -> list[dict[str, Any]]:
        """Run one statement with ``?`` placeholders.

        Reads return rows as dicts; writes are committed and return ``[]``.

        Raises:
            RemoteNotConnectedError: If ``connect`` has not succeeded.
            RemoteQueryError: If the database rejects the statement.
        """
        database = self._database
        if database is None:
            raise RemoteNotConnectedError

        statement = sql.replace("?", database.param)
        values = list(params or [])
        is_read = _is_read(sql)

        def _run() -> list[dict[str, Any]]:
            with database.connection_context():
                if is_read:
                    cursor = database.execute_sql(statement, values)
                    columns = [column[0] for column in cursor.description or ()]
                    return [dict(zip(columns, row, strict=True)) for row in cursor.fetchall()]
                with database.atomic():
                    database.execute_sql(statement, values)
                return []

        try:
            return await asyncio.to_thread(_run)
        except (peewee.DatabaseError, peewee.InterfaceError) as exc:
            logger.warning("remote_query_failed", extra={"sql": sql, "error": str(exc)})
            raise RemoteQueryError(str(exc), sql=sql) from exc

    async def initialize_tables(self) -> None:
        """Create the shared team tables and their indexes if missing."""
        database = self._database
        if database is None:
            raise RemoteNotConnectedError

        def _create() -> None:
            with database.connection_context(), database.bind_ctx(SHARED_MODELS):
                database.create_tables(SHARED_MODELS, safe=True)

        try:
            await asyncio.to_thread(_create)
        except peewee.DatabaseError as exc:
            msg = f"Failed to initialize shared tables: {exc}"
            raise RemoteQueryError(msg) from exc
        logger.info(
            "remote_tables_initialized",
            extra={"tables": [model._meta.table_name for model in SHARED_MODELS]},
        )
