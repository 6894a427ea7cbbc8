"""Local SQLite session for the launch pad store.

Repositories hand synchronous peewee work to ``DatabaseSessionManager``, which
runs it on a worker thread. Writes are serialised through one asyncio lock,
and "database is locked" errors are retried with exponential backoff.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import peewee
from playhouse.sqlite_ext import SqliteExtDatabase

from launchpad.db.models import ALL_MODELS, database_proxy

logger = logging.getLogger(__name__)

_SQLITE_PRAGMAS = {
    "journal_mode": "wal",
    "synchronous": "normal",
    "foreign_keys": 1,
}
_BACKOFF_START = 0.1


def _is_lock_contention(exc: peewee.OperationalError) -> bool:
    message = str(exc).lower()
    return "locked" in message or "busy" in message


class DatabaseSessionManager:
    """Owns the SQLite handle and executes repository work off the event loop."""

    def __init__(
        self,
        path: str,
        *,
        operation_timeout: float = 30.0,
        max_retries: int = 3,
    ) -> None:
        self.path = path
        self.operation_timeout = operation_timeout
        self.max_retries = max_retries

        if path != ":memory:":
            Path(path).parent.mkdir(parents=True, exist_ok=True)
        self._db = SqliteExtDatabase(path, pragmas=_SQLITE_PRAGMAS, check_same_thread=False)
        database_proxy.initialize(self._db)
        self._writer = asyncio.Lock()

    def migrate(self) -> None:
        with self._db.connection_context(), self._db.bind_ctx(ALL_MODELS):
            self._db.create_tables(ALL_MODELS, safe=True)
        logger.info("db_migrated", extra={"path": self.path})

    def close(self) -> None:
        if not self._db.is_closed():
            self._db.close()

    def _call_bound(self, operation: Any, args: tuple, kwargs: dict, atomic: bool) -> Any:
        with self._db.connection_context(), self._db.bind_ctx(ALL_MODELS):
            if not atomic:
                return operation(*args, **kwargs)
            with self._db.atomic():
                return operation(*args, **kwargs)

    async def _dispatch(
        self, operation: Any, args: tuple, kwargs: dict, *, read_only: bool, atomic: bool
    ) -> Any:
        if read_only:
            return await asyncio.to_thread(self._call_bound, operation, args, kwargs, atomic)
        async with self._writer:
            return await asyncio.to_thread(self._call_bound, operation, args, kwargs, atomic)

    async def _safe_db_operation(
        self,
        operation: Any,
        *args: Any,
        timeout: float | None = None,
        operation_name: str = "database_operation",
        read_only: bool = False,
        atomic: bool = False,
        **kwargs: Any,
    ) -> Any:
        """Run ``operation(*args, **kwargs)`` against the local database.

        Reads bypass the writer lock (WAL allows concurrent readers). With
        ``atomic=True`` the call runs inside one transaction and any exception
        rolls it back.

        Raises:
            TimeoutError: the call did not finish within ``timeout`` seconds
            peewee.OperationalError: non-contention failure, or contention that
                outlasted ``max_retries``
        """
        limit = self.operation_timeout if timeout is None else timeout
        attempt = 0
        while True:
            try:
                return await asyncio.wait_for(
                    self._dispatch(operation, args, kwargs, read_only=read_only, atomic=atomic),
                    timeout=limit,
                )
            except TimeoutError:
                logger.error("db_operation_timeout", extra={"operation": operation_name, "timeout": limit})
                raise
            except peewee.OperationalError as exc:
                if not _is_lock_contention(exc) or attempt >= self.max_retries:
                    logger.error(
                        "db_operation_failed",
                        extra={"operation": operation_name, "retries": attempt, "error": str(exc)},
                    )
                    raise
                attempt += 1
                delay = _BACKOFF_START * 2 ** (attempt - 1)
                logger.warning(
                    "db_operation_retry",
                    extra={"operation": operation_name, "attempt": attempt, "delay": delay},
                )
                await asyncio.sleep(delay)
