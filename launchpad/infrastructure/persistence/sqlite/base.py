from typing import Any

from launchpad.db.session import DatabaseSessionManager


class SqliteBaseRepository:
    """Shared plumbing for repositories backed by the local SQLite session."""

    def __init__(self, session_manager: DatabaseSessionManager) -> None:
        self._session = session_manager

    async def _read(self, operation: Any, *args: Any, operation_name: str) -> Any:
        return await self._session._safe_db_operation(
            operation, *args, operation_name=operation_name, read_only=True
        )

    async def _write(
        self, operation: Any, *args: Any, operation_name: str, atomic: bool = False
    ) -> Any:
        return await self._session._safe_db_operation(
            operation, *args, operation_name=operation_name, atomic=atomic
        )
