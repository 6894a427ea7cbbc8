"""Protocol definitions (ports) for team sync.

Keeping these as Protocols isolates the reconciler and orchestrator from the
concrete SQLite and shared-database implementations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

    from launchpad.adapters.team_sync.entity_kinds import EntityKind

T = TypeVar("T")


class LocalTransaction(Protocol):
    """Synchronous store view handed to ``run_in_transaction`` callbacks."""

    def insert(self, kind: EntityKind | str, fields: dict[str, Any]) -> str: ...

    def update(self, kind: EntityKind | str, record_id: str, fields: dict[str, Any]) -> None: ...


class LocalStoreProtocol(Protocol):
    async def get_all_team_level(self, kind: EntityKind | str) -> list[dict[str, Any]]: ...

    async def get(self, kind: EntityKind | str, record_id: str) -> dict[str, Any] | None: ...

    async def insert(self, kind: EntityKind | str, fields: dict[str, Any]) -> str: ...

    async def update(
        self, kind: EntityKind | str, record_id: str, fields: dict[str, Any]
    ) -> None: ...

    async def run_in_transaction(self, fn: Callable[[LocalTransaction], T]) -> T: ...

    async def get_setting(self, key: str) -> str | None: ...

    async def set_setting(self, key: str, value: str) -> None: ...


class RemoteStoreProtocol(Protocol):
    def is_connected(self) -> bool: ...

    async def query(self, sql: str, params: list[Any] | None = None) -> list[dict[str, Any]]: ...
