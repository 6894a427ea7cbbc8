from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_SUPPORTED_SCHEMES = ("mysql", "mysql+pool", "postgres", "postgresql", "sqlite", "sqliteext")


class RemoteStoreConfig(BaseModel):
    """Connection settings for the shared team database."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(
        default="",
        validation_alias="REMOTE_DB_URL",
        description="playhouse.db_url connection URL; empty disables team sync",
    )
    env: str = Field(default="dev", validation_alias="REMOTE_DB_ENV")

    @field_validator("url", mode="before")
    @classmethod
    def _validate_url(cls, value: Any) -> str:
        url = str(value or "").strip()
        if not url:
            return ""
        scheme = url.split("://", 1)[0].lower()
        if "://" not in url or scheme not in _SUPPORTED_SCHEMES:
            msg = f"Remote database URL must use one of: {', '.join(_SUPPORTED_SCHEMES)}"
            raise ValueError(msg)
        return url

    @field_validator("env", mode="before")
    @classmethod
    def _validate_env(cls, value: Any) -> str:
        env = str(value or "dev").lower().strip()
        if env not in {"dev", "prod"}:
            msg = "Remote database environment must be 'dev' or 'prod'"
            raise ValueError(msg)
        return env

    @property
    def configured(self) -> bool:
        return bool(self.url)


class TeamSyncConfig(BaseModel):
    """Team-level catalogue synchronization configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    enabled: bool = Field(default=True, validation_alias="TEAM_SYNC_ENABLED")
    interval_seconds: int = Field(default=300, validation_alias="TEAM_SYNC_INTERVAL_SECONDS")

    @field_validator("interval_seconds", mode="before")
    @classmethod
    def _validate_interval(cls, value: Any) -> int:
        try:
            parsed = int(str(value if value not in (None, "") else 300))
        except ValueError as exc:
            msg = "Team sync interval must be a valid integer"
            raise ValueError(msg) from exc
        if parsed < 10 or parsed > 86400:
            msg = "Team sync interval must be between 10 and 86400 seconds"
            raise ValueError(msg)
        return parsed
