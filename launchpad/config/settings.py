from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, SettingsConfigDict

from .database import DatabaseConfig
from .integrations import RemoteStoreConfig, TeamSyncConfig

logger = logging.getLogger(__name__)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_DEFAULT_DB_PATH = "data/launchpad.db"


class RuntimeConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    db_path: str = Field(default=_DEFAULT_DB_PATH, validation_alias="DB_PATH")
    log_level: LogLevel = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return str(value).strip().upper() if value else "INFO"

    @field_validator("db_path", mode="before")
    @classmethod
    def _default_blank_path(cls, value: Any) -> str:
        return str(value or "").strip() or _DEFAULT_DB_PATH

    @field_validator("log_file", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> str | None:
        text = str(value).strip() if value is not None else ""
        return text or None


@dataclass(frozen=True)
class AppConfig:
    runtime: RuntimeConfig
    database: DatabaseConfig
    remote: RemoteStoreConfig
    team_sync: TeamSyncConfig


def _env_names(field: FieldInfo) -> list[str]:
    alias = field.validation_alias
    if isinstance(alias, AliasChoices):
        names = [choice for choice in alias.choices if isinstance(choice, str)]
    elif isinstance(alias, str):
        names = [alias]
    else:
        names = []
    if field.alias:
        names.append(field.alias)
    return names


def _collect_section(section: type[BaseModel], source: Mapping[str, Any]) -> dict[str, Any]:
    """Pick the flat variables that belong to ``section``, keyed by field name."""
    values: dict[str, Any] = {}
    for name, field in section.model_fields.items():
        for env_name in _env_names(field):
            if env_name in source:
                values[name] = source[env_name]
                break
    return values


class Settings(BaseSettings):
    """Process settings, read from flat variable names into nested sections.

    ``DB_PATH`` lands in ``runtime.db_path``, ``REMOTE_DB_URL`` in
    ``remote.url`` and so on, following each field's validation alias.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        populate_by_name=True,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    remote: RemoteStoreConfig = Field(default_factory=RemoteStoreConfig)
    team_sync: TeamSyncConfig = Field(default_factory=TeamSyncConfig)

    @model_validator(mode="before")
    @classmethod
    def _fold_flat_env(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        # Explicit keyword arguments shadow the process environment.
        source = {**os.environ, **data}
        folded = dict(data)
        for name, field in cls.model_fields.items():
            section = field.annotation
            if not (isinstance(section, type) and issubclass(section, BaseModel)):
                continue
            values = _collect_section(section, source)
            if not values:
                continue
            given = folded.get(name)
            folded[name] = {**values, **given} if isinstance(given, dict) else values
        return folded

    def as_app_config(self) -> AppConfig:
        return AppConfig(
            runtime=self.runtime,
            database=self.database,
            remote=self.remote,
            team_sync=self.team_sync,
        )


def load_config(**overrides: Any) -> AppConfig:
    """Build the application config.

    ``overrides`` take flat variable names, e.g. ``load_config(DB_PATH="x.db")``,
    and take precedence over the environment and ``.env``.

    Raises:
        RuntimeError: when any section fails validation.
    """
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        raise RuntimeError(f"Configuration validation failed: {exc}") from exc

    if not settings.remote.configured:
        logger.info("remote_store_not_configured")
    return settings.as_app_config()
