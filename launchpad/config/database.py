from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class DatabaseConfig(BaseModel):
    """Limits applied to every local store operation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    operation_timeout: float = Field(
        default=30.0,
        gt=0,
        le=3600,
        validation_alias="DB_OPERATION_TIMEOUT",
        description="Seconds before a local store call is abandoned",
    )
    max_retries: int = Field(
        default=3,
        ge=0,
        le=10,
        validation_alias="DB_MAX_RETRIES",
        description="Backoff retries when SQLite reports the file as locked",
    )

    @field_validator("operation_timeout", "max_retries", mode="before")
    @classmethod
    def _blank_means_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.model_fields[info.field_name].default
        return value
