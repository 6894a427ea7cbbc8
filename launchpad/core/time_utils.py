from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

DB_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


def utc_now() -> datetime:
    return datetime.now(UTC)


def _as_utc(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


def ensure_datetime(value: Any) -> datetime | None:
    """Coerce a stored timestamp into an aware datetime, or ``None``.

    Drivers disagree on what a DATETIME column comes back as: SQLite may give
    the text it was written with, MySQL gives naive datetimes. Naive values are
    read as UTC. Unparseable text and foreign types yield ``None``.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if not isinstance(value, str):
        logger.warning(
            "timestamp_unsupported_type",
            extra={"type": type(value).__name__, "value": repr(value)},
        )
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("timestamp_unparseable", extra={"value": repr(value)})
        return None
    return _as_utc(parsed)


def to_db_timestamp(value: Any) -> str | None:
    """Naive UTC text that every supported dialect accepts for DATETIME."""
    dt = ensure_datetime(value)
    if dt is None:
        return None
    return dt.astimezone(UTC).replace(tzinfo=None).strftime(DB_TIMESTAMP_FORMAT)


def to_iso(value: datetime) -> str:
    return _as_utc(value).astimezone(UTC).isoformat()
