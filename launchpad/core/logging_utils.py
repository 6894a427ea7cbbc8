"""Structured logging for the sync engine.

Call sites use stdlib ``logging`` with snake_case event names and ``extra=``
fields. ``setup_json_logging`` routes those records into loguru's serialised
sinks, or into ``EnhancedJsonFormatter`` when loguru is switched off.
"""

from __future__ import annotations

import json
import logging
import sys
import uuid
from datetime import UTC, datetime
from typing import Any, TextIO

from loguru import logger as loguru_logger

# Attribute names present on every LogRecord; everything else came from ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Counters emitted by reconciler and orchestrator events.
_SYNC_FIELDS = frozenset({"kind", "synced", "conflicts", "errors", "items_synced", "duration"})


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


def _jsonable(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class EnhancedJsonFormatter(logging.Formatter):
    """One JSON object per line.

    Sync counters are grouped under ``sync``; ``correlation_id`` stays at the
    top level so one run can be followed across modules.
    """

    def __init__(self, include_location: bool = True) -> None:
        super().__init__()
        self.include_location = include_location

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.include_location:
            payload["location"] = f"{record.module}:{record.funcName}:{record.lineno}"
        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "traceback": self.formatException(record.exc_info),
            }

        sync: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in _extra_fields(record).items():
            if key == "correlation_id":
                payload[key] = value
            elif key in _SYNC_FIELDS:
                sync[key] = value
            elif key not in payload:
                extra[key] = value
        if sync:
            payload["sync"] = sync
        if extra:
            payload["extra"] = extra

        return json.dumps(payload, ensure_ascii=False, default=_jsonable)


class InterceptHandler(logging.Handler):
    """Forward stdlib records, with their ``extra=`` fields bound, to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: int | str = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        loguru_logger.bind(**_extra_fields(record)).opt(depth=6, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_json_logging(
    level: str = "INFO",
    *,
    use_loguru: bool = True,
    log_file: str | None = None,
    max_file_size: str = "50 MB",
    retention: str = "14 days",
    stream: TextIO | None = None,
) -> None:
    """Install JSON logging on the root logger.

    Args:
        level: Minimum level name
        use_loguru: Route records through loguru sinks instead of stdlib handlers
        log_file: Also write to this file, rotated by size
        max_file_size: Rotation threshold (loguru size string)
        retention: How long rotated files are kept (loguru duration string)
        stream: Console stream (default: stdout)
    """
    level = level.upper()
    stream = stream or sys.stdout
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.setLevel(getattr(logging, level, logging.INFO))

    if not use_loguru:
        handlers: list[logging.Handler] = [logging.StreamHandler(stream)]
        if log_file:
            from logging.handlers import RotatingFileHandler

            handlers.append(RotatingFileHandler(log_file, maxBytes=50 * 1024 * 1024, backupCount=5))
        for handler in handlers:
            handler.setFormatter(EnhancedJsonFormatter())
            root.addHandler(handler)
        logging.getLogger(__name__).info(
            "json_logging_initialized", extra={"level": level, "log_file": log_file}
        )
        return

    loguru_logger.remove()
    loguru_logger.add(stream, level=level, serialize=True, enqueue=True)
    if log_file:
        loguru_logger.add(
            log_file,
            level=level,
            serialize=True,
            enqueue=True,
            rotation=max_file_size,
            retention=retention,
            compression="gz",
        )
    root.addHandler(InterceptHandler())
    loguru_logger.info("json_logging_initialized", level=level, log_file=log_file)


def generate_correlation_id() -> str:
    """Short id tying together the log lines of one sync run."""
    return uuid.uuid4().hex[:12]
