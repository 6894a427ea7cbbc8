"""Tests for structured logging helpers."""

from __future__ import annotations

import io
import json
import logging

from loguru import logger as loguru_logger

from launchpad.core.logging_utils import (
    EnhancedJsonFormatter,
    generate_correlation_id,
    setup_json_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="launchpad.adapters.team_sync.reconciler",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="team_sync_kind_complete",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_groups_sync_counters():
    record = _record(correlation_id="abc123", kind="bookmark", synced=2, conflicts=1, job_id="x")

    payload = json.loads(EnhancedJsonFormatter(include_location=False).format(record))

    assert payload["message"] == "team_sync_kind_complete"
    assert payload["correlation_id"] == "abc123"
    assert payload["sync"] == {"kind": "bookmark", "synced": 2, "conflicts": 1}
    assert payload["extra"] == {"job_id": "x"}
    assert "module" not in payload


def test_stdlib_fallback_writes_json_lines():
    stream = io.StringIO()
    try:
        setup_json_logging("INFO", use_loguru=False, stream=stream)
        logging.getLogger("launchpad.test").info("hello_event", extra={"correlation_id": "c1"})
    finally:
        logging.getLogger().handlers.clear()

    lines = [json.loads(line) for line in stream.getvalue().splitlines()]
    event = next(line for line in lines if line["message"] == "hello_event")
    assert event["correlation_id"] == "c1"
    assert event["level"] == "INFO"


def test_loguru_sink_receives_stdlib_records():
    stream = io.StringIO()
    try:
        setup_json_logging("INFO", stream=stream)
        logging.getLogger("launchpad.test").warning("routed_event", extra={"kind": "script"})
        loguru_logger.complete()
    finally:
        logging.getLogger().handlers.clear()
        loguru_logger.remove()

    records = [json.loads(line)["record"] for line in stream.getvalue().splitlines()]
    routed = next(r for r in records if r["message"] == "routed_event")
    assert routed["level"]["name"] == "WARNING"
    assert routed["extra"]["kind"] == "script"


def test_correlation_ids_are_short_and_unique():
    ids = {generate_correlation_id() for _ in range(100)}
    assert len(ids) == 100
    assert all(len(value) == 12 for value in ids)
