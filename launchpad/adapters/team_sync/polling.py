"""Interval polling for team sync on top of APScheduler."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from launchpad.adapters.team_sync.constants import POLL_JOB_ID
from launchpad.core.time_utils import UTC, utc_now

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from datetime import datetime

logger = logging.getLogger(__name__)


class SyncPoller:
    """Runs a coroutine immediately and then every ``interval_seconds``.

    A failing invocation is logged and swallowed so later ticks keep firing.
    """

    def __init__(
        self,
        job: Callable[[], Awaitable[Any]],
        *,
        interval_seconds: float,
        job_id: str = POLL_JOB_ID,
    ) -> None:
        self._job = job
        self.interval_seconds = interval_seconds
        self.job_id = job_id
        self._scheduler: AsyncIOScheduler | None = None
        self.failures = 0

    def start(self) -> None:
        """Start the scheduler; must be called from inside the running event loop."""
        if self._scheduler is not None:
            logger.warning("team_sync_poller_already_started", extra={"job_id": self.job_id})
            return

        scheduler = AsyncIOScheduler(event_loop=asyncio.get_running_loop(), timezone=UTC)
        scheduler.add_job(
            self._tick,
            trigger=IntervalTrigger(seconds=self.interval_seconds, timezone=UTC),
            id=self.job_id,
            name="Team catalogue sync",
            next_run_time=utc_now(),
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=max(1, int(self.interval_seconds)),
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info(
            "team_sync_poller_started",
            extra={"job_id": self.job_id, "interval_seconds": self.interval_seconds},
        )

    def stop(self) -> None:
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("team_sync_poller_stopped", extra={"job_id": self.job_id})

    async def _tick(self) -> None:
        try:
            await self._job()
        except Exception:
            self.failures += 1
            logger.exception(
                "team_sync_scheduled_run_failed",
                extra={"job_id": self.job_id, "failures": self.failures},
            )

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None

    @property
    def next_run_time(self) -> datetime | None:
        if self._scheduler is None:
            return None
        job = self._scheduler.get_job(self.job_id)
        return job.next_run_time if job else None
