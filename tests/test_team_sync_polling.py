"""Tests for the APScheduler-backed sync poller."""

from __future__ import annotations

import asyncio
import unittest
from unittest.mock import AsyncMock

from launchpad.adapters.team_sync.polling import SyncPoller


class TestSyncPoller(unittest.IsolatedAsyncioTestCase):
    async def _wait_for(self, predicate, timeout: float = 2.0) -> None:
        deadline = asyncio.get_running_loop().time() + timeout
        while not predicate():
            if asyncio.get_running_loop().time() > deadline:
                self.fail("condition not reached in time")
            await asyncio.sleep(0.02)

    async def test_first_run_is_immediate(self) -> None:
        job = AsyncMock()
        poller = SyncPoller(job, interval_seconds=3600)
        poller.start()
        try:
            await self._wait_for(lambda: job.await_count >= 1)
            self.assertTrue(poller.is_running)
        finally:
            poller.stop()
        self.assertFalse(poller.is_running)
        self.assertIsNone(poller.next_run_time)

    async def test_failing_job_is_logged_and_counted(self) -> None:
        job = AsyncMock(side_effect=RuntimeError("remote down"))
        poller = SyncPoller(job, interval_seconds=3600)

        with self.assertLogs("launchpad.adapters.team_sync.polling", level="ERROR") as logs:
            await poller._tick()
            await poller._tick()

        self.assertEqual(poller.failures, 2)
        self.assertIn("team_sync_scheduled_run_failed", logs.output[0])

    async def test_scheduler_keeps_firing_after_failed_runs(self) -> None:
        job = AsyncMock(side_effect=RuntimeError("remote down"))
        poller = SyncPoller(job, interval_seconds=0.2)

        with self.assertLogs("launchpad.adapters.team_sync.polling", level="ERROR"):
            poller.start()
            try:
                await self._wait_for(lambda: job.await_count >= 3, timeout=5.0)
                self.assertTrue(poller.is_running)
            finally:
                poller.stop()

        self.assertGreaterEqual(job.await_count, 3)
        self.assertGreaterEqual(poller.failures, 3)

    async def test_start_and_stop_are_idempotent(self) -> None:
        job = AsyncMock()
        poller = SyncPoller(job, interval_seconds=3600, job_id="test_job")
        poller.start()
        poller.start()
        try:
            await self._wait_for(lambda: job.await_count >= 1)
            await asyncio.sleep(0.1)
            self.assertEqual(job.await_count, 1)
        finally:
            poller.stop()
            poller.stop()
