"""Tests for the launchpad-sync command line."""

from __future__ import annotations

import os
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from launchpad.cli import team_sync


class TestTeamSyncCli(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = Path(tempfile.mkdtemp())
        self.env = {
            "DB_PATH": str(self.tmp / "local.db"),
            "REMOTE_DB_URL": f"sqlite:///{self.tmp / 'shared.db'}",
            "LOG_LEVEL": "WARNING",
        }
        patcher = patch.object(team_sync, "setup_json_logging")
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        shutil.rmtree(self.tmp, ignore_errors=True)

    def _main(self, *argv: str, env: dict[str, str] | None = None) -> int:
        with patch.dict(os.environ, env if env is not None else self.env, clear=True):
            return team_sync.main(list(argv))

    def test_init_remote_then_run_and_status(self) -> None:
        self.assertEqual(self._main("init-remote"), 0)
        self.assertEqual(self._main("run"), 0)
        with patch("builtins.print") as printed:
            self.assertEqual(self._main("status"), 0)
        lines = [call.args[0] for call in printed.call_args_list]
        self.assertFalse(any(line.endswith("never") for line in lines))

    def test_preview_after_init(self) -> None:
        self.assertEqual(self._main("init-remote"), 0)
        self.assertEqual(self._main("preview"), 0)

    def test_run_fails_when_remote_unconfigured(self) -> None:
        env = {"DB_PATH": str(self.tmp / "local.db")}
        self.assertEqual(self._main("run", env=env), 1)

    def test_run_reports_missing_shared_tables(self) -> None:
        self.assertEqual(self._main("run"), 1)

    def test_status_without_remote(self) -> None:
        env = {"DB_PATH": str(self.tmp / "local.db")}
        self.assertEqual(self._main("status", env=env), 0)
