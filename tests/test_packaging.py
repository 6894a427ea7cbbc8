"""Checks on the package metadata."""

from __future__ import annotations

import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def _project() -> dict:
    with (ROOT / "pyproject.toml").open("rb") as fh:
        return tomllib.load(fh)["project"]


def test_peewee_stays_on_3x():
    # playhouse.sqlite_ext.SqliteExtDatabase is gone in peewee 4.
    assert "peewee>=3.17,<4" in _project()["dependencies"]


def test_readme_is_a_real_readme():
    readme = _project()["readme"]
    assert readme == "README.md"
    assert (ROOT / readme).read_text(encoding="utf-8").startswith("# launchpad-team-sync")
