"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from leadcrawl.core.activity_log import ActivityLog
from leadcrawl.core.config import Settings


@pytest.fixture
def activity_log(tmp_path: Path) -> ActivityLog:
    """Activity log writing into a temporary directory."""
    return ActivityLog(tmp_path / "logs")


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    monkeypatch.chdir(tmp_path)
    return Settings(
        activity_log_dir=tmp_path / "logs",
        log_file=tmp_path / "leadcrawl.log",
    )
