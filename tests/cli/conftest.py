"""Shared fixtures for CLI tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from propcontract.config import loader


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty project directory as cwd, isolated from user config and env."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    monkeypatch.setattr(loader, "GLOBAL_CONFIG_PATH", tmp_path / "global.yaml")
    for key in list(os.environ):
        if key.upper().startswith("PROPCONTRACT__"):
            monkeypatch.delenv(key)
    return project
