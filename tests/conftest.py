"""Shared test fixtures for the OpenClaw bootstrap."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from bootstrap.config import GatewayEnvironment, Settings

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _isolate_gateway_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's shell variables out of GatewayEnvironment()."""
    for name in GatewayEnvironment.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)
    for name in Settings.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)


@pytest.fixture
def backup_root(tmp_path: Path) -> Path:
    """An empty, mounted backup root."""
    root = tmp_path / "backup"
    root.mkdir()
    return root


@pytest.fixture
def test_settings(tmp_path: Path, backup_root: Path) -> Settings:
    """Settings pointing every path into the temporary directory."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        debug=True,
        config_dir=tmp_path / "home" / ".openclaw",
        workspace_dir=tmp_path / "home" / "clawd",
        skills_dir=tmp_path / "home" / "clawd" / "skills",
        backup_dir=backup_root,
        extra_lock_files=[tmp_path / "tmp" / "openclaw-gateway.lock"],
    )


@pytest.fixture
def empty_env() -> GatewayEnvironment:
    return GatewayEnvironment(_env_file=None)  # type: ignore[call-arg]
