"""Tests for the gateway process handoff."""

from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest

from bootstrap.services.gateway_service import (
    PASSTHROUGH_ENV_KEYS,
    GatewayService,
    report_environment,
)

if TYPE_CHECKING:
    from bootstrap.config import Settings


@pytest.fixture
def gateway(test_settings: Settings) -> GatewayService:
    return GatewayService(test_settings)


class TestRunningCheck:
    def test_running_when_pgrep_matches(self, gateway: GatewayService) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="123\n")
        with patch(
            "bootstrap.services.gateway_service.subprocess.run", return_value=completed
        ) as mock_run:
            assert gateway.is_running() is True
        assert mock_run.call_args.args[0] == ["pgrep", "-f", "openclaw gateway"]

    def test_not_running(self, gateway: GatewayService) -> None:
        completed = subprocess.CompletedProcess(args=[], returncode=1, stdout="")
        with patch("bootstrap.services.gateway_service.subprocess.run", return_value=completed):
            assert gateway.is_running() is False

    def test_missing_pgrep_assumes_not_running(self, gateway: GatewayService) -> None:
        with patch(
            "bootstrap.services.gateway_service.subprocess.run",
            side_effect=FileNotFoundError("pgrep"),
        ):
            assert gateway.is_running() is False


class TestStaleLocks:
    def test_removes_existing_locks(self, gateway: GatewayService, test_settings: Settings) -> None:
        for lock in test_settings.lock_files:
            lock.parent.mkdir(parents=True, exist_ok=True)
            lock.write_text("pid")

        removed = gateway.clear_stale_locks()

        assert removed == test_settings.lock_files
        assert not any(lock.exists() for lock in test_settings.lock_files)

    def test_missing_locks_are_fine(self, gateway: GatewayService) -> None:
        assert gateway.clear_stale_locks() == []

    def test_config_dir_lock_is_included(self, test_settings: Settings) -> None:
        assert test_settings.config_dir / "gateway.lock" in test_settings.lock_files


class TestLaunch:
    def test_command_without_token(self, gateway: GatewayService) -> None:
        assert gateway.build_command(None) == [
            "openclaw",
            "gateway",
            "--port",
            "18789",
            "--verbose",
            "--allow-unconfigured",
            "--bind",
            "lan",
        ]

    def test_command_with_token(self, gateway: GatewayService) -> None:
        assert gateway.build_command("secret")[-2:] == ["--token", "secret"]

    def test_launch_execs_gateway(self, gateway: GatewayService) -> None:
        with patch("bootstrap.services.gateway_service.os.execvp") as mock_exec:
            gateway.launch("secret")
        mock_exec.assert_called_once_with("openclaw", gateway.build_command("secret"))


class TestEnvironmentReport:
    def test_reports_presence_without_values(self, caplog: pytest.LogCaptureFixture) -> None:
        environ = {"OPENCLAW_GATEWAY_TOKEN": "super-secret", "R2_BUCKET_NAME": ""}
        with caplog.at_level(logging.INFO, logger="bootstrap.services.gateway_service"):
            presence = report_environment(environ)

        assert presence["OPENCLAW_GATEWAY_TOKEN"] is True
        assert presence["R2_BUCKET_NAME"] is False
        assert set(presence) == set(PASSTHROUGH_ENV_KEYS)
        assert "OPENCLAW_GATEWAY_TOKEN: set" in caplog.text
        assert "super-secret" not in caplog.text
