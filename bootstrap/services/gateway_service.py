"""Gateway process handoff: running check, stale lock cleanup, exec."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from typing import TYPE_CHECKING

from bootstrap.config import GATEWAY_BIND, GATEWAY_PORT

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    from bootstrap.config import Settings

logger = logging.getLogger(__name__)

# Reported as set/missing at startup; values are never logged.
PASSTHROUGH_ENV_KEYS = (
    "OPENCLAW_GATEWAY_TOKEN",
    "MOLTBOT_GATEWAY_TOKEN",
    "OPENCLAW_ALLOW_INSECURE_AUTH",
    "OPENCLAW_DEV_MODE",
    "R2_ACCESS_KEY_ID",
    "R2_SECRET_ACCESS_KEY",
    "R2_BUCKET_NAME",
    "CF_ACCOUNT_ID",
    "GEMINI_API_KEY",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_OAUTH_TOKEN",
    "GITHUB_PERSONAL_ACCESS_TOKEN",
)


def report_environment(environ: Mapping[str, str]) -> dict[str, bool]:
    """Log which passthrough variables are set. Returns key -> is_set."""
    presence = {key: bool(environ.get(key)) for key in PASSTHROUGH_ENV_KEYS}
    logger.info("Env passthrough check (set/missing):")
    for key, is_set in presence.items():
        logger.info("  - %s: %s", key, "set" if is_set else "missing")
    return presence


class GatewayService:
    """Wraps the long-lived ``openclaw gateway`` process."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    @property
    def process_pattern(self) -> str:
        return f"{self.settings.gateway_executable} gateway"

    def is_running(self) -> bool:
        """True when a gateway process already exists in this container."""
        try:
            result = subprocess.run(
                ["pgrep", "-f", self.process_pattern],
                check=False,
                capture_output=True,
                text=True,
            )
        except OSError as exc:
            logger.warning("Could not check for a running gateway: %s", exc)
            return False
        return result.returncode == 0

    def clear_stale_locks(self) -> list[Path]:
        """Delete lock files left by a crashed run; returns the ones removed."""
        removed: list[Path] = []
        for lock in self.settings.lock_files:
            try:
                lock.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                logger.warning("Could not remove stale lock %s: %s", lock, exc)
                continue
            logger.info("Removed stale lock %s", lock)
            removed.append(lock)
        return removed

    def build_command(self, token: str | None) -> list[str]:
        command = [
            self.settings.gateway_executable,
            "gateway",
            "--port",
            str(GATEWAY_PORT),
            "--verbose",
            "--allow-unconfigured",
            "--bind",
            GATEWAY_BIND,
        ]
        if token:
            command += ["--token", token]
        return command

    def launch(self, token: str | None) -> None:
        """Replace this process with the gateway. Only returns if exec is mocked."""
        logger.info("Starting OpenClaw Gateway on port %d", GATEWAY_PORT)
        if token:
            logger.info("Starting gateway with token auth...")
        else:
            logger.info("Starting gateway with device pairing (no token)...")
        command = self.build_command(token)
        # exec does not flush Python buffers; pending log lines would be lost.
        for handler in logging.getLogger().handlers:
            handler.flush()
        sys.stdout.flush()
        sys.stderr.flush()
        os.execvp(command[0], command)
