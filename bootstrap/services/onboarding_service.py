"""Onboarding: let the gateway CLI write a first config when no backup provided one."""

from __future__ import annotations

import logging
import subprocess
from typing import TYPE_CHECKING

from bootstrap.config import GATEWAY_BIND, GATEWAY_PORT

if TYPE_CHECKING:
    from bootstrap.config import GatewayEnvironment, Settings

logger = logging.getLogger(__name__)


def build_auth_args(env: GatewayEnvironment) -> list[str]:
    """Pick the onboarding auth choice: AI Gateway, then Anthropic, then OpenAI."""
    if (
        env.cloudflare_ai_gateway_api_key
        and env.cf_ai_gateway_account_id
        and env.cf_ai_gateway_gateway_id
    ):
        return [
            "--auth-choice",
            "cloudflare-ai-gateway-api-key",
            "--cloudflare-ai-gateway-account-id",
            env.cf_ai_gateway_account_id,
            "--cloudflare-ai-gateway-gateway-id",
            env.cf_ai_gateway_gateway_id,
            "--cloudflare-ai-gateway-api-key",
            env.cloudflare_ai_gateway_api_key,
        ]
    if env.anthropic_api_key:
        return ["--auth-choice", "apiKey", "--anthropic-api-key", env.anthropic_api_key]
    if env.openai_api_key:
        return ["--auth-choice", "openai-api-key", "--openai-api-key", env.openai_api_key]
    return []


class OnboardingService:
    """Wraps ``openclaw onboard`` in non-interactive mode."""

    def __init__(self, settings: Settings, env: GatewayEnvironment) -> None:
        self.settings = settings
        self.env = env

    def build_command(self) -> list[str]:
        return [
            self.settings.gateway_executable,
            "onboard",
            "--non-interactive",
            "--accept-risk",
            "--mode",
            "local",
            *build_auth_args(self.env),
            "--gateway-port",
            str(GATEWAY_PORT),
            "--gateway-bind",
            GATEWAY_BIND,
            "--skip-channels",
            "--skip-skills",
            "--skip-health",
        ]

    def onboard_if_needed(self) -> bool:
        """Run onboarding when no config document exists. Returns True if it succeeded.

        Failure is not fatal: the patch step still writes a minimal config.
        """
        if self.settings.config_file.exists():
            logger.info("Using existing config")
            return False

        logger.info(
            "No existing config found, running %s onboard...", self.settings.gateway_executable
        )
        try:
            result = subprocess.run(self.build_command(), check=False)
        except OSError as exc:
            logger.error("Onboard could not start: %s; continuing with minimal config patch", exc)
            return False
        if result.returncode != 0:
            logger.warning(
                "Onboard failed with exit code %d; continuing with minimal config patch",
                result.returncode,
            )
            return False
        logger.info("Onboard completed")
        return True
