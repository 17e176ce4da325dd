"""Config patch: overlay deployment invariants and env-provided credentials on openclaw.json."""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from bootstrap.config import GATEWAY_MODE, GATEWAY_PORT, TRUSTED_PROXIES
from bootstrap.filesystem.config_document import load_config_document, write_config_document

if TYPE_CHECKING:
    from pathlib import Path

    from bootstrap.config import GatewayEnvironment

logger = logging.getLogger(__name__)

AI_GATEWAY_BASE = "https://gateway.ai.cloudflare.com/v1"
WORKERS_AI_BASE = "https://api.cloudflare.com/client/v4/accounts"
WORKERS_AI_PROVIDER = "workers-ai"
PROVIDER_PREFIX = "cf-ai-gw-"
DEFAULT_CONTEXT_WINDOW = 131072
DEFAULT_MAX_TOKENS = 8192


@dataclass(frozen=True)
class ProviderOverride:
    """A model provider entry derived from ``CF_AI_GATEWAY_MODEL``."""

    gateway_provider: str
    model_id: str
    base_url: str
    api_key: str

    @property
    def provider_name(self) -> str:
        return f"{PROVIDER_PREFIX}{self.gateway_provider}"

    @property
    def api(self) -> str:
        if self.gateway_provider == "anthropic":
            return "anthropic-messages"
        return "openai-completions"

    def provider_entry(self) -> dict[str, Any]:
        return {
            "baseUrl": self.base_url,
            "apiKey": self.api_key,
            "api": self.api,
            "models": [
                {
                    "id": self.model_id,
                    "name": self.model_id,
                    "contextWindow": DEFAULT_CONTEXT_WINDOW,
                    "maxTokens": DEFAULT_MAX_TOKENS,
                }
            ],
        }


def _section(parent: dict[str, Any], key: str) -> dict[str, Any]:
    """Return ``parent[key]`` as a dict, replacing missing or non-object values."""
    value = parent.get(key)
    if not isinstance(value, dict):
        value = {}
        parent[key] = value
    return value


def resolve_provider_override(env: GatewayEnvironment) -> ProviderOverride | None:
    """Derive the AI Gateway provider override, or None when not configured.

    Two endpoint conventions are supported: the AI Gateway URL when account
    and gateway ids are set, and the direct Workers AI URL for the
    ``workers-ai`` provider with only an account id.
    """
    raw = env.cf_ai_gateway_model
    if not raw:
        return None
    gateway_provider, sep, model_id = raw.partition("/")
    if not sep or not gateway_provider or not model_id:
        logger.warning("CF_AI_GATEWAY_MODEL must look like provider/model-id, got %r", raw)
        return None

    base_url: str | None = None
    if env.cf_ai_gateway_account_id and env.cf_ai_gateway_gateway_id:
        base_url = (
            f"{AI_GATEWAY_BASE}/{env.cf_ai_gateway_account_id}"
            f"/{env.cf_ai_gateway_gateway_id}/{gateway_provider}"
        )
        if gateway_provider == WORKERS_AI_PROVIDER:
            base_url += "/v1"
    elif gateway_provider == WORKERS_AI_PROVIDER and env.cf_account_id:
        base_url = f"{WORKERS_AI_BASE}/{env.cf_account_id}/ai/v1"

    if not base_url or not env.cloudflare_ai_gateway_api_key:
        logger.warning(
            "CF_AI_GATEWAY_MODEL set but missing required config "
            "(account ID, gateway ID, or API key)"
        )
        return None

    return ProviderOverride(
        gateway_provider=gateway_provider,
        model_id=model_id,
        base_url=base_url,
        api_key=env.cloudflare_ai_gateway_api_key,
    )


def _patch_gateway(config: dict[str, Any], env: GatewayEnvironment) -> None:
    gateway = _section(config, "gateway")
    gateway["port"] = GATEWAY_PORT
    gateway["mode"] = GATEWAY_MODE
    gateway["trustedProxies"] = list(TRUSTED_PROXIES)

    if env.openclaw_gateway_token:
        _section(gateway, "auth")["token"] = env.openclaw_gateway_token

    _section(gateway, "controlUi")["allowInsecureAuth"] = env.insecure_auth_allowed


def _patch_model_override(config: dict[str, Any], env: GatewayEnvironment) -> None:
    override = resolve_provider_override(env)
    if override is None:
        return
    providers = _section(_section(config, "models"), "providers")
    providers[override.provider_name] = override.provider_entry()
    defaults = _section(_section(config, "agents"), "defaults")
    defaults["model"] = {"primary": f"{override.provider_name}/{override.model_id}"}
    logger.info(
        "AI Gateway model override: provider=%s model=%s via %s",
        override.provider_name,
        override.model_id,
        override.base_url,
    )


def _patch_channels(config: dict[str, Any], env: GatewayEnvironment) -> None:
    # Channel objects are replaced wholesale: keys from older backups must not
    # survive, the gateway rejects unknown channel keys.
    channels = _section(config, "channels")

    if env.telegram_bot_token:
        telegram: dict[str, Any] = {
            "botToken": env.telegram_bot_token,
            "enabled": True,
            "dmPolicy": env.telegram_dm_policy,
        }
        if env.telegram_dm_allow_from:
            telegram["allowFrom"] = env.telegram_dm_allow_from.split(",")
        elif env.telegram_dm_policy == "open":
            telegram["allowFrom"] = ["*"]
        channels["telegram"] = telegram

    if env.discord_bot_token:
        dm: dict[str, Any] = {"policy": env.discord_dm_policy}
        if env.discord_dm_policy == "open":
            dm["allowFrom"] = ["*"]
        channels["discord"] = {
            "token": env.discord_bot_token,
            "enabled": True,
            "dm": dm,
        }

    if env.slack_bot_token and env.slack_app_token:
        channels["slack"] = {
            "botToken": env.slack_bot_token,
            "appToken": env.slack_app_token,
            "enabled": True,
        }


def patch(document: dict[str, Any], env: GatewayEnvironment) -> dict[str, Any]:
    """Return a patched copy of ``document``; the input is left untouched."""
    config = copy.deepcopy(document)
    _patch_gateway(config, env)
    _patch_model_override(config, env)
    _patch_channels(config, env)
    return config


def patch_config_file(path: Path, env: GatewayEnvironment) -> dict[str, Any]:
    """Read, patch and overwrite the configuration document at ``path``."""
    logger.info("Patching config at: %s", path)
    patched = patch(load_config_document(path), env)
    write_config_document(path, patched)
    logger.info("Configuration patched successfully")
    return patched
