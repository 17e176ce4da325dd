"""Bootstrap configuration loaded from environment variables."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Deployment invariants: never inherited from a restored backup.
GATEWAY_PORT = 18789
GATEWAY_MODE = "local"
GATEWAY_BIND = "lan"
TRUSTED_PROXIES = ("10.1.0.0",)

CONFIG_FILENAME = "openclaw.json"
LEGACY_CONFIG_FILENAME = "clawdbot.json"
SYNC_MARKER_FILENAME = ".last-sync"


class Settings(BaseSettings):
    """Filesystem locations and switches for one bootstrap run."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    debug: bool = False

    # Local state
    config_dir: Path = Path("/root/.openclaw")
    workspace_dir: Path = Path("/root/clawd")
    skills_dir: Path = Path("/root/clawd/skills")

    # Mounted object-storage backup
    backup_dir: Path = Path("/data/moltbot")

    # Gateway process
    gateway_executable: str = "openclaw"
    extra_lock_files: list[Path] = Field(
        default_factory=lambda: [Path("/tmp/openclaw-gateway.lock")]
    )

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    @property
    def runtime_workspace_dir(self) -> Path:
        """Workspace path the agent runtime resolves ``memory/...`` reads against."""
        return self.config_dir / "workspace"

    @property
    def local_marker(self) -> Path:
        return self.config_dir / SYNC_MARKER_FILENAME

    @property
    def remote_marker(self) -> Path:
        return self.backup_dir / SYNC_MARKER_FILENAME

    @property
    def lock_files(self) -> list[Path]:
        return [*self.extra_lock_files, self.config_dir / "gateway.lock"]


class GatewayEnvironment(BaseSettings):
    """Every environment variable the config patch and onboarding steps react to.

    Read once at startup and passed explicitly; nothing downstream looks at
    ``os.environ`` for these values. Empty variables count as unset.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    # Gateway auth
    openclaw_gateway_token: str | None = None
    openclaw_allow_insecure_auth: bool = False
    openclaw_dev_mode: bool = False

    # Telegram
    telegram_bot_token: str | None = None
    telegram_dm_policy: str = "pairing"
    telegram_dm_allow_from: str | None = None

    # Discord
    discord_bot_token: str | None = None
    discord_dm_policy: str = "pairing"

    # Slack
    slack_bot_token: str | None = None
    slack_app_token: str | None = None

    # AI Gateway model override (provider/model-id)
    cf_ai_gateway_model: str | None = None
    cf_ai_gateway_account_id: str | None = None
    cf_ai_gateway_gateway_id: str | None = None
    cloudflare_ai_gateway_api_key: str | None = None
    cf_account_id: str | None = None

    # Direct provider keys, used only for onboarding
    anthropic_api_key: str | None = None
    openai_api_key: str | None = None

    @field_validator("openclaw_allow_insecure_auth", "openclaw_dev_mode", mode="before")
    @classmethod
    def _literal_true(cls, value: Any) -> bool:
        # Only the exact word "true" enables a flag; typos must not abort the boot.
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() == "true"

    @property
    def insecure_auth_allowed(self) -> bool:
        """Device pairing may be bypassed; dev mode is honored for backward compatibility."""
        return self.openclaw_allow_insecure_auth or self.openclaw_dev_mode
