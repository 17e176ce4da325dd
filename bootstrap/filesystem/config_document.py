"""JSON reader/writer for the gateway configuration document (openclaw.json)."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from bootstrap.config import CONFIG_FILENAME, LEGACY_CONFIG_FILENAME
from bootstrap.exceptions import ConfigDocumentError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


def parse_config_document(text: str) -> dict[str, Any]:
    """Decode a configuration document; the top level must be a JSON object."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigDocumentError(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        msg = f"Top level must be an object, got {type(data).__name__}"
        raise ConfigDocumentError(msg)
    return data


def load_config_document(path: Path) -> dict[str, Any]:
    """Load the document at ``path``, falling back to an empty one.

    A missing, unreadable or malformed file never aborts the boot: the
    patch step starts from ``{}`` and writes a fresh minimal document.
    """
    if not path.exists():
        logger.info("Config file missing, creating a minimal config")
        return {}
    try:
        return parse_config_document(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ConfigDocumentError) as exc:
        logger.warning("Failed to parse config, starting with empty config: %s", exc)
        return {}


def write_config_document(path: Path, document: dict[str, Any]) -> None:
    """Overwrite ``path`` with ``document`` as two-space indented JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(document, indent=2), encoding="utf-8")


def migrate_legacy_config_name(config_dir: Path) -> bool:
    """Rename ``clawdbot.json`` to ``openclaw.json`` unless the new name already exists.

    Returns True when a rename happened.
    """
    legacy = config_dir / LEGACY_CONFIG_FILENAME
    current = config_dir / CONFIG_FILENAME
    if not legacy.is_file() or current.exists():
        return False
    legacy.rename(current)
    logger.info("Migrated legacy config %s -> %s", legacy.name, current.name)
    return True
