"""Category restore: hydrate local config, workspace and skills from the backup."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from bootstrap.filesystem.config_document import migrate_legacy_config_name
from bootstrap.filesystem.tree_ops import copy_tree, is_dir_empty
from bootstrap.services import sync_clock
from bootstrap.services.layout_service import Category
from bootstrap.services.sync_clock import SyncVerdict

if TYPE_CHECKING:
    from pathlib import Path

    from bootstrap.config import Settings
    from bootstrap.services.layout_service import ResolvedBackup

logger = logging.getLogger(__name__)


class RestoreOutcome(StrEnum):
    RESTORED = "restored"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class RestoreTarget:
    """Local destination of one category.

    ``presence_file`` set: local state exists when that file exists (the
    config dir is created eagerly, so emptiness says nothing). Otherwise
    local state exists when ``destination`` is non-empty.
    """

    category: Category
    destination: Path
    presence_file: Path | None = None

    def is_missing(self) -> bool:
        if self.presence_file is not None:
            return not self.presence_file.is_file()
        return is_dir_empty(self.destination)


class CategoryRestorer:
    """Applies the same restore policy to every category."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def target(self, category: Category) -> RestoreTarget:
        if category is Category.CONFIG:
            return RestoreTarget(category, self.settings.config_dir, self.settings.config_file)
        if category is Category.WORKSPACE:
            return RestoreTarget(category, self.settings.workspace_dir)
        return RestoreTarget(category, self.settings.skills_dir)

    def verdict(self) -> SyncVerdict:
        """Current SyncClock verdict for this backup root and config dir."""
        return sync_clock.compare(self.settings.remote_marker, self.settings.local_marker)

    def restore_if_needed(
        self,
        resolved: ResolvedBackup,
        verdict: SyncVerdict | None = None,
    ) -> RestoreOutcome:
        """Restore ``resolved.category`` when local is missing or the backup is newer.

        ``verdict`` lets the caller pin one SyncClock verdict for a whole boot;
        when omitted the markers are compared now. Copying is additive: local
        files absent from the backup are kept.
        """
        category = resolved.category
        if resolved.source is None:
            logger.debug("No backup for %s, nothing to restore", category)
            return RestoreOutcome.SKIPPED

        target = self.target(category)
        if target.is_missing():
            logger.info(
                "Local %s is empty, restoring from %s (%s)",
                category,
                resolved.source,
                resolved.layout,
            )
        else:
            if verdict is None:
                verdict = self.verdict()
            if verdict is SyncVerdict.SKIP:
                logger.info("Keeping local %s at %s", category, target.destination)
                return RestoreOutcome.SKIPPED
            logger.info("Restoring %s from %s (%s)", category, resolved.source, resolved.layout)

        try:
            copy_tree(resolved.source, target.destination)
            if category is Category.CONFIG:
                migrate_legacy_config_name(target.destination)
        except OSError as exc:
            logger.error(
                "Failed to restore %s from %s: %s. Continuing without it.",
                category,
                resolved.source,
                exc,
            )
            return RestoreOutcome.FAILED

        self._copy_marker()
        logger.info("Restored %s from backup", category)
        return RestoreOutcome.RESTORED

    def _copy_marker(self) -> None:
        """Best effort: make the next boot see the marker this restore corresponds to."""
        remote_marker = self.settings.remote_marker
        if not remote_marker.is_file():
            return
        local_marker = self.settings.local_marker
        try:
            local_marker.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(remote_marker, local_marker)
        except OSError as exc:
            logger.warning("Could not copy sync marker to %s: %s", local_marker, exc)
